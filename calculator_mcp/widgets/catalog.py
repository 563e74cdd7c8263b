"""
Tool / resource catalog.

Derives the three MCP listings (tools, resources, resource templates) from
the widget registry. Each widget gets exactly one descriptor-metadata dict
and all three projections reference it, so the views cannot drift apart.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from mcp import types

from ..config import WIDGET_MIME_TYPE
from ..services.calculator import BASIC_INPUT_SCHEMA, SUPER_CALCULATOR_INPUT_SCHEMA
from .registry import SUPER_CALCULATOR_ID, Widget, WidgetRegistry

SUPER_CALCULATOR_DESCRIPTION = (
    "A super calculator that can perform addition, subtraction, "
    "multiplication, and division operations"
)

READ_ONLY_ANNOTATIONS = types.ToolAnnotations(
    destructiveHint=False,
    openWorldHint=False,
    readOnlyHint=True,
)


def widget_descriptor_meta(widget: Widget, widget_domain: str) -> Dict[str, Any]:
    """
    The ``_meta`` block that tells the host how to render a widget.

    Includes the output template, invocation status text, and the CSP
    allow-list limiting the widget to the configured widget domain.
    """
    return {
        "openai/outputTemplate": widget.template_uri,
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
        "openai/widgetAccessible": True,
        "openai/widgetDomain": widget_domain,
        "openai/widgetCSP": {
            "connect_domains": [widget_domain],
            "resource_domains": [widget_domain],
        },
        "openai/widgetPrefersBorder": True,
    }


def widget_invocation_meta(widget: Widget) -> Dict[str, Any]:
    """The ``_meta`` block attached to tool call results."""
    return {
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
    }


def is_combined(widget: Widget) -> bool:
    return widget.id == SUPER_CALCULATOR_ID


class WidgetCatalog:
    """
    Read-only MCP listings computed once at startup.

    Attributes:
        registry: the widget registry the listings were derived from.
        tools / resources / resource_templates: tuples of MCP types.
    """

    def __init__(self, registry: WidgetRegistry):
        self.registry = registry
        self.widget_domain = registry.widget_domain

        self._meta: Mapping[str, Dict[str, Any]] = MappingProxyType(
            {w.id: widget_descriptor_meta(w, self.widget_domain) for w in registry}
        )

        self.tools: Tuple[types.Tool, ...] = tuple(self._tool(w) for w in registry)
        self.resources: Tuple[types.Resource, ...] = tuple(
            self._resource(w) for w in registry
        )
        self.resource_templates: Tuple[types.ResourceTemplate, ...] = tuple(
            self._resource_template(w) for w in registry
        )

    def descriptor_meta(self, widget: Widget) -> Dict[str, Any]:
        return self._meta[widget.id]

    # ── Projections ────────────────────────────────────────────────

    def _tool(self, widget: Widget) -> types.Tool:
        if is_combined(widget):
            description = SUPER_CALCULATOR_DESCRIPTION
            input_schema = SUPER_CALCULATOR_INPUT_SCHEMA
        else:
            description = f"Performs {widget.title.lower()} and shows a calculator UI"
            input_schema = BASIC_INPUT_SCHEMA

        return types.Tool(
            name=widget.id,
            title=widget.title,
            description=description,
            inputSchema=input_schema,
            annotations=READ_ONLY_ANNOTATIONS,
            _meta=self.descriptor_meta(widget),
        )

    def _resource(self, widget: Widget) -> types.Resource:
        return types.Resource(
            uri=widget.template_uri,
            name=widget.title,
            description=f"{widget.title} widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=self.descriptor_meta(widget),
        )

    def _resource_template(self, widget: Widget) -> types.ResourceTemplate:
        return types.ResourceTemplate(
            uriTemplate=widget.template_uri,
            name=widget.title,
            description=f"{widget.title} widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=self.descriptor_meta(widget),
        )
