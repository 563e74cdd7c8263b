"""
MCP protocol server.

``CalculatorProtocol`` answers the five MCP requests against the widget
catalog. ``create_calculator_server`` wires it into a fresh low-level
``mcp`` Server; the session manager builds one per connected client.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from mcp import types
from mcp.server.lowlevel import Server

from ..config import SERVER_NAME, SERVER_VERSION, WIDGET_MIME_TYPE
from ..errors import CalculatorError, UnknownResource, UnknownTool
from ..services.calculator import compute, parse_tool_arguments
from ..widgets.catalog import WidgetCatalog, is_combined, widget_invocation_meta

logger = logging.getLogger(__name__)


class CalculatorProtocol:
    """
    Request handlers for the calculator app.

    Holds no per-request state: every method is a pure function of its
    arguments plus the static catalog, so one instance may serve any number
    of concurrent calls.
    """

    def __init__(self, catalog: WidgetCatalog):
        self.catalog = catalog

    def list_tools(self) -> types.ListToolsResult:
        return types.ListToolsResult(tools=list(self.catalog.tools))

    def list_resources(self) -> types.ListResourcesResult:
        return types.ListResourcesResult(resources=list(self.catalog.resources))

    def list_resource_templates(self) -> types.ListResourceTemplatesResult:
        return types.ListResourceTemplatesResult(
            resourceTemplates=list(self.catalog.resource_templates)
        )

    def read_resource(self, uri: str) -> types.ReadResourceResult:
        """Return the widget markup for ``uri``, re-read from disk."""
        registry = self.catalog.registry
        widget = registry.get_by_uri(uri)
        if widget is None:
            raise UnknownResource(uri)

        return types.ReadResourceResult(
            contents=[
                types.TextResourceContents(
                    uri=widget.template_uri,
                    mimeType=WIDGET_MIME_TYPE,
                    text=registry.current_html(widget),
                    _meta=self.catalog.descriptor_meta(widget),
                )
            ]
        )

    def call_tool(
        self, name: str, arguments: Optional[Mapping[str, Any]]
    ) -> types.CallToolResult:
        """
        Validate the arguments, run the arithmetic and describe the result.

        Raises:
            UnknownTool: no widget has this id.
            InvalidArguments: missing or non-numeric fields, bad operation.
            DivideByZero: a divide with ``b == 0``.
        """
        widget = self.catalog.registry.get(name)
        if widget is None:
            raise UnknownTool(name)

        combined = is_combined(widget)
        operation, parsed = parse_tool_arguments(widget.id, arguments, combined)
        calculation = compute(operation, parsed.a, parsed.b)

        structured: Dict[str, Any] = {"a": calculation.a, "b": calculation.b}
        if combined:
            structured["operation"] = operation.value
        structured["result"] = calculation.result

        return types.CallToolResult(
            content=[
                types.TextContent(
                    type="text",
                    text=f"{calculation.summary()} {widget.response_text}",
                )
            ],
            structuredContent=structured,
            isError=False,
            _meta=widget_invocation_meta(widget),
        )


def _as_request_handler(method_name: str, call: Callable[[Any], Any]):
    """Adapt a synchronous protocol method to the low-level handler shape."""

    async def handler(request) -> types.ServerResult:
        try:
            return types.ServerResult(call(request))
        except CalculatorError as e:
            logger.info("%s failed: %s", method_name, e.message)
            raise e.to_mcp_error() from e

    return handler


def create_calculator_server(catalog: WidgetCatalog) -> Server:
    """Build a new protocol server instance bound to ``catalog``."""
    protocol = CalculatorProtocol(catalog)
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    # Registering these request types also advertises the tools and
    # resources capabilities during initialization.
    server.request_handlers[types.ListToolsRequest] = _as_request_handler(
        "tools/list", lambda req: protocol.list_tools()
    )
    server.request_handlers[types.ListResourcesRequest] = _as_request_handler(
        "resources/list", lambda req: protocol.list_resources()
    )
    server.request_handlers[types.ListResourceTemplatesRequest] = _as_request_handler(
        "resources/templates/list", lambda req: protocol.list_resource_templates()
    )
    server.request_handlers[types.ReadResourceRequest] = _as_request_handler(
        "resources/read", lambda req: protocol.read_resource(str(req.params.uri))
    )
    server.request_handlers[types.CallToolRequest] = _as_request_handler(
        "tools/call",
        lambda req: protocol.call_tool(req.params.name, req.params.arguments),
    )
    return server
