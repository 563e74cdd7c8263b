"""
Widget registry.

Static table of the calculator widgets rendered by the host chat client.
Widgets are immutable; the registry indexes them by id and by template URI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Widget:
    """One embeddable calculator UI and the text shown around it."""

    id: str
    title: str
    template_uri: str
    invoking: str
    invoked: str
    html: str
    response_text: str


# (id, title, invoking, invoked, response_text)
WIDGET_DEFINITIONS: Tuple[Tuple[str, str, str, str, str], ...] = (
    (
        "add",
        "Addition Calculator",
        "Opening addition calculator...",
        "Addition calculator ready",
        "Addition calculator rendered!",
    ),
    (
        "subtract",
        "Subtraction Calculator",
        "Opening subtraction calculator...",
        "Subtraction calculator ready",
        "Subtraction calculator rendered!",
    ),
    (
        "multiply",
        "Multiplication Calculator",
        "Opening multiplication calculator...",
        "Multiplication calculator ready",
        "Multiplication calculator rendered!",
    ),
    (
        "divide",
        "Division Calculator",
        "Opening division calculator...",
        "Division calculator ready",
        "Division calculator rendered!",
    ),
    (
        "super-calculator",
        "Super Calculator",
        "Opening super calculator...",
        "Super calculator ready",
        "Super calculator rendered!",
    ),
)

SUPER_CALCULATOR_ID = "super-calculator"


def template_uri_for(widget_id: str) -> str:
    return f"ui://widget/{widget_id}.html"


def fallback_widget_html(widget_id: str, widget_domain: str) -> str:
    """Minimal HTML shell that loads the widget bundle from the widget domain."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{ font-family: -apple-system, BlinkMacSystemFont, sans-serif; }}
  </style>
</head>
<body>
  <div id="{widget_id}-root"></div>
  <script type="module" src="{widget_domain}/assets/{widget_id}.js"></script>
</body>
</html>"""


def read_widget_html(widget_id: str, assets_dir: Path, widget_domain: str) -> str:
    """
    Read ``<assets_dir>/<widget_id>.html``.

    Falls back to a generated shell when the built file is missing or
    unreadable, so a half-built assets directory never breaks startup.
    """
    html_path = Path(assets_dir) / f"{widget_id}.html"
    try:
        return html_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not read widget HTML %s: %s", html_path, e)
    return fallback_widget_html(widget_id, widget_domain)


class WidgetRegistry:
    """
    Read-only collection of widgets with lookups by id and template URI.

    Both keys must be unique; a duplicate is a programming error and is
    rejected at construction.
    """

    def __init__(self, widgets, assets_dir: Path, widget_domain: str):
        self.assets_dir = Path(assets_dir)
        self.widget_domain = widget_domain
        self._widgets: Tuple[Widget, ...] = tuple(widgets)
        self._by_id: Dict[str, Widget] = {}
        self._by_uri: Dict[str, Widget] = {}

        for widget in self._widgets:
            if widget.id in self._by_id:
                raise ValueError(f"Duplicate widget id: {widget.id}")
            if widget.template_uri in self._by_uri:
                raise ValueError(f"Duplicate widget template URI: {widget.template_uri}")
            self._by_id[widget.id] = widget
            self._by_uri[widget.template_uri] = widget

    @classmethod
    def load(cls, assets_dir: Path, widget_domain: str) -> "WidgetRegistry":
        """Build the registry from the built-in definitions."""
        widgets = [
            Widget(
                id=widget_id,
                title=title,
                template_uri=template_uri_for(widget_id),
                invoking=invoking,
                invoked=invoked,
                html=read_widget_html(widget_id, assets_dir, widget_domain),
                response_text=response_text,
            )
            for widget_id, title, invoking, invoked, response_text in WIDGET_DEFINITIONS
        ]
        return cls(widgets, assets_dir, widget_domain)

    def __iter__(self) -> Iterator[Widget]:
        return iter(self._widgets)

    def __len__(self) -> int:
        return len(self._widgets)

    def get(self, widget_id: str) -> Optional[Widget]:
        return self._by_id.get(widget_id)

    def get_by_uri(self, uri: str) -> Optional[Widget]:
        return self._by_uri.get(uri)

    def ids(self) -> Tuple[str, ...]:
        return tuple(w.id for w in self._widgets)

    def current_html(self, widget: Widget) -> str:
        """Re-read the widget's HTML from disk to pick up rebuilt assets."""
        return read_widget_html(widget.id, self.assets_dir, self.widget_domain)
