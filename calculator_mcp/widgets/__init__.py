"""
Calculator widgets and the MCP listings derived from them.
"""
from .registry import Widget, WidgetRegistry
from .catalog import WidgetCatalog

__all__ = ['Widget', 'WidgetRegistry', 'WidgetCatalog']
