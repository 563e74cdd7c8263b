"""
API module for the MCP transport and HTTP endpoints.
"""
from .mcp import router as mcp_router
from .http import router as http_router
from .middleware import RequestMiddleware

__all__ = ['mcp_router', 'http_router', 'RequestMiddleware']
