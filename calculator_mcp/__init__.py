"""
Calculator MCP app.

Arithmetic tools and their widgets exposed to a chat client through the
Model Context Protocol over Server-Sent Events.
"""

__version__ = "1.0.0"
