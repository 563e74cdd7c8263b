"""
Error taxonomy.

Every failure surfaced to a client is a ``CalculatorError``. Each class
knows its HTTP status (for the REST-style endpoints) and its JSON-RPC error
code (for MCP requests), so the two outer layers only have to translate.
"""

from mcp import types
from mcp.shared.exceptions import McpError

# JSON-RPC code reserved by MCP for "resource not found"
RESOURCE_NOT_FOUND = -32002


class CalculatorError(Exception):
    """Base class for client-facing failures."""

    status_code: int = 500
    error_code: int = types.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_mcp_error(self) -> McpError:
        """Wrap this failure as a protocol-level error object."""
        return McpError(types.ErrorData(code=self.error_code, message=self.message))


# ============================================
# Protocol (MCP) failures
# ============================================


class UnknownTool(CalculatorError):
    status_code = 404
    error_code = types.INVALID_PARAMS

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownResource(CalculatorError):
    status_code = 404
    error_code = RESOURCE_NOT_FOUND

    def __init__(self, uri: str):
        super().__init__(f"Unknown resource: {uri}")
        self.uri = uri


class InvalidArguments(CalculatorError):
    status_code = 400
    error_code = types.INVALID_PARAMS


class DivideByZero(CalculatorError):
    status_code = 400
    error_code = types.INVALID_PARAMS

    def __init__(self, message: str = "Cannot divide by zero"):
        super().__init__(message)


# ============================================
# Session / transport failures
# ============================================


class MissingSessionId(CalculatorError):
    status_code = 400

    def __init__(self, message: str = "Missing sessionId query parameter"):
        super().__init__(message)


class UnknownSession(CalculatorError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__("Unknown session")
        self.session_id = session_id


class InvalidMessage(CalculatorError):
    status_code = 400
    error_code = types.PARSE_ERROR


class TransportEstablishmentFailure(CalculatorError):
    status_code = 500

    def __init__(self, message: str = "Failed to establish SSE connection"):
        super().__init__(message)


# ============================================
# HTTP failures
# ============================================


class InvalidInput(CalculatorError):
    """Rejected /calculate body. Rendered as ``{"error": ...}`` JSON."""

    status_code = 400


class PathTraversal(CalculatorError):
    status_code = 404

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class NotFound(CalculatorError):
    status_code = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)
