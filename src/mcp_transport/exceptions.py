"""Errors that surface as JSON-RPC error objects."""

from src.exceptions import MCPGatewayError

from .schemas import MCPErrorCodes


class JSONRPCError(MCPGatewayError):
    """Protocol-level failure carrying a JSON-RPC error code.

    Attributes:
        rpc_code: Numeric JSON-RPC error code.
    """

    def __init__(self, rpc_code: int, message: str, code: str | None = None):
        super().__init__(message=message, code=code)
        self.rpc_code = rpc_code


class InvalidRequestError(JSONRPCError):
    """Raised when a message is not a JSON-RPC request object."""

    def __init__(self, message: str = "Invalid Request"):
        super().__init__(MCPErrorCodes.INVALID_REQUEST, message, code="INVALID_REQUEST")


class InvalidParamsError(JSONRPCError):
    """Raised when method params are missing or malformed."""

    def __init__(self, message: str):
        super().__init__(MCPErrorCodes.INVALID_PARAMS, message, code="INVALID_PARAMS")


class MethodNotFoundError(JSONRPCError):
    """Raised for methods outside the dispatcher's table."""

    def __init__(self, method: str):
        super().__init__(
            MCPErrorCodes.METHOD_NOT_FOUND,
            f"Method not found: {method}",
            code="METHOD_NOT_FOUND",
        )
        self.method = method
