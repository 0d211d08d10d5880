"""Gateway module - tool execution against tenant APIs."""

from .schemas import ToolResult, ExecuteToolRequest, ExecuteToolResponse
from .exceptions import (
    GatewayError,
    ToolNotFoundError,
    MissingParameterError,
    InvalidArgumentError,
    UnresolvedTemplateError,
    BackendTimeoutError,
    BackendUnavailableError,
    PayloadTooLargeError,
)
from .service import execute_tool, invoke_tool
from .router import router


__all__ = [
    # Schemas
    "ToolResult",
    "ExecuteToolRequest",
    "ExecuteToolResponse",
    # Exceptions
    "GatewayError",
    "ToolNotFoundError",
    "MissingParameterError",
    "InvalidArgumentError",
    "UnresolvedTemplateError",
    "BackendTimeoutError",
    "BackendUnavailableError",
    "PayloadTooLargeError",
    # Service
    "execute_tool",
    "invoke_tool",
    # Router
    "router",
]
