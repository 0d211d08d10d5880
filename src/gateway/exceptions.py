"""Custom exceptions for tool execution."""

from src.exceptions import MCPGatewayError


class GatewayError(MCPGatewayError):
    """Base exception for gateway-specific errors."""
    pass


class ToolNotFoundError(GatewayError):
    """Raised when no derived tool matches the requested name.

    Attributes:
        tool_name: Name of the tool that was not found.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Tool '{tool_name}' not found for merchant",
            code="TOOL_NOT_FOUND"
        )
        self.tool_name = tool_name


class MissingParameterError(GatewayError):
    """Raised when a required tool argument is absent.

    Attributes:
        parameter: First missing parameter, in declaration order.
    """

    def __init__(self, parameter: str):
        super().__init__(
            message=f"Missing required parameter '{parameter}'",
            code="MISSING_PARAMETER"
        )
        self.parameter = parameter


class InvalidArgumentError(GatewayError):
    """Raised when an argument does not match its declared kind.

    Attributes:
        parameter: Offending parameter.
        expected: Expected kind ("scalar", "array" or "object").
    """

    def __init__(self, parameter: str, expected: str):
        super().__init__(
            message=f"Invalid value for parameter '{parameter}': expected {expected}",
            code="INVALID_ARGUMENT"
        )
        self.parameter = parameter
        self.expected = expected


class UnresolvedTemplateError(GatewayError):
    """Raised when a ``{{placeholder}}`` has no matching argument.

    Attributes:
        placeholder: Name inside the braces.
    """

    def __init__(self, placeholder: str):
        super().__init__(
            message=f"Unresolved template placeholder '{{{{{placeholder}}}}}'",
            code="UNRESOLVED_TEMPLATE"
        )
        self.placeholder = placeholder


class BackendTimeoutError(GatewayError):
    """Raised when the tenant API doesn't respond in time.

    Attributes:
        backend_url: URL of the backend that timed out.
        timeout_seconds: Timeout duration that was exceeded.
    """

    def __init__(self, backend_url: str, timeout_seconds: float):
        super().__init__(
            message=f"Request to '{backend_url}' timed out after {timeout_seconds}s",
            code="BACKEND_TIMEOUT"
        )
        self.backend_url = backend_url
        self.timeout_seconds = timeout_seconds


class BackendUnavailableError(GatewayError):
    """Raised when the tenant API is unreachable.

    Attributes:
        backend_url: URL of the unreachable backend.
        reason: Description of the connection failure.
    """

    def __init__(self, backend_url: str, reason: str = "Connection failed"):
        super().__init__(
            message=f"Request to '{backend_url}' failed: {reason}",
            code="BACKEND_UNAVAILABLE"
        )
        self.backend_url = backend_url
        self.reason = reason


class PayloadTooLargeError(GatewayError):
    """Raised when the tool arguments exceed the size limit.

    Attributes:
        size_bytes: Actual size of the payload.
        max_bytes: Maximum allowed size.
    """

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            message=f"Payload size {size_bytes} bytes exceeds limit of {max_bytes} bytes",
            code="PAYLOAD_TOO_LARGE"
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
