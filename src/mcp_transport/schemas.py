"""Pydantic schemas for MCP protocol messages."""

from typing import Any, Literal
from pydantic import BaseModel, Field


class MCPErrorCodes:
    """Standard MCP/JSON-RPC error codes."""

    # JSON-RPC standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Unknown tools share the method-not-found class
    TOOL_NOT_FOUND = METHOD_NOT_FOUND

    # Custom gateway errors (-32000 to -32099)
    TENANT_NOT_FOUND = -32001


class MCPTool(BaseModel):
    """MCP tool definition."""

    name: str
    description: str
    inputSchema: dict[str, Any]


class MCPToolListResult(BaseModel):
    """Result for tools/list."""

    tools: list[MCPTool]


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call.

    ``arguments`` stays None when the caller omitted it, so the dispatcher
    can tell an absent map from an empty one.
    """

    name: str
    arguments: dict[str, Any] | None = None


class MCPContent(BaseModel):
    """Content item in tool response."""

    type: Literal["text"] = "text"
    text: str


class MCPToolCallResult(BaseModel):
    """Result for tools/call."""

    content: list[MCPContent]
    isError: bool = False


class MCPServerMetadata(BaseModel):
    merchantId: int
    merchantSlug: str
    toolsCount: int


class MCPServerInfo(BaseModel):
    name: str
    version: str
    vendor: str | None = None
    description: str | None = None
    metadata: MCPServerMetadata


class MCPInitializeResult(BaseModel):
    """Result for initialize, also sent as the stream's server-info event."""

    protocolVersion: str
    capabilities: dict[str, Any] = Field(
        default_factory=lambda: {"tools": {"listChanged": False}}
    )
    serverInfo: MCPServerInfo


class MCPErrorDetail(BaseModel):
    """Error details in JSON-RPC format.

    Attributes:
        code: Error code (negative integers for protocol errors).
        message: Human-readable error message.
        data: Optional additional error data.
    """

    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Any | None = Field(default=None, description="Additional error data")


# Any JSON string or number, echoed back unchanged
RequestId = str | int | float | None


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    method: str
    params: dict[str, Any] | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response.

    ``id`` always echoes the request id unchanged, null included.
    """

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    result: Any | None = None
    error: MCPErrorDetail | None = None

    @classmethod
    def success(cls, id: RequestId, result: Any) -> "MCPJSONRPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls,
        id: RequestId,
        code: int,
        message: str,
        data: Any | None = None,
    ) -> "MCPJSONRPCResponse":
        return cls(id=id, error=MCPErrorDetail(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with exactly one of ``result``/``error`` and ``id`` always present."""
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            message["error"] = self.error.model_dump(exclude_none=True)
        else:
            message["result"] = self.result if self.result is not None else {}
        return message
