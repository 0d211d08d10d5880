"""Pydantic schemas for tool execution."""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field


class ToolResult(BaseModel):
    """Normalized outcome of one tool execution.

    A downstream 4xx/5xx is still ``success=True`` with the status set;
    only failures before or during transport produce ``success=False``.

    Attributes:
        success: Whether the downstream call completed at the transport level.
        status: HTTP status returned by the tenant API.
        data: Response body (JSON when decodable, text otherwise).
        error: Human-readable failure reason.
    """

    success: bool = Field(..., description="Whether the call completed")
    status: int | None = Field(default=None, description="Downstream HTTP status")
    data: Any | None = Field(default=None, description="Downstream response body")
    error: str | None = Field(default=None, description="Failure reason")

    @classmethod
    def failure(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    def render(self) -> str:
        """Render as the indented JSON text embedded in MCP content."""
        return json.dumps(self.model_dump(exclude_none=True), indent=2, ensure_ascii=False)


class ExecuteToolRequest(BaseModel):
    """Body of the direct tool execution endpoint.

    Attributes:
        args: Arguments to pass to the tool.
    """

    args: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ExecuteToolResponse(BaseModel):
    """JSON-RPC shaped wrapper returned by the direct execution endpoint."""

    jsonrpc: Literal["2.0"] = Field(default="2.0", description="JSON-RPC version")
    result: ToolResult
