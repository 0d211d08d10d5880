"""Business logic for MCP protocol handlers.

The dispatcher is stateless: every message re-reads the tenant from the
store and re-derives its tools, so concurrent calls share nothing but the
HTTP client.
"""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.config import Settings
from src.gateway.exceptions import ToolNotFoundError
from src.gateway.service import execute_tool
from src.registry.exceptions import TenantNotFoundError
from src.registry.schemas import DerivedTool, TenantSnapshot
from src.registry.service import derive_tools_for_tenant, find_tool
from src.registry.store import TenantStore

from .exceptions import (
    InvalidParamsError,
    InvalidRequestError,
    JSONRPCError,
    MethodNotFoundError,
)
from .schemas import (
    MCPContent,
    MCPErrorCodes,
    MCPInitializeResult,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPServerInfo,
    MCPServerMetadata,
    MCPTool,
    MCPToolCallParams,
    MCPToolCallResult,
    MCPToolListResult,
    RequestId,
)


logger = structlog.get_logger("mcp")

# Methods answered with an empty result to complete the client handshake
ACKNOWLEDGED_METHODS = {"ping", "notifications/initialized"}


def handle_initialize(
    snapshot: TenantSnapshot,
    tools: list[DerivedTool],
    settings: Settings,
) -> MCPInitializeResult:
    """Build the initialize result (also the stream's server-info payload).

    Args:
        snapshot: Tenant state.
        tools: Tools derived from the same snapshot.
        settings: Application settings.

    Returns:
        Server initialization response.
    """
    tenant = snapshot.tenant
    return MCPInitializeResult(
        protocolVersion=settings.MCP_PROTOCOL_VERSION,
        serverInfo=MCPServerInfo(
            name=f"{tenant.name} MCP Server",
            version=settings.MCP_SERVER_VERSION,
            vendor=settings.MCP_SERVER_VENDOR,
            description=f"Dynamic MCP server for {tenant.name}",
            metadata=MCPServerMetadata(
                merchantId=tenant.id,
                merchantSlug=tenant.slug,
                toolsCount=len(tools),
            ),
        ),
    )


def handle_tools_list(tools: list[DerivedTool]) -> MCPToolListResult:
    """Handle tools/list: one MCP tool per derived tool, stored order."""
    return MCPToolListResult(
        tools=[
            MCPTool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in tools
        ]
    )


def parse_tool_call_params(params: Any) -> MCPToolCallParams:
    """Validate tools/call params.

    Raises:
        InvalidParamsError: If params is not an object or lacks a tool name.
    """
    if not isinstance(params, dict):
        raise InvalidParamsError("tools/call requires an object with 'name' and 'arguments'")
    try:
        return MCPToolCallParams(**params)
    except ValidationError as e:
        raise InvalidParamsError(f"Invalid tools/call params: {e.errors()[0]['msg']}") from None


async def handle_tools_call(
    client: httpx.AsyncClient,
    tools: list[DerivedTool],
    params: MCPToolCallParams,
    settings: Settings,
) -> MCPToolCallResult:
    """Handle tools/call request.

    Args:
        client: HTTP client for tenant API requests.
        tools: Tools derived for the tenant.
        params: Validated call params.
        settings: Application settings (timeouts, limits).

    Returns:
        Tool execution result wrapped as MCP text content.

    Raises:
        ToolNotFoundError: If no derived tool matches the name.
        InvalidParamsError: If ``arguments`` is absent and the tool has required parameters.
    """
    tool = find_tool(tools, params.name)
    if tool is None:
        raise ToolNotFoundError(params.name)

    if params.arguments is None and tool.input_schema.get("required"):
        raise InvalidParamsError(
            f"Tool '{tool.name}' requires arguments: {', '.join(tool.input_schema['required'])}"
        )

    result = await execute_tool(
        client,
        tool,
        params.arguments or {},
        timeout=settings.TOOL_TIMEOUT_SECONDS,
        max_payload_bytes=settings.TOOL_MAX_ARGUMENT_BYTES,
    )
    return MCPToolCallResult(
        content=[MCPContent(type="text", text=result.render())],
        isError=not result.success,
    )


def parse_request(message: Any) -> MCPJSONRPCRequest:
    """Validate the JSON-RPC envelope of a decoded message.

    Raises:
        InvalidRequestError: If the message is not a request object.
    """
    if not isinstance(message, dict) or not isinstance(message.get("method"), str):
        raise InvalidRequestError("Invalid Request: expected an object with a string 'method'")
    try:
        return MCPJSONRPCRequest(
            id=message.get("id"),
            method=message["method"],
            params=message.get("params") if isinstance(message.get("params"), dict) else None,
        )
    except ValidationError:
        raise InvalidRequestError("Invalid Request: malformed 'id'") from None


def _request_id(message: Any) -> RequestId:
    if isinstance(message, dict) and isinstance(message.get("id"), (str, int, float)):
        return message["id"]
    return None


async def dispatch(
    message: Any,
    tenant_id: int | str,
    store: TenantStore,
    client: httpx.AsyncClient,
    settings: Settings,
) -> MCPJSONRPCResponse:
    """Answer one JSON-RPC message for a tenant.

    Every message gets exactly one response carrying its id unchanged.

    Args:
        message: Decoded JSON value (syntax already checked by the transport).
        tenant_id: Tenant selected by the endpoint path.
        store: Tenant store, read fresh for this message.
        client: HTTP client for tool calls.
        settings: Application settings.

    Returns:
        The JSON-RPC response.
    """
    request_id = _request_id(message)
    method = message.get("method") if isinstance(message, dict) else None

    try:
        request = parse_request(message)
        method = request.method

        if method in ACKNOWLEDGED_METHODS:
            return MCPJSONRPCResponse.success(request.id, {})

        if method == "initialize":
            snapshot, tools = await derive_tools_for_tenant(store, tenant_id)
            result = handle_initialize(snapshot, tools, settings)
            return MCPJSONRPCResponse.success(request.id, result.model_dump(exclude_none=True))

        elif method == "tools/list":
            _, tools = await derive_tools_for_tenant(store, tenant_id)
            result = handle_tools_list(tools)
            return MCPJSONRPCResponse.success(request.id, result.model_dump())

        elif method == "tools/call":
            call_params = parse_tool_call_params(message.get("params"))
            _, tools = await derive_tools_for_tenant(store, tenant_id)
            result = await handle_tools_call(client, tools, call_params, settings)
            return MCPJSONRPCResponse.success(request.id, result.model_dump())

        raise MethodNotFoundError(method)

    except JSONRPCError as e:
        return MCPJSONRPCResponse.error_response(request_id, e.rpc_code, e.message)
    except TenantNotFoundError as e:
        return MCPJSONRPCResponse.error_response(request_id, MCPErrorCodes.TENANT_NOT_FOUND, e.message)
    except ToolNotFoundError as e:
        return MCPJSONRPCResponse.error_response(request_id, MCPErrorCodes.TOOL_NOT_FOUND, e.message)
    except Exception as e:
        logger.error("rpc_internal_error", method=method, tenant_id=str(tenant_id), error=str(e), exc_info=True)
        return MCPJSONRPCResponse.error_response(
            request_id,
            MCPErrorCodes.INTERNAL_ERROR,
            f"Internal error: {str(e)}",
        )
