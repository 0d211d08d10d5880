"""HTTP transports for the MCP protocol: synchronous JSON-RPC and the event stream."""

import json
from typing import Annotated
import httpx

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from src.config import Settings, get_settings
from src.dependencies import get_http_client
from src.registry.exceptions import TenantNotFoundError
from src.registry.service import derive_tools_for_tenant
from src.registry.store import TenantStore, get_tenant_store

from .schemas import MCPErrorCodes, MCPJSONRPCResponse, RequestId
from .service import dispatch, handle_initialize, handle_tools_list
from .stream import DiscoveryStream


router = APIRouter(prefix="/api/mcp", tags=["mcp"])


def _jsonrpc_error_response(
    request_id: RequestId,
    code: int,
    message: str,
    status_code: int = 200,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MCPJSONRPCResponse.error_response(
            id=request_id,
            code=code,
            message=message,
        ).to_wire(),
    )


@router.post("/merchants/{merchant_id}/rpc", operation_id="mcp_rpc")
async def rpc_endpoint(
    merchant_id: str,
    request: Request,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """Handle one JSON-RPC 2.0 message for a merchant.

    Always answers with a JSON-RPC envelope; malformed JSON is a parse error.
    """
    try:
        message = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _jsonrpc_error_response(None, MCPErrorCodes.PARSE_ERROR, "Parse error")

    response = await dispatch(message, merchant_id, store, client, settings)
    return JSONResponse(content=response.to_wire())


@router.get("/merchants/{merchant_id}/stream", operation_id="mcp_stream")
async def stream_endpoint(
    merchant_id: str,
    request: Request,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Open the discovery stream: server-info, tools-list, then heartbeats.

    Tool invocation is not available here; use the rpc endpoint.
    """
    try:
        snapshot, tools = await derive_tools_for_tenant(store, merchant_id)
    except TenantNotFoundError as e:
        return _jsonrpc_error_response(
            None,
            MCPErrorCodes.TENANT_NOT_FOUND,
            e.message,
            status_code=404,
        )

    stream = DiscoveryStream(
        server_info=handle_initialize(snapshot, tools, settings).model_dump(exclude_none=True),
        tools_list=handle_tools_list(tools).model_dump(),
        heartbeat_interval=settings.MCP_HEARTBEAT_SECONDS,
        is_disconnected=request.is_disconnected,
        tenant_id=snapshot.tenant.id,
    )
    return StreamingResponse(
        stream.events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
