"""FastAPI router for direct tool execution."""

from typing import Annotated
import httpx

from fastapi import APIRouter, Depends

from src.config import Settings, get_settings
from src.dependencies import get_http_client
from src.registry.store import TenantStore, get_tenant_store

from .schemas import ExecuteToolRequest, ExecuteToolResponse
from .service import invoke_tool


router = APIRouter(prefix="/api/mcp", tags=["gateway"])


@router.post(
    "/merchants/{merchant_id}/tools/{tool_name}",
    response_model=ExecuteToolResponse,
    response_model_exclude_none=True,
)
async def execute_tool_endpoint(
    merchant_id: str,
    tool_name: str,
    request: ExecuteToolRequest,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ExecuteToolResponse:
    """Execute one merchant tool outside the JSON-RPC envelope.

    Unknown merchants and tools are answered with 404 by the application
    exception handlers; downstream failures are a ``success: false`` result.
    """
    result = await invoke_tool(
        store=store,
        client=client,
        tenant_id=merchant_id,
        tool_name=tool_name,
        arguments=request.args,
        timeout=settings.TOOL_TIMEOUT_SECONDS,
        max_payload_bytes=settings.TOOL_MAX_ARGUMENT_BYTES,
    )
    return ExecuteToolResponse(result=result)
