"""FastAPI router for merchant discovery endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.config import Settings, get_settings

from .schemas import ServerListResponse
from .service import derive_tools_for_tenant, list_servers, tenant_base_url
from .store import TenantStore, get_tenant_store


router = APIRouter(prefix="/api/mcp", tags=["merchants"])


def public_base_url(request: Request, settings: Settings) -> str:
    """Base URL advertised to clients, preferring the configured one."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.get("/servers", response_model=ServerListResponse)
async def list_servers_endpoint(
    request: Request,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ServerListResponse:
    """List one MCP server per merchant.

    Consumed by the client configuration generator.
    """
    servers = await list_servers(store, public_base_url(request, settings))
    return ServerListResponse(servers=servers, count=len(servers))


@router.get("/merchants/{merchant_id}/tools")
async def list_merchant_tools(
    merchant_id: str,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
) -> dict[str, Any]:
    """List the tools derived from a merchant's APIs."""
    snapshot, tools = await derive_tools_for_tenant(store, merchant_id)
    return {
        "merchant": snapshot.tenant.model_dump(),
        "tools": [tool.descriptor() for tool in tools],
        "count": len(tools),
    }


@router.get("/merchants/{merchant_id}/info")
async def merchant_server_info(
    merchant_id: str,
    request: Request,
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    """Describe a merchant's MCP server and its endpoints."""
    snapshot, tools = await derive_tools_for_tenant(store, merchant_id)
    tenant = snapshot.tenant
    base = tenant_base_url(public_base_url(request, settings), tenant.id)
    return {
        "name": f"{tenant.name} MCP Server",
        "version": settings.MCP_SERVER_VERSION,
        "protocolVersion": settings.MCP_PROTOCOL_VERSION,
        "merchant": tenant.model_dump(),
        "capabilities": {"tools": True, "streaming": True, "jsonRpc": True},
        "toolsCount": len(tools),
        "tools": [tool.name for tool in tools],
        "endpoints": {
            "rpc": f"{base}/rpc",
            "stream": f"{base}/stream",
            "tools": f"{base}/tools",
            "execute": f"{base}/tools/{{toolName}}",
        },
    }
