"""Build IDE ``mcpServers`` configuration from the gateway's server directory."""

from typing import Any

import httpx

from src.registry.schemas import ServerDescriptor, ServerListResponse


SERVER_KEY_PREFIX = "ai-marketplace"
BRIDGE_COMMAND = "merchant-mcp-bridge"


async def fetch_servers(client: httpx.AsyncClient, base_url: str) -> list[ServerDescriptor]:
    """Fetch the server directory from a running gateway.

    Raises:
        httpx.HTTPError: If the gateway cannot be reached or answers with an error status.
    """
    response = await client.get(f"{base_url.rstrip('/')}/api/mcp/servers")
    response.raise_for_status()
    return ServerListResponse(**response.json()).servers


def build_stdio_config(
    servers: list[ServerDescriptor],
    base_url: str,
    command: str | None = None,
) -> dict[str, Any]:
    """One stdio-bridge launch descriptor per merchant.

    Args:
        servers: Server directory entries.
        base_url: Gateway base URL the bridge forwards to.
        command: Bridge executable; defaults to the installed console script.

    Returns:
        ``{"mcpServers": {...}}`` keyed by ``ai-marketplace-<slug>``.
    """
    command = command or BRIDGE_COMMAND
    config: dict[str, Any] = {"mcpServers": {}}
    for server in servers:
        config["mcpServers"][f"{SERVER_KEY_PREFIX}-{server.slug}"] = {
            "command": command,
            "args": [str(server.id), base_url],
            "env": {
                "MERCHANT_ID": str(server.id),
                "MERCHANT_NAME": server.name,
                "MERCHANT_SLUG": server.slug,
                "BASE_URL": base_url,
            },
            "description": f"{server.name} - {server.toolsCount} APIs available",
            "disabled": False,
        }
    return config


def build_stream_config(servers: list[ServerDescriptor]) -> dict[str, Any]:
    """One direct streaming-endpoint descriptor per merchant."""
    config: dict[str, Any] = {"mcpServers": {}}
    for server in servers:
        config["mcpServers"][f"{SERVER_KEY_PREFIX}-{server.slug}-http"] = {
            "url": f"{server.mcpBaseUrl}/stream",
            "transport": "sse",
            "description": f"{server.name} via HTTP SSE",
            "disabled": False,
        }
    return config
