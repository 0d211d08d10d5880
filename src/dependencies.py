"""Shared outbound HTTP client for tenant API calls."""

import httpx
from fastapi import Request

from .config import Settings


def build_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the pooled client used for every downstream tenant call.

    No client-wide timeout is set; each tool call passes its own.
    Redirects are not followed: a 3xx is the tool result, and credential
    headers never leave the configured host.
    """
    return httpx.AsyncClient(
        timeout=None,
        verify=settings.TOOL_VERIFY_TLS,
        follow_redirects=False,
        transport=transport,
    )


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the client created in the application lifespan.

    Args:
        request: The FastAPI request object.

    Returns:
        The process-wide httpx.AsyncClient instance.
    """
    return request.app.state.http_client
