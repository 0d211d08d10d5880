"""HTTP client wrapper for calls to tenant APIs."""

from typing import Any

import httpx

from .exceptions import BackendTimeoutError, BackendUnavailableError


# Default timeout for tenant API requests
DEFAULT_TIMEOUT_SECONDS = 30.0


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    json_body: Any | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> httpx.Response:
    """Issue exactly one request to a tenant API.

    Any HTTP status is returned to the caller; only transport failures raise.
    There is no retry: a tool call may have side effects downstream.

    Args:
        client: Shared HTTP client.
        method: HTTP method.
        url: Fully substituted target URL.
        headers: Request headers, credentials included.
        params: Query parameters.
        json_body: JSON body for write methods.
        timeout: Request timeout in seconds.

    Returns:
        The downstream response.

    Raises:
        BackendTimeoutError: If the tenant API doesn't respond in time.
        BackendUnavailableError: If the connection fails (DNS, refused, TLS...).
    """
    request_kwargs: dict[str, Any] = {
        "headers": headers or {},
        "timeout": timeout,
    }
    if params:
        request_kwargs["params"] = params
    if json_body is not None:
        request_kwargs["json"] = json_body

    try:
        return await client.request(method.upper(), url, **request_kwargs)
    except httpx.TimeoutException:
        raise BackendTimeoutError(
            backend_url=url,
            timeout_seconds=timeout
        )
    except httpx.ConnectError as e:
        raise BackendUnavailableError(
            backend_url=url,
            reason=str(e) or "Connection failed"
        )
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise BackendUnavailableError(
            backend_url=url,
            reason=f"Request failed: {e}"
        )


def decode_body(response: httpx.Response) -> Any:
    """Return the JSON body when decodable, the raw text otherwise."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
