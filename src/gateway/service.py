"""Service layer for tool execution with validation and templating."""

import json
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from src.registry.schemas import DerivedTool
from src.registry.service import derive_tools_for_tenant, find_tool
from src.registry.store import TenantStore

from .auth import auth_headers, credential_from_record
from .exceptions import (
    GatewayError,
    InvalidArgumentError,
    MissingParameterError,
    PayloadTooLargeError,
    ToolNotFoundError,
)
from .proxy import DEFAULT_TIMEOUT_SECONDS, decode_body, send_request
from .schemas import ToolResult
from .templating import placeholder_names, render_payload, render_query, render_url


logger = structlog.get_logger("gateway")

# Configuration defaults
DEFAULT_MAX_PAYLOAD_BYTES = 1024 * 1024  # 1 MB

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass
class PreparedRequest:
    """Fully substituted downstream request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    json_body: Any | None = None


def validate_payload_size(
    arguments: dict[str, Any],
    max_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
) -> None:
    """Validate that the tool arguments are within size limits.

    Args:
        arguments: Tool arguments to validate.
        max_bytes: Maximum allowed size in bytes.

    Raises:
        PayloadTooLargeError: If payload exceeds limit.
    """
    payload_str = json.dumps(arguments, default=str)
    size = len(payload_str.encode("utf-8"))

    if size > max_bytes:
        raise PayloadTooLargeError(size_bytes=size, max_bytes=max_bytes)


def validate_arguments(tool: DerivedTool, arguments: dict[str, Any]) -> None:
    """Check required presence and structural kind of each declared parameter.

    Args:
        tool: Tool whose API definition declares the parameters.
        arguments: Caller-supplied arguments.

    Raises:
        MissingParameterError: For the first required parameter absent, in declaration order.
        InvalidArgumentError: If a supplied value does not match its declared kind.
    """
    for name, spec in tool.api.parameters.items():
        if spec.required and arguments.get(name) is None:
            raise MissingParameterError(name)

    for name, spec in tool.api.parameters.items():
        value = arguments.get(name)
        if value is None:
            continue
        kind = spec.kind
        if kind == "array" and not isinstance(value, list):
            raise InvalidArgumentError(name, "array")
        if kind == "object" and not isinstance(value, dict):
            raise InvalidArgumentError(name, "object")
        if kind == "scalar" and isinstance(value, (list, dict)):
            raise InvalidArgumentError(name, "scalar")


def _query_value(value: Any) -> Any:
    # httpx repeats list keys for scalar lists; nested values travel as JSON text
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list) and any(isinstance(item, (dict, list)) for item in value):
        return json.dumps(value, ensure_ascii=False)
    return value


def build_request(tool: DerivedTool, arguments: dict[str, Any]) -> PreparedRequest:
    """Substitute templates and inject credentials.

    Args:
        tool: Tool to call.
        arguments: Validated arguments.

    Returns:
        PreparedRequest ready to send.

    Raises:
        UnresolvedTemplateError: If a URL, payload or query placeholder has no argument.
    """
    api = tool.api
    method = api.method.upper()

    url = render_url(api.url, arguments)

    json_body = None
    if method in WRITE_METHODS:
        if api.payload_template is not None:
            json_body = render_payload(api.payload_template, arguments)
        else:
            json_body = dict(arguments)

    params: dict[str, Any] = {}
    if api.query_template:
        params = render_query(api.query_template, arguments)
    elif method not in WRITE_METHODS:
        url_names = set(placeholder_names(api.url))
        params = {
            name: value
            for name, value in arguments.items()
            if name not in url_names and value is not None
        }
    params = {name: _query_value(value) for name, value in params.items()}

    headers = dict(api.headers or {})
    headers.update(auth_headers(credential_from_record(tool.credential)))

    return PreparedRequest(
        method=method,
        url=url,
        headers=headers,
        params=params,
        json_body=json_body,
    )


async def execute_tool(
    client: httpx.AsyncClient,
    tool: DerivedTool,
    arguments: dict[str, Any] | None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
) -> ToolResult:
    """Execute a tool against its tenant API.

    Never raises for application-level failures. Missing or invalid
    arguments, unresolved placeholders and transport errors all come back
    as ``ToolResult(success=False)``; no request is issued for the first
    three. Any HTTP status from the tenant API is a successful result
    carrying that status.

    Args:
        client: Shared HTTP client.
        tool: Derived tool to execute.
        arguments: Caller-supplied arguments.
        timeout: Downstream request timeout.
        max_payload_bytes: Maximum serialized argument size.

    Returns:
        ToolResult for this single invocation.
    """
    arguments = arguments or {}
    started = time.perf_counter()

    try:
        validate_payload_size(arguments, max_payload_bytes)
        validate_arguments(tool, arguments)
        prepared = build_request(tool, arguments)
        response = await send_request(
            client,
            method=prepared.method,
            url=prepared.url,
            headers=prepared.headers,
            params=prepared.params,
            json_body=prepared.json_body,
            timeout=timeout,
        )
    except GatewayError as e:
        logger.info(
            "tool_failed",
            tool_name=tool.name,
            api_id=tool.api.id,
            error_code=e.code,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        return ToolResult.failure(e.message)

    logger.info(
        "tool_executed",
        tool_name=tool.name,
        api_id=tool.api.id,
        method=prepared.method,
        status=response.status_code,
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
    return ToolResult(
        success=True,
        status=response.status_code,
        data=decode_body(response),
    )


async def invoke_tool(
    store: TenantStore,
    client: httpx.AsyncClient,
    tenant_id: int | str,
    tool_name: str,
    arguments: dict[str, Any] | None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
) -> ToolResult:
    """Resolve a tool by name for a tenant and execute it.

    Raises:
        TenantNotFoundError: If the tenant does not exist.
        ToolNotFoundError: If no derived tool matches the name.
    """
    _, tools = await derive_tools_for_tenant(store, tenant_id)
    tool = find_tool(tools, tool_name)
    if tool is None:
        raise ToolNotFoundError(tool_name)

    return await execute_tool(
        client,
        tool,
        arguments,
        timeout=timeout,
        max_payload_bytes=max_payload_bytes,
    )
