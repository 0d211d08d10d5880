"""Service layer for tenant lookup and tool derivation.

Tools are a pure function of the stored API definitions. They are
recomputed on every request and never cached, so edits to a merchant's
APIs apply to the next call without any invalidation step.
"""

import re
from typing import TYPE_CHECKING, Any

import structlog

from .config import load_merchant_seed
from .repository import (
    create_api_definition,
    create_credential,
    create_tenant,
    get_tenant_by_slug,
)
from .schemas import (
    ApiDefinitionRecord,
    DerivedTool,
    ParameterSpec,
    ServerDescriptor,
    TenantSnapshot,
)
from .store import TenantStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


logger = structlog.get_logger("registry")

MAX_TOOL_NAME_LENGTH = 64
FALLBACK_TOOL_NAME = "unnamed_tool"


def sanitize_tool_name(name: str | None) -> str:
    """Normalize a tool name to ``[a-z0-9_.:-]``, starting with a letter.

    Args:
        name: Raw name as stored or as sent by a caller.

    Returns:
        Sanitized name of at most 64 characters, or "unnamed_tool".
    """
    if not name:
        return FALLBACK_TOOL_NAME

    cleaned = re.sub(r"\s+", "_", name.strip().lower())
    cleaned = re.sub(r"[^a-z0-9_.\-:]+", "_", cleaned)
    cleaned = re.sub(r"^[^a-z]+", "", cleaned)
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned[:MAX_TOOL_NAME_LENGTH] or FALLBACK_TOOL_NAME


def default_tool_name(api: ApiDefinitionRecord) -> str:
    return sanitize_tool_name(f"{api.method}_api_{api.id}")


def _parameter_description(name: str, spec: ParameterSpec) -> str:
    description = spec.description or f"{name} value from user query"
    if not spec.examples:
        return description
    example_text = ", ".join(f'"{example}"' for example in spec.examples)
    return f"{description} (e.g., {example_text})"


def build_input_schema(parameters: dict[str, ParameterSpec]) -> dict[str, Any]:
    """Turn a declared parameter map into a JSON Schema object.

    Args:
        parameters: Declared parameters in declaration order.

    Returns:
        ``{"type": "object", "properties": ..., "required": [...]}``.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, spec in parameters.items():
        properties[name] = {
            "type": spec.type,
            "description": _parameter_description(name, spec),
        }
        if spec.required:
            required.append(name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


def derive_tools(snapshot: TenantSnapshot) -> list[DerivedTool]:
    """Derive one tool per API definition, in stored order.

    Names are unique within the result: a definition whose sanitized name
    is already taken gets its API id appended.

    Args:
        snapshot: Tenant state read from the store.

    Returns:
        Derived tools, one per API definition.
    """
    tools: list[DerivedTool] = []
    seen_names: set[str] = set()

    for api in snapshot.api_definitions:
        name = sanitize_tool_name(api.tool_name) if api.tool_name else default_tool_name(api)
        if name in seen_names:
            base_name = name
            suffix_number = api.id
            while name in seen_names:
                suffix = f"_{suffix_number}"
                name = base_name[:MAX_TOOL_NAME_LENGTH - len(suffix)] + suffix
                suffix_number += 1
            logger.warning(
                "tool_name_collision",
                tenant_id=snapshot.tenant.id,
                api_id=api.id,
                renamed_to=name,
            )
        seen_names.add(name)

        tools.append(DerivedTool(
            name=name,
            description=api.description or f"{api.method.upper()} {api.url}",
            input_schema=build_input_schema(api.parameters),
            api=api,
            credential=snapshot.credential_for(api),
        ))

    return tools


async def derive_tools_for_tenant(
    store: TenantStore,
    tenant_id: int | str,
) -> tuple[TenantSnapshot, list[DerivedTool]]:
    """Read the tenant fresh from the store and derive its tools.

    Raises:
        TenantNotFoundError: If the tenant does not exist.
    """
    snapshot = await store.get_tenant(tenant_id)
    return snapshot, derive_tools(snapshot)


def find_tool(tools: list[DerivedTool], name: str) -> DerivedTool | None:
    """Find a tool by exact name, falling back to the sanitized name."""
    tool = next((t for t in tools if t.name == name), None)
    if tool is not None:
        return tool
    sanitized = sanitize_tool_name(name)
    return next((t for t in tools if t.name == sanitized), None)


def tenant_base_url(base_url: str, tenant_id: int) -> str:
    return f"{base_url.rstrip('/')}/api/mcp/merchants/{tenant_id}"


async def list_servers(store: TenantStore, base_url: str) -> list[ServerDescriptor]:
    """Build the server directory used for client configuration files.

    Args:
        store: Tenant store.
        base_url: Public base URL of this gateway.

    Returns:
        One descriptor per tenant.
    """
    tenants = await store.list_all_tenants()
    return [
        ServerDescriptor(
            id=summary.id,
            slug=summary.slug,
            name=summary.name,
            toolsCount=summary.tools_count,
            mcpBaseUrl=tenant_base_url(base_url, summary.id),
        )
        for summary in tenants
    ]


async def sync_tenants_from_config(db: "AsyncSession", config_path: str | None = None) -> int:
    """Create merchants from the static seed config if they do not exist yet.

    Existing merchants (matched by slug) are left untouched.

    Args:
        db: Async database session.
        config_path: Optional path override for the seed config.

    Returns:
        Number of merchants created.

    Raises:
        ValueError: If a slug is duplicated or an API references an unknown credential.
    """
    seed = load_merchant_seed(config_path)
    created = 0
    seen_slugs: set[str] = set()

    for merchant in seed.merchants:
        if merchant.slug in seen_slugs:
            raise ValueError(f"duplicate merchant slug in config: {merchant.slug}")
        seen_slugs.add(merchant.slug)

        if await get_tenant_by_slug(db, merchant.slug) is not None:
            continue

        tenant = await create_tenant(db, slug=merchant.slug, name=merchant.name)

        credential_ids: dict[str, int] = {}
        for label, credential in merchant.credentials.items():
            row = await create_credential(
                db,
                tenant_id=tenant.id,
                auth_type=credential.auth_type,
                header_name=credential.header_name,
                username=credential.username,
                secret=credential.secret,
            )
            credential_ids[label] = row.id

        for api in merchant.apis:
            if api.credential is not None and api.credential not in credential_ids:
                raise ValueError(
                    f"merchant '{merchant.slug}' references unknown credential '{api.credential}'"
                )
            await create_api_definition(
                db,
                tenant_id=tenant.id,
                url=api.url,
                method=api.method,
                credential_id=credential_ids.get(api.credential) if api.credential else None,
                parameters={
                    name: ParameterSpec(**spec).model_dump(exclude_defaults=True)
                    for name, spec in api.parameters.items()
                },
                payload_template=api.payload_template,
                query_template=api.query_template,
                headers=api.headers,
                tool_name=api.tool_name,
                description=api.description,
            )

        created += 1
        logger.info("merchant_seeded", slug=merchant.slug, apis=len(merchant.apis))

    await db.commit()
    return created
