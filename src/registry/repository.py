"""Repository layer for tenant data access."""

from typing import Any

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import ApiDefinition, AuthType, Credential, Tenant


async def get_tenant_with_apis(db: AsyncSession, tenant_id: int) -> Tenant | None:
    """Fetch a tenant with its credentials and API definitions loaded.

    Args:
        db: Async database session.
        tenant_id: Tenant primary key.

    Returns:
        Tenant object if found, None otherwise.
    """
    stmt = (
        select(Tenant)
        .where(Tenant.id == tenant_id)
        .options(
            selectinload(Tenant.credentials),
            selectinload(Tenant.api_definitions),
        )
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_tenant_by_slug(db: AsyncSession, slug: str) -> Tenant | None:
    stmt = select(Tenant).where(Tenant.slug == slug)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_tenants_with_api_counts(db: AsyncSession) -> list[tuple[Tenant, int]]:
    """Fetch every tenant with the number of API definitions it owns.

    Args:
        db: Async database session.

    Returns:
        (tenant, api_count) pairs ordered by tenant id.
    """
    api_count = func.count(ApiDefinition.id)
    stmt = (
        select(Tenant, api_count)
        .outerjoin(ApiDefinition, ApiDefinition.tenant_id == Tenant.id)
        .group_by(Tenant.id)
        .order_by(Tenant.id)
    )
    result = await db.execute(stmt)
    return [(tenant, count) for tenant, count in result.all()]


async def create_tenant(db: AsyncSession, slug: str, name: str) -> Tenant:
    tenant = Tenant(slug=slug, name=name)
    db.add(tenant)
    await db.flush()
    return tenant


async def create_credential(
    db: AsyncSession,
    tenant_id: int,
    auth_type: str = "none",
    header_name: str | None = None,
    username: str | None = None,
    secret: str | None = None,
) -> Credential:
    credential = Credential(
        tenant_id=tenant_id,
        auth_type=AuthType(auth_type),
        header_name=header_name,
        username=username,
        secret=secret,
    )
    db.add(credential)
    await db.flush()
    return credential


async def create_api_definition(
    db: AsyncSession,
    tenant_id: int,
    url: str,
    method: str = "GET",
    credential_id: int | None = None,
    parameters: dict[str, Any] | None = None,
    payload_template: dict[str, Any] | None = None,
    query_template: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    tool_name: str | None = None,
    description: str | None = None,
) -> ApiDefinition:
    """Create a new API definition for a tenant.

    The caller owns the transaction; the row is flushed so its id is
    available, but not committed.
    """
    api = ApiDefinition(
        tenant_id=tenant_id,
        credential_id=credential_id,
        method=method.upper(),
        url=url,
        parameters=parameters,
        payload_template=payload_template,
        query_template=query_template,
        headers=headers,
        tool_name=tool_name,
        description=description,
    )
    db.add(api)
    await db.flush()
    return api
