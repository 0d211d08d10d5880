"""Read-only tenant store contract and its SQL implementation.

Every caller goes through ``TenantStore`` on every request. There is no
cache in front of it: a configuration change in the database is visible
to the very next discovery or tool call.
"""

from typing import Annotated, Protocol

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db

from .exceptions import TenantNotFoundError
from .models import Tenant
from .repository import get_tenant_with_apis, list_tenants_with_api_counts
from .schemas import (
    ApiDefinitionRecord,
    CredentialRecord,
    TenantRecord,
    TenantSnapshot,
    TenantSummary,
)


class TenantStore(Protocol):
    """Lookup contract for tenant, API definition and credential records."""

    async def get_tenant(self, tenant_id: int | str) -> TenantSnapshot:
        """Return the tenant with its API definitions and credentials.

        Raises:
            TenantNotFoundError: If the id does not resolve.
        """
        ...

    async def list_all_tenants(self) -> list[TenantSummary]:
        """Return every tenant with its tool count."""
        ...


def parse_tenant_id(tenant_id: int | str) -> int:
    """Convert a path identifier to a tenant primary key.

    Raises:
        TenantNotFoundError: If the identifier is not an integer.
    """
    if isinstance(tenant_id, int):
        return tenant_id
    try:
        return int(str(tenant_id).strip())
    except ValueError:
        raise TenantNotFoundError(tenant_id) from None


class SqlTenantStore:
    """TenantStore backed by the SQLAlchemy session of the current request.

    Each lookup ends its read transaction before returning, so a long-lived
    caller such as an open discovery stream holds no pooled connection.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tenant(self, tenant_id: int | str) -> TenantSnapshot:
        key = parse_tenant_id(tenant_id)
        try:
            tenant = await get_tenant_with_apis(self.db, key)
            if tenant is None:
                raise TenantNotFoundError(tenant_id)
            return self._snapshot(tenant)
        finally:
            await self.db.rollback()

    async def list_all_tenants(self) -> list[TenantSummary]:
        try:
            rows = await list_tenants_with_api_counts(self.db)
            return [
                TenantSummary(id=tenant.id, slug=tenant.slug, name=tenant.name, tools_count=count)
                for tenant, count in rows
            ]
        finally:
            await self.db.rollback()

    @staticmethod
    def _snapshot(tenant: Tenant) -> TenantSnapshot:
        return TenantSnapshot(
            tenant=TenantRecord.model_validate(tenant),
            api_definitions=[
                ApiDefinitionRecord(
                    id=api.id,
                    credential_id=api.credential_id,
                    method=api.method,
                    url=api.url,
                    parameters=api.parameters or {},
                    payload_template=api.payload_template,
                    query_template=api.query_template,
                    headers=api.headers,
                    tool_name=api.tool_name,
                    description=api.description,
                )
                for api in tenant.api_definitions
            ],
            credentials=[CredentialRecord.model_validate(c) for c in tenant.credentials],
        )


async def get_tenant_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantStore:
    """Dependency returning the store for the current request."""
    return SqlTenantStore(db)
