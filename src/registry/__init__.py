"""Registry module - merchant records and tool derivation."""

from .models import Tenant, Credential, ApiDefinition, AuthType
from .schemas import (
    ParameterSpec,
    TenantSnapshot,
    TenantSummary,
    ServerDescriptor,
    DerivedTool,
)
from .exceptions import TenantNotFoundError
from .store import TenantStore, SqlTenantStore, get_tenant_store
from .service import derive_tools, derive_tools_for_tenant, find_tool, list_servers
from .router import router


__all__ = [
    "Tenant",
    "Credential",
    "ApiDefinition",
    "AuthType",
    "ParameterSpec",
    "TenantSnapshot",
    "TenantSummary",
    "ServerDescriptor",
    "DerivedTool",
    "TenantNotFoundError",
    "TenantStore",
    "SqlTenantStore",
    "get_tenant_store",
    "derive_tools",
    "derive_tools_for_tenant",
    "find_tool",
    "list_servers",
    "router",
]
