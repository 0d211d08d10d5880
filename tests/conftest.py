# Test configuration
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from src.config import Settings  # noqa: E402
from src.registry.exceptions import TenantNotFoundError  # noqa: E402
from src.registry.models import AuthType  # noqa: E402
from src.registry.schemas import (  # noqa: E402
    ApiDefinitionRecord,
    CredentialRecord,
    TenantRecord,
    TenantSnapshot,
    TenantSummary,
)
from src.registry.store import parse_tenant_id  # noqa: E402


class InMemoryTenantStore:
    """TenantStore over a dict of snapshots; counts lookups."""

    def __init__(self, snapshots=None):
        self.snapshots = {s.tenant.id: s for s in snapshots or []}
        self.get_calls = 0

    async def get_tenant(self, tenant_id):
        self.get_calls += 1
        key = parse_tenant_id(tenant_id)
        if key not in self.snapshots:
            raise TenantNotFoundError(tenant_id)
        return self.snapshots[key]

    async def list_all_tenants(self):
        return [
            TenantSummary(
                id=s.tenant.id,
                slug=s.tenant.slug,
                name=s.tenant.name,
                tools_count=len(s.api_definitions),
            )
            for s in self.snapshots.values()
        ]


def build_snapshot(tenant_id=1, slug="fashionhub", name="FashionHub", apis=(), credentials=()):
    return TenantSnapshot(
        tenant=TenantRecord(id=tenant_id, slug=slug, name=name),
        api_definitions=[ApiDefinitionRecord(**api) for api in apis],
        credentials=[CredentialRecord(**c) for c in credentials],
    )


FASHION_API = "https://api.fashionhub.test"


@pytest.fixture
def fashion_snapshot():
    return build_snapshot(
        credentials=[
            {"id": 1, "auth_type": AuthType.none},
            {"id": 2, "auth_type": AuthType.api_key, "header_name": "X-API-Key", "secret": "abc123"},
        ],
        apis=[
            {
                "id": 1,
                "credential_id": 1,
                "method": "GET",
                "url": f"{FASHION_API}/products",
                "tool_name": "get_products",
                "description": "Get all fashion products with optional filters",
                "parameters": {
                    "category": {"type": "string", "description": "Filter by category", "examples": ["jewelery"]},
                    "limit": {"type": "number", "description": "Limit results"},
                },
            },
            {
                "id": 2,
                "credential_id": 1,
                "method": "GET",
                "url": f"{FASHION_API}/products/{{{{product_id}}}}",
                "tool_name": "get_product_by_id",
                "description": "Get detailed information about a specific product",
                "parameters": {"product_id": {"type": "string", "description": "Product ID", "required": True}},
            },
            {
                "id": 3,
                "credential_id": 2,
                "method": "GET",
                "url": f"{FASHION_API}/products/categories",
                "tool_name": "get_categories",
                "description": "Get all available product categories",
            },
            {
                "id": 4,
                "credential_id": 2,
                "method": "POST",
                "url": f"{FASHION_API}/orders",
                "tool_name": "create_order",
                "description": "Create a new order for products",
                "parameters": {
                    "userId": {"type": "number", "description": "User ID", "required": True},
                    "products": {"type": "array", "description": "Array of product IDs", "required": True},
                },
            },
        ],
    )


@pytest.fixture
def tenant_store(fashion_snapshot):
    return InMemoryTenantStore([fashion_snapshot])


@pytest.fixture
def settings():
    return Settings(
        MCP_HEARTBEAT_SECONDS=0.01,
        TOOL_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def snapshot_factory():
    return build_snapshot


@pytest.fixture
def store_factory():
    return InMemoryTenantStore
