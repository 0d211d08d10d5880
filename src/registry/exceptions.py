"""Exceptions raised by the tenant registry."""

from src.exceptions import MCPGatewayError


class TenantNotFoundError(MCPGatewayError):
    """Raised when a tenant id does not resolve in the data store.

    Attributes:
        tenant_id: The identifier that was looked up.
    """

    def __init__(self, tenant_id: int | str):
        super().__init__(
            message=f"Merchant '{tenant_id}' not found",
            code="TENANT_NOT_FOUND"
        )
        self.tenant_id = tenant_id
