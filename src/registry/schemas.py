"""Pydantic schemas for tenant records and derived tools."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .models import AuthType


ParameterType = Literal["string", "number", "integer", "boolean", "array", "object"]

SCALAR_TYPES = frozenset({"string", "number", "integer", "boolean"})


class ParameterSpec(BaseModel):
    """Declared schema for one tool parameter.

    Attributes:
        type: JSON type name. Scalars, "array" and "object" are validated structurally.
        required: Whether callers must supply the parameter.
        description: Human-readable description shown to agents.
        examples: Optional example values, appended to the description.
    """

    type: ParameterType = "string"
    required: bool = False
    description: str | None = None
    examples: list[Any] = Field(default_factory=list)

    @property
    def kind(self) -> Literal["scalar", "array", "object"]:
        if self.type in SCALAR_TYPES:
            return "scalar"
        return self.type


class TenantRecord(BaseModel):
    """Merchant identity."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    slug: str
    name: str


class CredentialRecord(BaseModel):
    """Stored credential. Never serialized to callers."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    auth_type: AuthType = AuthType.none
    header_name: str | None = None
    username: str | None = None
    secret: str | None = Field(default=None, repr=False)


class ApiDefinitionRecord(BaseModel):
    """Stored API definition as read from the data store."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    credential_id: int | None = None
    method: str = "GET"
    url: str
    parameters: dict[str, ParameterSpec] = Field(default_factory=dict)
    payload_template: dict[str, Any] | None = None
    query_template: dict[str, str] | None = None
    headers: dict[str, str] | None = None
    tool_name: str | None = None
    description: str | None = None


class TenantSnapshot(BaseModel):
    """Everything the gateway needs about one tenant, read fresh per request.

    Attributes:
        tenant: Merchant identity.
        api_definitions: Definitions in insertion order.
        credentials: Credentials referenced by the definitions.
    """

    tenant: TenantRecord
    api_definitions: list[ApiDefinitionRecord] = Field(default_factory=list)
    credentials: list[CredentialRecord] = Field(default_factory=list)

    def credential_for(self, api: ApiDefinitionRecord) -> CredentialRecord | None:
        if api.credential_id is None:
            return None
        return next((c for c in self.credentials if c.id == api.credential_id), None)


class TenantSummary(BaseModel):
    """Directory entry for one tenant."""

    id: int
    slug: str
    name: str
    tools_count: int


class ServerDescriptor(BaseModel):
    """Public descriptor of one tenant's MCP server.

    Attributes:
        id: Tenant identifier.
        slug: Tenant slug.
        name: Tenant display name.
        toolsCount: Number of tools the tenant exposes.
        mcpBaseUrl: Base URL of the tenant's MCP endpoints.
    """

    id: int
    slug: str
    name: str
    toolsCount: int
    mcpBaseUrl: str


class ServerListResponse(BaseModel):
    """API response schema for the server directory."""

    servers: list[ServerDescriptor] = Field(default_factory=list, description="One server per merchant")
    count: int = Field(..., description="Total number of servers")


class DerivedTool(BaseModel):
    """A tool computed from one API definition.

    Carries the public MCP descriptor (name, description, input_schema) plus
    the definition and credential the executor needs. Never cached.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: dict[str, Any]
    api: ApiDefinitionRecord
    credential: CredentialRecord | None = Field(default=None, repr=False)

    def descriptor(self) -> dict[str, Any]:
        """Return the caller-visible ``{name, description, inputSchema}`` view."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
