"""SQLAlchemy models for merchants and their configured APIs."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    ForeignKey,
    String,
    Text,
    DateTime,
    JSON,
    Enum as SQLAlchemyEnum,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database import Base


class AuthType(str, Enum):
    """Authentication scheme applied to outgoing tenant API calls.

    Attributes:
        none: No authentication header.
        api_key: Static key sent in a named header.
        bearer: ``Authorization: Bearer <token>``.
        basic: ``Authorization: Basic <base64(username:secret)>``.
    """

    none = "none"
    api_key = "api-key"
    bearer = "bearer"
    basic = "basic"


class Tenant(Base):
    """A merchant owning a set of API definitions.

    Attributes:
        id: Primary key, used as the tenant identifier in MCP URLs.
        slug: URL-safe unique handle (e.g. "fashionhub").
        name: Display name used in server info.
        created_at: Timestamp when the merchant was created.
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(primary_key=True)
    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique merchant handle"
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Merchant display name"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Creation timestamp"
    )

    credentials: Mapped[list["Credential"]] = relationship(
        back_populates="tenant",
        order_by="Credential.id",
        cascade="all, delete-orphan",
    )
    api_definitions: Mapped[list["ApiDefinition"]] = relationship(
        back_populates="tenant",
        order_by="ApiDefinition.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug='{self.slug}')>"


class Credential(Base):
    """Authentication material shared by one or more API definitions.

    Attributes:
        id: Primary key.
        tenant_id: Owning merchant.
        auth_type: Which header construction to use.
        header_name: Header carrying the key for api-key credentials.
        username: Username for basic credentials.
        secret: Key, token or (hashed) password, depending on auth_type.
    """

    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    auth_type: Mapped[AuthType] = mapped_column(
        SQLAlchemyEnum(AuthType, name="auth_type_enum", values_callable=lambda e: [m.value for m in e]),
        default=AuthType.none,
        nullable=False,
        comment="Authentication scheme"
    )
    header_name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Header name for api-key credentials"
    )
    username: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
        comment="Username for basic credentials"
    )
    secret: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Key, token or password; never returned to callers"
    )

    tenant: Mapped[Tenant] = relationship(back_populates="credentials")

    def __repr__(self) -> str:
        # secret intentionally omitted
        return f"<Credential(id={self.id}, auth_type={self.auth_type.value})>"


class ApiDefinition(Base):
    """One configured downstream API, exposed as one MCP tool.

    Attributes:
        id: Primary key; also fixes the tool order within a tenant.
        tenant_id: Owning merchant.
        credential_id: Credential injected on every call, if any.
        method: HTTP method.
        url: Target URL template, may contain ``{{name}}`` placeholders.
        parameters: Declared parameter schema (name -> {type, required, description}).
        payload_template: Optional JSON body template with ``{{name}}`` leaves.
        query_template: Optional query string template (name -> template).
        headers: Optional static headers sent with every call.
        tool_name: Declared tool name.
        description: Declared tool description.
    """

    __tablename__ = "api_definitions"

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    credential_id: Mapped[int | None] = mapped_column(
        ForeignKey("credentials.id", ondelete="SET NULL"),
        nullable=True,
    )
    method: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="GET",
        comment="HTTP method"
    )
    url: Mapped[str] = mapped_column(
        String(2000),
        nullable=False,
        comment="Target URL template"
    )
    parameters: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Declared parameter schema"
    )
    payload_template: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        comment="JSON body template"
    )
    query_template: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Query parameter template"
    )
    headers: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        comment="Static request headers"
    )
    tool_name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Declared MCP tool name"
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Declared MCP tool description"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Creation timestamp"
    )

    tenant: Mapped[Tenant] = relationship(back_populates="api_definitions")
    credential: Mapped[Credential | None] = relationship()

    def __repr__(self) -> str:
        return f"<ApiDefinition(id={self.id}, method='{self.method}', tool_name='{self.tool_name}')>"
