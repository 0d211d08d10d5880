"""create merchant tables

Revision ID: 3f1c9a7d2e40
Revises:
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2e40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(length=100), nullable=False, comment="Unique merchant handle"),
        sa.Column("name", sa.String(length=200), nullable=False, comment="Merchant display name"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="Creation timestamp",
        ),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)

    auth_type_enum = sa.Enum("none", "api-key", "bearer", "basic", name="auth_type_enum")
    op.create_table(
        "credentials",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.Integer(),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("auth_type", auth_type_enum, nullable=False, comment="Authentication scheme"),
        sa.Column("header_name", sa.String(length=100), nullable=True, comment="Header name for api-key credentials"),
        sa.Column("username", sa.String(length=200), nullable=True, comment="Username for basic credentials"),
        sa.Column("secret", sa.Text(), nullable=True, comment="Key, token or password; never returned to callers"),
    )
    op.create_index("ix_credentials_tenant_id", "credentials", ["tenant_id"])

    op.create_table(
        "api_definitions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.Integer(),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "credential_id",
            sa.Integer(),
            sa.ForeignKey("credentials.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("method", sa.String(length=10), nullable=False, comment="HTTP method"),
        sa.Column("url", sa.String(length=2000), nullable=False, comment="Target URL template"),
        sa.Column("parameters", sa.JSON(), nullable=True, comment="Declared parameter schema"),
        sa.Column("payload_template", sa.JSON(), nullable=True, comment="JSON body template"),
        sa.Column("query_template", sa.JSON(), nullable=True, comment="Query parameter template"),
        sa.Column("headers", sa.JSON(), nullable=True, comment="Static request headers"),
        sa.Column("tool_name", sa.String(length=100), nullable=True, comment="Declared MCP tool name"),
        sa.Column("description", sa.Text(), nullable=True, comment="Declared MCP tool description"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="Creation timestamp",
        ),
    )
    op.create_index("ix_api_definitions_tenant_id", "api_definitions", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("ix_api_definitions_tenant_id", table_name="api_definitions")
    op.drop_table("api_definitions")
    op.drop_index("ix_credentials_tenant_id", table_name="credentials")
    op.drop_table("credentials")
    op.execute("DROP TYPE IF EXISTS auth_type_enum")
    op.drop_index("ix_tenants_slug", table_name="tenants")
    op.drop_table("tenants")
