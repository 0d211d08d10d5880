"""Credential variants and the headers they contribute to a tool call."""

import base64
from typing import Literal

from pydantic import BaseModel, Field

from src.registry.models import AuthType
from src.registry.schemas import CredentialRecord


DEFAULT_API_KEY_HEADER = "X-API-Key"


class NoAuth(BaseModel):
    kind: Literal["none"] = "none"


class ApiKeyAuth(BaseModel):
    kind: Literal["api-key"] = "api-key"
    header: str = DEFAULT_API_KEY_HEADER
    value: str = Field(default="", repr=False)


class BearerAuth(BaseModel):
    kind: Literal["bearer"] = "bearer"
    token: str = Field(default="", repr=False)


class BasicAuth(BaseModel):
    kind: Literal["basic"] = "basic"
    username: str = ""
    secret: str = Field(default="", repr=False)


Credential = NoAuth | ApiKeyAuth | BearerAuth | BasicAuth


def credential_from_record(record: CredentialRecord | None) -> Credential:
    """Build the credential variant for a stored record.

    Args:
        record: Stored credential, or None when the API has no credential.

    Returns:
        One of NoAuth, ApiKeyAuth, BearerAuth or BasicAuth.
    """
    if record is None or record.auth_type == AuthType.none:
        return NoAuth()
    if record.auth_type == AuthType.api_key:
        return ApiKeyAuth(
            header=record.header_name or DEFAULT_API_KEY_HEADER,
            value=record.secret or "",
        )
    if record.auth_type == AuthType.bearer:
        return BearerAuth(token=record.secret or "")
    return BasicAuth(username=record.username or "", secret=record.secret or "")


def auth_headers(credential: Credential) -> dict[str, str]:
    """Return the headers a credential adds to an outgoing request."""
    if isinstance(credential, ApiKeyAuth):
        return {credential.header: credential.value}
    if isinstance(credential, BearerAuth):
        return {"Authorization": f"Bearer {credential.token}"}
    if isinstance(credential, BasicAuth):
        token = base64.b64encode(f"{credential.username}:{credential.secret}".encode("utf-8"))
        return {"Authorization": f"Basic {token.decode('ascii')}"}
    return {}
