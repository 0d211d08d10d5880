"""Static merchant seed config loader."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class CredentialConfig(BaseModel):
    """Credential definition loaded from static config."""

    auth_type: str = "none"
    header_name: str | None = None
    username: str | None = None
    secret: str | None = None


class ApiConfig(BaseModel):
    """API definition loaded from static config.

    ``credential`` names an entry of the merchant's ``credentials`` map.
    """

    url: str
    method: str = "GET"
    credential: str | None = None
    tool_name: str | None = None
    description: str | None = None
    parameters: dict[str, dict[str, Any]] = Field(default_factory=dict)
    payload_template: dict[str, Any] | None = None
    query_template: dict[str, str] | None = None
    headers: dict[str, str] | None = None


class MerchantConfig(BaseModel):
    """Merchant definition loaded from static config."""

    slug: str
    name: str
    credentials: dict[str, CredentialConfig] = Field(default_factory=dict)
    apis: list[ApiConfig] = Field(default_factory=list)


class MerchantSeedConfig(BaseModel):
    """Container for merchant definitions."""

    merchants: list[MerchantConfig] = Field(default_factory=list)


def load_merchant_seed(config_path: str | None = None) -> MerchantSeedConfig:
    """Load merchant seed config from YAML.

    Args:
        config_path: Optional custom path for the seed file.

    Returns:
        Parsed MerchantSeedConfig, or an empty config if the file is missing.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "merchants.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        return MerchantSeedConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return MerchantSeedConfig(**data)
