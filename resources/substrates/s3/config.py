"""Pydantic settings for the S3 object substrate component."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from packages.pastebin_shared.config import (
    PastebinSettings,
    resolve_component_settings,
)
from resources.substrates.s3.component import RESOURCE_COMPONENT_ID


class S3SubstrateSettings(BaseModel):
    """Connection settings for one S3-compatible bucket."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: str = "s3.amazonaws.com"
    region: str = "us-east-1"
    bucket: str
    access_key_id: str = ""
    secret_access_key: SecretStr = SecretStr("")
    use_ssl: bool = True
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    read_timeout_seconds: float = Field(default=30.0, gt=0)
    list_page_size: int = Field(default=1000, gt=0, le=1000)

    @field_validator("bucket")
    @classmethod
    def _validate_bucket(cls, value: str) -> str:
        """Require a non-empty bucket name."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("bucket is required")
        return normalized

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        """Require a bare ``host[:port]`` endpoint without scheme."""
        normalized = value.strip().rstrip("/")
        if normalized == "":
            raise ValueError("endpoint is required")
        if "://" in normalized:
            raise ValueError("endpoint must not include a scheme; use use_ssl")
        return normalized

    @field_validator("region")
    @classmethod
    def _validate_region(cls, value: str) -> str:
        """Require a non-empty region name."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("region is required")
        return normalized

    def endpoint_url(self) -> str:
        """Return the endpoint URL with the scheme implied by ``use_ssl``."""
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.endpoint}"


def resolve_s3_substrate_settings(settings: PastebinSettings) -> S3SubstrateSettings:
    """Resolve S3 substrate settings from ``components.substrate.s3``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=S3SubstrateSettings,
    )
