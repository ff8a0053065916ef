"""Pydantic settings for Paste Authority Service behavior."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.pastebin_shared.config import (
    PastebinSettings,
    resolve_component_settings,
)
from packages.pastebin_shared.durations import coerce_duration
from services.state.paste_authority.component import SERVICE_COMPONENT_ID


class PasteAuthoritySettings(BaseModel):
    """Paste Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_ttl: timedelta = timedelta(days=365)
    max_paste_size_bytes: int = Field(default=1024 * 1024, gt=0)
    cleanup_interval: timedelta = timedelta(hours=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("default_ttl", "cleanup_interval", mode="before")
    @classmethod
    def _parse_duration_strings(cls, value: object) -> object:
        """Accept unit strings such as ``"24h"`` alongside seconds and ISO 8601."""
        return coerce_duration(value)

    @field_validator("cleanup_interval")
    @classmethod
    def _validate_cleanup_interval(cls, value: timedelta) -> timedelta:
        """Require a positive sweep interval."""
        if value <= timedelta(0):
            raise ValueError("cleanup_interval must be positive")
        return value


def resolve_paste_authority_settings(
    settings: PastebinSettings,
) -> PasteAuthoritySettings:
    """Resolve service settings from ``components.service.paste_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=PasteAuthoritySettings,
    )
