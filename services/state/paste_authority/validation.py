"""Request validation for Paste Authority Service inputs."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from packages.pastebin_shared.durations import MAX_DURATION, parse_duration
from services.state.paste_authority.checksum import is_valid_identifier

FALLBACK_TTL = timedelta(hours=24)


def resolve_ttl(raw: timedelta | str | None, default_ttl: timedelta) -> timedelta:
    """Return the effective TTL for one paste.

    Absent, unparseable, non-positive or out-of-range input falls back to
    ``default_ttl``; an unusable default falls back to 24 hours.
    """
    ttl = _parse_ttl(raw)
    if ttl is None or ttl <= timedelta(0):
        ttl = default_ttl
    if ttl <= timedelta(0) or ttl > MAX_DURATION:
        ttl = FALLBACK_TTL
    return ttl


def _parse_ttl(raw: timedelta | str | None) -> timedelta | None:
    """Parse one TTL input, returning ``None`` when it cannot be used."""
    if raw is None:
        return None
    if isinstance(raw, timedelta):
        return raw if raw <= MAX_DURATION else None
    try:
        return parse_duration(raw)
    except ValueError:
        return None


class _ValidationModel(BaseModel):
    """Base request model with strict shape semantics."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ChecksumRequest(_ValidationModel):
    """Validated request shape for operations keyed by checksum."""

    checksum: str

    @field_validator("checksum")
    @classmethod
    def _validate_checksum(cls, value: str, info: ValidationInfo) -> str:
        """Require a 64-character hex identifier and normalize to lowercase."""
        if not is_valid_identifier(value):
            raise ValueError(f"{info.field_name} must be 64 hexadecimal characters")
        return value.lower()


class StorePasteRequest(_ValidationModel):
    """Validated store-paste request shape."""

    content: str

    @field_validator("content")
    @classmethod
    def _require_content(cls, value: str) -> str:
        """Reject empty pastes and text with no UTF-8 encoding."""
        if value == "":
            raise ValueError("content is required")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("content must be valid UTF-8 text") from None
        return value
