"""Domain contracts for pastes, paste metadata and TTL choices."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from services.state.paste_authority.checksum import compute_checksum

FOREVER = timedelta(days=100 * 365)

TTL_CATALOG: tuple[tuple[str, timedelta], ...] = (
    ("1 day", timedelta(days=1)),
    ("1 week", timedelta(days=7)),
    ("1 month", timedelta(days=30)),
    ("1 year", timedelta(days=365)),
    ("Forever", FOREVER),
)

# Python datetimes carry microseconds; RFC 3339 writers may emit nanoseconds.
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class TtlOption(BaseModel):
    """One human-facing TTL choice for selection controls."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    duration: timedelta
    is_default: bool = False


def ttl_options(default_ttl: timedelta) -> list[TtlOption]:
    """Return the TTL catalog with the entry equal to ``default_ttl`` marked."""
    return [
        TtlOption(label=label, duration=duration, is_default=duration == default_ttl)
        for label, duration in TTL_CATALOG
    ]


class Paste(BaseModel):
    """Immutable paste content addressed by its checksum."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    checksum: str
    content: str

    @classmethod
    def from_content(cls, content: str) -> "Paste":
        """Build a paste whose checksum is derived from ``content``."""
        return cls(checksum=compute_checksum(content), content=content)

    def encoded(self) -> bytes:
        """Return the raw bytes stored for this paste."""
        return self.content.encode("utf-8")


class PasteMeta(BaseModel):
    """Lifecycle metadata stored alongside one paste.

    The JSON shape is fixed: ``checksum``, ``created_at``, ``expires_at``
    (RFC 3339 timestamps) and ``size``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    checksum: str
    created_at: datetime
    expires_at: datetime
    size: int

    @classmethod
    def new(
        cls,
        *,
        checksum: str,
        size: int,
        ttl: timedelta,
        now: datetime | None = None,
    ) -> "PasteMeta":
        """Create metadata whose expiry is ``ttl`` after ``now``."""
        created = now or datetime.now(UTC)
        return cls(
            checksum=checksum,
            created_at=created,
            expires_at=created + ttl,
            size=size,
        )

    @field_validator("created_at", "expires_at", mode="before")
    @classmethod
    def _truncate_fraction(cls, value: object) -> object:
        """Trim sub-microsecond digits so nanosecond timestamps parse."""
        if isinstance(value, str):
            return _EXTRA_FRACTION_RE.sub(r"\1", value)
        return value

    @field_validator("created_at", "expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_serializer("created_at", "expires_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        """Render timestamps as RFC 3339 in UTC with a ``Z`` suffix."""
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return whether ``now`` has reached ``expires_at``."""
        current = now or datetime.now(UTC)
        return current >= self.expires_at

    def to_json(self) -> bytes:
        """Encode this metadata as the stored JSON document."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_json(cls, raw: bytes | str) -> "PasteMeta":
        """Decode one stored JSON document."""
        return cls.model_validate_json(raw)


class StoredPaste(BaseModel):
    """Result payload for a newly stored paste."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    checksum: str
    created_at: datetime
    expires_at: datetime
    size: int
    ttl: timedelta


class PasteView(BaseModel):
    """Fetch payload: verified content plus its lifecycle metadata."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    checksum: str
    content: str
    created_at: datetime
    expires_at: datetime
    size: int


class HealthStatus(BaseModel):
    """Service and owned substrate readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
