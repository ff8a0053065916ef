"""Transport-agnostic protocol and errors for object substrate operations."""

from __future__ import annotations

from typing import Iterator, Protocol

from pydantic import BaseModel, ConfigDict

from packages.pastebin_shared.cancellation import CancellationToken


class S3SubstrateError(Exception):
    """Base exception for object substrate failures."""


class S3ObjectNotFoundError(S3SubstrateError):
    """The requested object key does not exist in the bucket."""

    def __init__(self, key: str) -> None:
        super().__init__(f"object not found: {key}")
        self.key = key


class S3SubstrateDependencyError(S3SubstrateError):
    """Backend or transport failure (network, credentials, permissions)."""


class S3HealthStatus(BaseModel):
    """Object substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class ObjectSubstrate(Protocol):
    """Protocol for key-addressed object persistence in one bucket."""

    def ensure_bucket(self, *, token: CancellationToken | None = None) -> bool:
        """Create the bucket when missing and return whether it was created."""

    def health(self, *, token: CancellationToken | None = None) -> S3HealthStatus:
        """Probe bucket reachability."""

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        token: CancellationToken | None = None,
    ) -> None:
        """Write one object, replacing any existing object at ``key``."""

    def get_object(
        self, *, key: str, token: CancellationToken | None = None
    ) -> bytes:
        """Read one object body."""

    def head_object(
        self, *, key: str, token: CancellationToken | None = None
    ) -> bool:
        """Return whether one object exists."""

    def delete_object(
        self, *, key: str, token: CancellationToken | None = None
    ) -> None:
        """Delete one object; deleting a missing key is not an error."""

    def iter_keys(
        self, *, prefix: str, token: CancellationToken | None = None
    ) -> Iterator[str]:
        """Lazily yield object keys under ``prefix`` in listing order."""
