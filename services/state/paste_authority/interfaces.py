"""Transport-neutral protocol and errors for paste persistence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Union

from packages.pastebin_shared.cancellation import CancellationToken
from services.state.paste_authority.domain import Paste, PasteMeta


class PasteStoreError(Exception):
    """Base exception for paste persistence failures."""


class PasteNotFoundError(PasteStoreError):
    """No readable content or metadata object exists for a checksum."""

    def __init__(self, checksum: str, reason: str = "paste not found") -> None:
        super().__init__(f"{reason}: {checksum}")
        self.checksum = checksum


class ChecksumMismatchError(PasteStoreError):
    """Stored content no longer hashes to the checksum it is stored under."""

    def __init__(self, *, expected: str, actual: str) -> None:
        super().__init__(
            "content checksum mismatch, possible data corruption: "
            f"expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class PasteStoreDependencyError(PasteStoreError):
    """Backend or transport failure while reading or writing paste objects."""


@dataclass(frozen=True)
class StoreHealth:
    """Readiness of the backing object store."""

    ready: bool
    detail: str


@dataclass(frozen=True)
class Continue:
    """Visitor outcome: keep iterating."""


@dataclass(frozen=True)
class Stop:
    """Visitor outcome: halt iteration and raise ``error`` to the caller."""

    error: Exception


CONTINUE = Continue()

VisitResult = Union[Continue, Stop]
MetaVisitor = Callable[[PasteMeta], VisitResult]


class PasteStore(Protocol):
    """Protocol for checksum-addressed paste and metadata persistence."""

    def store(
        self,
        paste: Paste,
        meta: PasteMeta,
        *,
        token: CancellationToken | None = None,
    ) -> None:
        """Write content, then metadata."""

    def get(
        self, checksum: str, *, token: CancellationToken | None = None
    ) -> tuple[Paste, PasteMeta]:
        """Read and verify content, then read metadata."""

    def delete(self, checksum: str, *, token: CancellationToken | None = None) -> None:
        """Delete content, then metadata."""

    def exists(self, checksum: str, *, token: CancellationToken | None = None) -> bool:
        """Probe for the content object only."""

    def for_each_meta(
        self,
        visit: MetaVisitor,
        *,
        token: CancellationToken | None = None,
    ) -> None:
        """Stream every readable metadata object through ``visit``."""

    def health(self, *, token: CancellationToken | None = None) -> StoreHealth:
        """Probe backend readiness without raising."""
