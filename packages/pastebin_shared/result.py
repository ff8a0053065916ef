"""Typed result model for in-process service boundaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from packages.pastebin_shared.errors import ErrorCategory, ErrorDetail

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Typed response carrying either a payload or structured errors."""

    payload: T | None
    errors: list[ErrorDetail] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when no errors are present."""
        return len(self.errors) == 0

    @property
    def has_payload(self) -> bool:
        """Return True when payload is present."""
        return self.payload is not None

    def has_category(self, category: ErrorCategory) -> bool:
        """Return True when any error belongs to ``category``."""
        return any(error.category == category for error in self.errors)


def success(payload: T) -> Result[T]:
    """Build a successful result around one payload."""
    return Result(payload=payload)


def failure(errors: Sequence[ErrorDetail]) -> Result[T]:
    """Build a failed result; at least one error is required."""
    if len(errors) == 0:
        raise ValueError("failure results require at least one error")
    return Result(payload=None, errors=list(errors))
