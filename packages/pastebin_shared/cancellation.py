"""Cooperative cancellation tokens with optional monotonic deadlines.

A token combines an explicit cancel signal with an optional deadline. Storage
calls observe the token before every backend request, and long-lived loops
use ``wait`` so a cancel wakes them immediately instead of after a full tick.

A request already on the wire is not interrupted. The S3 substrate instead
caps socket timeouts near the remaining deadline, so a call can overrun it by
at most the rounding of that budget.
"""

from __future__ import annotations

from threading import Event, Lock
from time import monotonic
from typing import Callable


class OperationCancelledError(Exception):
    """Raised when work is abandoned because its token was cancelled."""

    def __init__(
        self,
        message: str = "operation cancelled",
        *,
        deadline_exceeded: bool = False,
    ) -> None:
        super().__init__(message)
        self.deadline_exceeded = deadline_exceeded


class CancellationToken:
    """Thread-safe cancel signal shared between a caller and its callees."""

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self._event = Event()
        self._clock = clock
        self._deadline = None if timeout_seconds is None else clock() + timeout_seconds
        self._children: list[CancellationToken] = []
        self._lock = Lock()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        """Return a fresh token that expires ``seconds`` from now."""
        return cls(timeout_seconds=seconds)

    @property
    def deadline_exceeded(self) -> bool:
        """Return whether the token's deadline has passed."""
        return self._deadline is not None and self._clock() >= self._deadline

    @property
    def cancelled(self) -> bool:
        """Return whether the token was cancelled or its deadline passed."""
        return self._event.is_set() or self.deadline_exceeded

    def cancel(self) -> None:
        """Cancel this token and every linked child token."""
        self._event.set()
        with self._lock:
            children = list(self._children)
        for child in children:
            child.cancel()

    def remaining(self) -> float | None:
        """Return seconds left before the deadline, or ``None`` when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self, operation: str | None = None) -> None:
        """Raise ``OperationCancelledError`` when the token is no longer live."""
        if self._event.is_set():
            raise OperationCancelledError(_describe(operation, "cancelled"))
        if self.deadline_exceeded:
            raise OperationCancelledError(
                _describe(operation, "deadline exceeded"), deadline_exceeded=True
            )

    def wait(self, seconds: float) -> bool:
        """Block up to ``seconds`` and return ``True`` once cancelled.

        The wait is shortened to the remaining deadline when one is set.
        """
        remaining = self.remaining()
        timeout = seconds if remaining is None else min(seconds, remaining)
        self._event.wait(max(0.0, timeout))
        return self.cancelled

    def child(self, *, timeout_seconds: float | None = None) -> "CancellationToken":
        """Return a linked token cancelled together with this one.

        The child deadline never outlives the parent deadline.
        """
        remaining = self.remaining()
        if remaining is not None:
            timeout_seconds = (
                remaining if timeout_seconds is None else min(timeout_seconds, remaining)
            )
        token = CancellationToken(timeout_seconds=timeout_seconds, clock=self._clock)
        with self._lock:
            self._children.append(token)
        if self._event.is_set():
            token.cancel()
        return token

    def release(self, child: "CancellationToken") -> None:
        """Unlink one child token once the caller is done with it."""
        with self._lock:
            if child in self._children:
                self._children.remove(child)


def _describe(operation: str | None, reason: str) -> str:
    """Return a short cancellation message naming the interrupted operation."""
    if operation:
        return f"{operation} {reason}"
    return f"operation {reason}"
