"""Exception normalization utilities for shared error contracts."""

from __future__ import annotations

from packages.pastebin_shared.cancellation import OperationCancelledError

from . import codes
from .factories import (
    cancelled_error,
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .types import ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a Python exception into a shared ``ErrorDetail``.

    This mapping is conservative and generic. Services layer domain-specific
    normalization before falling back to this function.
    """
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, OperationCancelledError):
        code = codes.OPERATION_CANCELLED
        if exc.deadline_exceeded:
            code = codes.DEADLINE_EXCEEDED
        return cancelled_error(
            str(exc) or "operation cancelled", code=code, metadata=metadata
        )

    if isinstance(exc, ValueError):
        return validation_error(str(exc), code=codes.INVALID_ARGUMENT, metadata=metadata)

    if isinstance(exc, KeyError):
        return not_found_error(str(exc), code=codes.RESOURCE_NOT_FOUND, metadata=metadata)

    if isinstance(exc, TimeoutError):
        return dependency_error(
            str(exc) or "dependency timeout",
            code=codes.DEPENDENCY_TIMEOUT,
            retryable=True,
            metadata=metadata,
        )

    if isinstance(exc, ConnectionError):
        return dependency_error(
            str(exc) or "dependency unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
