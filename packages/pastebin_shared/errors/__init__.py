"""Public shared error API for Pastebin services."""

from . import codes
from .factories import (
    cancelled_error,
    dependency_error,
    expired_error,
    integrity_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .normalize import exception_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "ErrorCategory",
    "ErrorDetail",
    "cancelled_error",
    "codes",
    "dependency_error",
    "exception_to_error",
    "expired_error",
    "integrity_error",
    "internal_error",
    "not_found_error",
    "validation_error",
]
