"""Tests for shared error normalization and the typed result envelope."""

from __future__ import annotations

import pytest

from packages.pastebin_shared.cancellation import OperationCancelledError
from packages.pastebin_shared.errors import (
    ErrorCategory,
    codes,
    exception_to_error,
    integrity_error,
    not_found_error,
)
from packages.pastebin_shared.result import Result, failure, success


@pytest.mark.parametrize(
    ("exc", "category", "code", "retryable"),
    [
        (ValueError("bad"), ErrorCategory.VALIDATION, codes.INVALID_ARGUMENT, False),
        (KeyError("k"), ErrorCategory.NOT_FOUND, codes.RESOURCE_NOT_FOUND, False),
        (TimeoutError(), ErrorCategory.DEPENDENCY, codes.DEPENDENCY_TIMEOUT, True),
        (
            ConnectionError(),
            ErrorCategory.DEPENDENCY,
            codes.DEPENDENCY_UNAVAILABLE,
            True,
        ),
        (RuntimeError("x"), ErrorCategory.INTERNAL, codes.UNEXPECTED_EXCEPTION, False),
        (
            OperationCancelledError("get cancelled"),
            ErrorCategory.CANCELLED,
            codes.OPERATION_CANCELLED,
            False,
        ),
        (
            OperationCancelledError("get deadline exceeded", deadline_exceeded=True),
            ErrorCategory.CANCELLED,
            codes.DEADLINE_EXCEEDED,
            False,
        ),
    ],
)
def test_exception_to_error_mapping(
    exc: Exception, category: ErrorCategory, code: str, retryable: bool
) -> None:
    """Common exception types map onto stable categories and codes."""
    error = exception_to_error(exc)

    assert error.category == category
    assert error.code == code
    assert error.retryable is retryable
    assert error.metadata["exception_type"] == type(exc).__name__


def test_exception_to_error_uses_fallback_messages() -> None:
    """Empty exception messages fall back to a readable default."""
    assert exception_to_error(TimeoutError()).message == "dependency timeout"
    assert exception_to_error(RuntimeError()).message == "unexpected exception"


def test_success_result_is_ok() -> None:
    """Successful results carry a payload and no errors."""
    result = success("abc")

    assert result.ok is True
    assert result.has_payload is True
    assert result.payload == "abc"


def test_failure_result_reports_categories() -> None:
    """Failed results expose category membership."""
    result: Result[str] = failure(
        [integrity_error("content checksum mismatch", code=codes.CHECKSUM_MISMATCH)]
    )

    assert result.ok is False
    assert result.has_payload is False
    assert result.has_category(ErrorCategory.INTEGRITY) is True
    assert result.has_category(ErrorCategory.NOT_FOUND) is False


def test_failure_requires_errors() -> None:
    """A failure without errors is a programming error."""
    with pytest.raises(ValueError, match="at least one error"):
        failure([])


def test_error_details_are_immutable() -> None:
    """Error details are frozen value objects."""
    error = not_found_error("paste not found")

    with pytest.raises(AttributeError):
        error.message = "changed"  # type: ignore[misc]
