"""Tests for content checksums and identifier shape checks."""

from __future__ import annotations

import pytest

from services.state.paste_authority.checksum import (
    CHECKSUM_LENGTH,
    compute_checksum,
    is_valid_identifier,
)

_HELLO = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"
_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_known_vectors() -> None:
    """Checksums should match published SHA-256 vectors."""
    assert compute_checksum("Hello, World!") == _HELLO
    assert compute_checksum("") == _EMPTY


def test_text_and_bytes_hash_identically() -> None:
    """Text input should hash over its UTF-8 encoding."""
    text = "blåbærsyltetøy ✓"
    assert compute_checksum(text) == compute_checksum(text.encode("utf-8"))


def test_checksum_is_deterministic_and_distinguishes_inputs() -> None:
    """Equal inputs give equal checksums; different inputs differ."""
    assert compute_checksum("paste") == compute_checksum("paste")
    assert compute_checksum("paste") != compute_checksum("paste ")


@pytest.mark.parametrize("content", ["", "a", "x" * 10_000, "linje\n" * 5_000])
def test_checksum_is_always_64_lowercase_hex(content: str) -> None:
    """Output shape should not depend on input size."""
    checksum = compute_checksum(content)

    assert len(checksum) == CHECKSUM_LENGTH
    assert checksum == checksum.lower()
    assert is_valid_identifier(checksum)


@pytest.mark.parametrize(
    "value",
    [
        "",
        _HELLO[:-1],
        _HELLO + "0",
        "g" * 64,
        _HELLO[:-1] + " ",
        " " + _HELLO[1:],
        None,
        12345,
        b"0" * 64,
    ],
)
def test_is_valid_identifier_rejects_malformed_values(value: object) -> None:
    """Malformed identifiers should be rejected without raising."""
    assert is_valid_identifier(value) is False


def test_is_valid_identifier_accepts_uppercase_hex() -> None:
    """Identifier shape checks are case-insensitive."""
    assert is_valid_identifier(_HELLO.upper()) is True
