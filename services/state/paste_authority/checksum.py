"""Content identity: SHA-256 checksums and identifier shape checks."""

from __future__ import annotations

import hashlib

CHECKSUM_LENGTH = 64
_HEX = frozenset("0123456789abcdefABCDEF")


def compute_checksum(content: str | bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``content``.

    Text is hashed over its UTF-8 bytes.
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()


def is_valid_identifier(value: object) -> bool:
    """Return whether ``value`` is a 64-character hex string (any case)."""
    if not isinstance(value, str):
        return False
    if len(value) != CHECKSUM_LENGTH:
        return False
    return all(ch in _HEX for ch in value)
