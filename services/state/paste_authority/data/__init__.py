"""Persistence layer for Paste Authority Service."""

from services.state.paste_authority.data.store import (
    CONTENT_PREFIX,
    META_PREFIX,
    S3PasteStore,
    content_key,
    meta_key,
)

__all__ = [
    "CONTENT_PREFIX",
    "META_PREFIX",
    "S3PasteStore",
    "content_key",
    "meta_key",
]
