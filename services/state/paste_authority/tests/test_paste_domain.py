"""Tests for paste domain models, metadata JSON and TTL resolution."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from services.state.paste_authority.domain import (
    FOREVER,
    Paste,
    PasteMeta,
    ttl_options,
)
from services.state.paste_authority.validation import FALLBACK_TTL, resolve_ttl

_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def test_paste_from_content_derives_checksum() -> None:
    """Paste identity should be the checksum of its content."""
    paste = Paste.from_content("Hello, World!")

    assert paste.checksum.startswith("dffd6021")
    assert paste.encoded() == b"Hello, World!"


def test_meta_expiry_is_created_plus_ttl() -> None:
    """Expiry should be fixed at creation from the supplied TTL."""
    meta = PasteMeta.new(checksum="c" * 64, size=3, ttl=timedelta(hours=2), now=_NOW)

    assert meta.created_at == _NOW
    assert meta.expires_at == _NOW + timedelta(hours=2)


def test_meta_json_uses_fixed_field_names() -> None:
    """Stored JSON should carry exactly the four lifecycle fields."""
    meta = PasteMeta.new(checksum="c" * 64, size=3, ttl=timedelta(days=1), now=_NOW)

    document = json.loads(meta.to_json())

    assert document == {
        "checksum": "c" * 64,
        "created_at": "2026-01-15T12:00:00Z",
        "expires_at": "2026-01-16T12:00:00Z",
        "size": 3,
    }


def test_meta_json_round_trips() -> None:
    """Decoding an encoded document should reproduce the metadata."""
    meta = PasteMeta.new(checksum="a" * 64, size=10, ttl=FOREVER, now=_NOW)

    assert PasteMeta.from_json(meta.to_json()) == meta


def test_meta_decodes_nanosecond_offsets() -> None:
    """Timestamps with nanoseconds and non-UTC offsets should decode."""
    raw = json.dumps(
        {
            "checksum": "b" * 64,
            "created_at": "2024-03-01T10:00:00.123456789+01:00",
            "expires_at": "2024-03-02T10:00:00.5+01:00",
            "size": 42,
        }
    )

    meta = PasteMeta.from_json(raw)

    offset = timezone(timedelta(hours=1))
    assert meta.created_at == datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=offset)
    assert meta.expires_at == datetime(2024, 3, 2, 10, 0, 0, 500000, tzinfo=offset)
    assert meta.size == 42


def test_meta_ignores_unknown_fields() -> None:
    """Extra keys written by other producers should not break decoding."""
    raw = json.dumps(
        {
            "checksum": "b" * 64,
            "created_at": "2024-03-01T10:00:00Z",
            "expires_at": "2024-03-02T10:00:00Z",
            "size": 1,
            "syntax": "go",
        }
    )

    assert PasteMeta.from_json(raw).checksum == "b" * 64


def test_is_expired_at_and_after_expiry() -> None:
    """A paste is expired once now reaches its expiry instant."""
    meta = PasteMeta.new(checksum="c" * 64, size=1, ttl=timedelta(hours=1), now=_NOW)

    assert meta.is_expired(_NOW) is False
    assert meta.is_expired(meta.expires_at - timedelta(microseconds=1)) is False
    assert meta.is_expired(meta.expires_at) is True
    assert meta.is_expired(meta.expires_at + timedelta(seconds=1)) is True


def test_ttl_options_mark_configured_default() -> None:
    """Exactly the catalog entry equal to the default should be marked."""
    options = ttl_options(timedelta(days=7))

    assert [option.label for option in options] == [
        "1 day",
        "1 week",
        "1 month",
        "1 year",
        "Forever",
    ]
    assert [option.label for option in options if option.is_default] == ["1 week"]
    assert options[2].duration == timedelta(days=30)
    assert options[4].duration == timedelta(days=36500)


def test_ttl_options_without_matching_default() -> None:
    """A default outside the catalog should leave every entry unmarked."""
    assert not any(option.is_default for option in ttl_options(timedelta(hours=3)))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("48h", timedelta(hours=48)),
        ("90m", timedelta(minutes=90)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("2.5h", timedelta(hours=2, minutes=30)),
        (timedelta(days=2), timedelta(days=2)),
    ],
)
def test_resolve_ttl_accepts_positive_durations(
    raw: object, expected: timedelta
) -> None:
    """Parseable positive durations should be used as given."""
    assert resolve_ttl(raw, timedelta(days=365)) == expected


@pytest.mark.parametrize("raw", [None, "", "-1h", "0s", "0", "soon", "10 days"])
def test_resolve_ttl_falls_back_to_default(raw: object) -> None:
    """Absent, unparseable or non-positive input should use the default."""
    assert resolve_ttl(raw, timedelta(hours=24)) == timedelta(hours=24)
    assert resolve_ttl(raw, timedelta(days=7)) == timedelta(days=7)


@pytest.mark.parametrize("default", [timedelta(0), timedelta(hours=-1)])
def test_resolve_ttl_with_non_positive_default_uses_fallback(
    default: timedelta,
) -> None:
    """A non-positive default should fall back to 24 hours."""
    assert resolve_ttl("", default) == FALLBACK_TTL == timedelta(hours=24)


@pytest.mark.parametrize(
    "raw",
    [
        "99999999999999999999h",
        "100000000h",
        "2600000h",
        "9" * 400 + "h",
        timedelta(days=999_999_999),
    ],
)
def test_resolve_ttl_out_of_range_uses_default(raw: object) -> None:
    """Durations beyond the int64 nanosecond span fall back to the default."""
    assert resolve_ttl(raw, timedelta(days=7)) == timedelta(days=7)


def test_resolve_ttl_accepts_longest_representable_span() -> None:
    """Spans up to the int64 nanosecond limit are used as given."""
    assert resolve_ttl("2562047h", timedelta(days=7)) == timedelta(hours=2562047)
