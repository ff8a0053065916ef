"""Tests for duration string parsing and formatting."""

from __future__ import annotations

from datetime import timedelta

import pytest

from packages.pastebin_shared.durations import (
    MAX_DURATION,
    coerce_duration,
    format_duration,
    parse_duration,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("48h", timedelta(hours=48)),
        ("90m", timedelta(minutes=90)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("2.5h", timedelta(hours=2, minutes=30)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        ("250ms", timedelta(milliseconds=250)),
        ("10us", timedelta(microseconds=10)),
        ("10µs", timedelta(microseconds=10)),
        ("-1h", timedelta(hours=-1)),
        ("+3m", timedelta(minutes=3)),
        ("0", timedelta(0)),
        ("0s", timedelta(0)),
        (" 5m ", timedelta(minutes=5)),
    ],
)
def test_parse_duration_accepts_unit_grammar(raw: str, expected: timedelta) -> None:
    """Every supported unit and sign form should parse."""
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", " ", "h", "5", "5d", "1 h", "1h 30m", "-", "abc"])
def test_parse_duration_rejects_malformed_input(raw: str) -> None:
    """Malformed strings raise ``ValueError``."""
    with pytest.raises(ValueError):
        parse_duration(raw)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), "0s"),
        (timedelta(hours=24), "24h0m0s"),
        (timedelta(days=365), "8760h0m0s"),
        (timedelta(minutes=1, seconds=30), "1m30s"),
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(hours=-1), "-1h0m0s"),
    ],
)
def test_format_duration(value: timedelta, expected: str) -> None:
    """Formatting uses the compact hour/minute/second style."""
    assert format_duration(value) == expected


def test_coerce_duration_passes_through_unparseable_values() -> None:
    """Non-grammar inputs are left for pydantic to interpret."""
    assert coerce_duration("24h") == timedelta(hours=24)
    assert coerce_duration("PT1H") == "PT1H"
    assert coerce_duration(60) == 60


@pytest.mark.parametrize("raw", ["99999999999999999999h", "2600000h", "9" * 400 + "s"])
def test_parse_duration_rejects_out_of_range_spans(raw: str) -> None:
    """Spans beyond the int64 nanosecond range raise ``ValueError``."""
    with pytest.raises(ValueError, match="out of range"):
        parse_duration(raw)


def test_max_duration_matches_int64_nanoseconds() -> None:
    """The upper bound is the largest int64 nanosecond count."""
    assert MAX_DURATION == timedelta(microseconds=9_223_372_036_854_775)
    assert parse_duration("2562047h") < MAX_DURATION
