"""Parsing helpers for human duration strings such as ``"48h"`` or ``"1h30m"``.

The accepted grammar is a signed sequence of decimal numbers, each followed
by a unit: ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m``, ``h``. A bare
``"0"`` is accepted as zero.
"""

from __future__ import annotations

import re
from datetime import timedelta

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# Largest span an int64 nanosecond count can hold, about 2562047h.
MAX_DURATION = timedelta(microseconds=(2**63 - 1) // 1000)


def parse_duration(value: str) -> timedelta:
    """Parse one duration string into a ``timedelta``.

    Raises ``ValueError`` for empty, malformed or out-of-range input; spans
    longer than ``MAX_DURATION`` are rejected.
    """
    text = value.strip()
    if text == "":
        raise ValueError("duration is empty")

    sign = 1
    if text[0] in "+-":
        if text[0] == "-":
            sign = -1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if text == "":
        raise ValueError(f"invalid duration: {value!r}")

    total = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT_RE.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if total > MAX_DURATION.total_seconds():
        raise ValueError(f"duration out of range: {value!r}")
    return timedelta(seconds=sign * total)


def format_duration(value: timedelta) -> str:
    """Render a ``timedelta`` in the compact ``"72h0m0s"`` style."""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{_seconds(seconds)}s"
    if minutes:
        return f"{sign}{int(minutes)}m{_seconds(seconds)}s"
    return f"{sign}{_seconds(seconds)}s"


def coerce_duration(value: object) -> object:
    """Coerce duration strings for pydantic ``mode="before"`` validators.

    Strings in the unit grammar become ``timedelta``; everything else (numbers,
    ISO 8601 strings, ``timedelta``) is passed through for pydantic to handle.
    """
    if isinstance(value, str):
        try:
            return parse_duration(value)
        except ValueError:
            return value
    return value


def _seconds(value: float) -> str:
    """Format a seconds component without a trailing ``.0``."""
    if value == int(value):
        return str(int(value))
    return f"{value:.9f}".rstrip("0").rstrip(".")
