"""
Shared time utilities: precision units and duration strings.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

# Nanoseconds per unit for every accepted write/epoch precision.
PRECISION_NS: dict[str, int] = {
    "n": 1,
    "ns": 1,
    "u": 1_000,
    "us": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_DURATION_UNITS_S: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def precision_multiplier(precision: str) -> int:
    """Nanoseconds per unit of `precision` (raises ValueError if unknown)."""
    p = str(precision or "").strip().lower() or "ns"
    try:
        return PRECISION_NS[p]
    except KeyError:
        raise ValueError(f"unknown precision {precision!r}") from None


def datetime_to_ns(dt: datetime) -> int:
    """Epoch nanoseconds for `dt`; naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


def parse_duration(text: str) -> float:
    """
    Parse a duration such as "500ms", "10s" or "1m30s" into seconds.

    A bare number is read as seconds. Empty input means 0.
    """
    s = str(text or "").strip()
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        pass
    sign = 1.0
    if s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    pos = 0
    total = 0.0
    while pos < len(s):
        m = _DURATION_PART_RE.match(s, pos)
        if m is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(m.group(1)) * _DURATION_UNITS_S[m.group(2)]
        pos = m.end()
    if pos == 0:
        raise ValueError(f"invalid duration {text!r}")
    return sign * total
