"""Parsing of duration values found in configuration files.

Durations are accepted either as a number of seconds (``10``, ``"10"``)
or as a Go-style duration string (``"1m30s"``, ``"250ms"``, ``"1.5h"``).
"""

from __future__ import annotations

import re
from datetime import timedelta

_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_INTEGER_RE = re.compile(r"^\d+$")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str | float | timedelta) -> timedelta:
    """Convert *value* to a :class:`~datetime.timedelta`.

    Raises :class:`ValueError` for negative, empty or malformed values.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        msg = f"invalid duration {value!r}"
        raise ValueError(msg)
    if isinstance(value, (int, float)):
        if value < 0:
            msg = f"invalid duration {value!r}: must not be negative"
            raise ValueError(msg)
        return timedelta(seconds=value)

    text = str(value).strip()
    if _INTEGER_RE.match(text):
        return timedelta(seconds=int(text))

    seconds = 0.0
    pos = 0
    for match in _COMPONENT_RE.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if not text or pos != len(text):
        msg = f"invalid duration {value!r}"
        raise ValueError(msg)
    return timedelta(seconds=seconds)
