# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Date formatting with SimpleDateFormat-style patterns.

Patterns such as ``yyyy/MM/dd HH:mm:ss:SSS zzz`` are compiled once into a list
of fields and literals. A formatter instance is shared by every sink, so
``format`` is serialized with a lock.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable

DEFAULT_DATE_TIME_FORMAT = "yyyy/MM/dd HH:mm:ss:SSS zzz"

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_Field = Callable[[datetime], str]


def _year(count: int) -> _Field:
    if count == 2:
        return lambda dt: f"{dt.year % 100:02d}"
    return lambda dt: f"{dt.year:0{count}d}"


def _month(count: int) -> _Field:
    if count >= 4:
        return lambda dt: _MONTHS[dt.month - 1]
    if count == 3:
        return lambda dt: _MONTHS[dt.month - 1][:3]
    return lambda dt: f"{dt.month:0{count}d}"


def _weekday(count: int) -> _Field:
    if count >= 4:
        return lambda dt: _DAYS[dt.weekday()]
    return lambda dt: _DAYS[dt.weekday()][:3]


def _padded(attr: str) -> Callable[[int], _Field]:
    return lambda count: (lambda dt: f"{getattr(dt, attr):0{count}d}")


def _hour12(count: int) -> _Field:
    return lambda dt: f"{(dt.hour % 12) or 12:0{count}d}"


def _millis(count: int) -> _Field:
    return lambda dt: f"{dt.microsecond // 1000:0{count}d}"


def _am_pm(count: int) -> _Field:
    return lambda dt: "AM" if dt.hour < 12 else "PM"


def _zone_name(count: int) -> _Field:
    return lambda dt: dt.tzname() or "UTC"


def _zone_offset(count: int) -> _Field:
    def render(dt: datetime) -> str:
        offset = dt.utcoffset() or timedelta(0)
        minutes = int(offset.total_seconds()) // 60
        sign = "+" if minutes >= 0 else "-"
        minutes = abs(minutes)
        return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"
    return render


_FIELDS: dict[str, Callable[[int], _Field]] = {
    "y": _year,
    "M": _month,
    "E": _weekday,
    "d": _padded("day"),
    "H": _padded("hour"),
    "h": _hour12,
    "m": _padded("minute"),
    "s": _padded("second"),
    "S": _millis,
    "a": _am_pm,
    "z": _zone_name,
    "Z": _zone_offset,
}


def compile_pattern(pattern: str) -> list[_Field | str]:
    """Compile a pattern into formatting fields and literal text.

    Raises:
        ValueError: If the pattern uses an unsupported letter or has an
            unterminated quote
    """
    parts: list[_Field | str] = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "'":
            if i + 1 < length and pattern[i + 1] == "'":
                parts.append("'")
                i += 2
                continue
            literal = []
            i += 1
            while True:
                end = pattern.find("'", i)
                if end < 0:
                    raise ValueError(f"Unterminated quote in date pattern: {pattern!r}")
                literal.append(pattern[i:end])
                # A doubled quote inside quoted text is a literal quote
                if end + 1 < length and pattern[end + 1] == "'":
                    literal.append("'")
                    i = end + 2
                    continue
                i = end + 1
                break
            parts.append("".join(literal))
        elif char.isalpha():
            if char not in _FIELDS:
                raise ValueError(f"Illegal pattern character '{char}' in {pattern!r}")
            run = i
            while run < length and pattern[run] == char:
                run += 1
            parts.append(_FIELDS[char](run - i))
            i = run
        else:
            parts.append(char)
            i += 1
    return parts


class DateTimeFormatter:
    """Thread-safe formatter for a SimpleDateFormat-style pattern."""

    def __init__(self, pattern: str = DEFAULT_DATE_TIME_FORMAT):
        """Compile the pattern.

        Args:
            pattern: Date/time pattern

        Raises:
            ValueError: If the pattern is invalid
        """
        self.pattern = pattern
        self._parts = compile_pattern(pattern)
        self._lock = threading.Lock()

    def format(self, dt: datetime | None = None) -> str:
        """Format ``dt`` (default: now, local time zone)."""
        if dt is None:
            dt = datetime.now().astimezone()
        with self._lock:
            return "".join(part if isinstance(part, str) else part(dt) for part in self._parts)
