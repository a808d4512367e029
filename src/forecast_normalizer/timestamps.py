"""Short date/time label parsing for providers that emit text timestamps."""

from __future__ import annotations

import calendar
import re

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


def _split_date(label: str) -> tuple[int, int, int] | None:
    match = _DATE_RE.match(label)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    return year, month, day


def _split_time(label: str) -> tuple[int, int] | None:
    match = _TIME_RE.match(label)
    if match is None:
        return None
    hour, minute = (int(part) for part in match.groups())
    return hour, minute


def parse_timestamp(label: str | None, base_date: str | None = None) -> int:
    """Convert a provider label into epoch seconds, interpreted as UTC.

    Accepted shapes are ``YYYY-MM-DD HH:MM`` (16 characters), ``YYYY-MM-DD``
    (10 characters) and ``HH:MM`` (5 characters, only together with a
    10-character ``base_date``). Anything else returns 0, which callers
    read as "unavailable".
    """
    if not label:
        return 0

    date_part: tuple[int, int, int] | None
    time_part: tuple[int, int] | None
    if len(label) == 16:
        date_part = _split_date(label[:10])
        time_part = _split_time(label[11:]) if label[10] == " " else None
    elif len(label) == 10:
        date_part = _split_date(label)
        time_part = (0, 0)
    elif len(label) == 5 and base_date is not None and len(base_date) == 10:
        date_part = _split_date(base_date)
        time_part = _split_time(label)
    else:
        return 0

    if date_part is None or time_part is None:
        return 0
    year, month, day = date_part
    hour, minute = time_part
    try:
        return calendar.timegm((year, month, day, hour, minute, 0, 0, 0, 0))
    except ValueError:
        # Month outside 1..12 or year 0.
        return 0


def is_daytime(timestamp: int, sunrise: int, sunset: int) -> bool:
    """Return True when ``timestamp`` falls within ``[sunrise, sunset)``."""
    return sunrise <= timestamp < sunset


def icon_for(code: int, timestamp: int, sunrise: int, sunset: int) -> str:
    """Build a provider icon id: the numeric code plus a day/night suffix."""
    suffix = "d" if is_daytime(timestamp, sunrise, sunset) else "n"
    return f"{code}{suffix}"
