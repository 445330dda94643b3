"""
Timestamp formatting and parsing.

All timestamps in this package are offset-aware ``datetime`` objects. Four
text forms are supported: ISO-8601 (exact round trip) and the three
``TimestampPattern`` forms (round trip to whole seconds).
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from lms.core.constants import TimestampPattern
from lms.core.exceptions import TimestampParseError


_STAMP_FORMATS = {
    TimestampPattern.MACHINE_LONG_OFFSET: "%Y-%m-%d %H:%M:%S",
    TimestampPattern.MACHINE_SHORT_OFFSET: "%Y-%m-%d %H:%M:%S",
    TimestampPattern.HUMAN_LONG: "%A, %b %d, %Y %H:%M:%S",
}

_LONG_OFFSET_RE = re.compile(
    r"^(?P<stamp>.+) GMT(?:(?P<sign>[+-])(?P<hours>\d{2}):(?P<minutes>\d{2})(?::(?P<seconds>\d{2}))?)?$"
)
_SHORT_OFFSET_RE = re.compile(
    r"^(?P<stamp>.+) (?:Z|(?P<sign>[+-])(?P<hours>\d{2}):(?P<minutes>\d{2})(?::(?P<seconds>\d{2}))?)$"
)

_OFFSET_RES = {
    TimestampPattern.MACHINE_LONG_OFFSET: _LONG_OFFSET_RE,
    TimestampPattern.MACHINE_SHORT_OFFSET: _SHORT_OFFSET_RE,
    TimestampPattern.HUMAN_LONG: _LONG_OFFSET_RE,
}


def now() -> datetime:
    """Current local time, carrying the local UTC offset."""
    return datetime.now().astimezone()


def _require_offset(value: datetime) -> timedelta:
    offset = value.utcoffset()
    if offset is None:
        raise ValueError(f"Timestamp {value!r} has no UTC offset")
    return offset


def _split_offset(offset: timedelta):
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    return total, sign, hours, minutes, seconds


def _offset_text(offset: timedelta, zero: str, prefix: str = "") -> str:
    total, sign, hours, minutes, seconds = _split_offset(offset)
    if total == 0:
        return zero
    text = f"{prefix}{sign}{hours:02d}:{minutes:02d}"
    if seconds:
        text += f":{seconds:02d}"
    return text


def format_iso(value: datetime) -> str:
    """Format as ISO-8601 with offset, e.g. ``2024-01-31T10:00:00.250000+01:00``."""
    _require_offset(value)
    return value.isoformat()


def parse_iso(text: str) -> datetime:
    """
    Parse ISO-8601 text that carries an offset.

    Raises:
        TimestampParseError: If the text is not ISO-8601 or has no offset
    """
    try:
        value = datetime.fromisoformat(text)
    except (TypeError, ValueError) as err:
        raise TimestampParseError(f"Text {text!r} is not an ISO-8601 timestamp") from err
    if value.utcoffset() is None:
        raise TimestampParseError(f"Text {text!r} has no UTC offset")
    return value


def format_timestamp(value: datetime, pattern: Union[TimestampPattern, str]) -> str:
    """
    Format an offset-aware timestamp with one of the custom patterns.

    Args:
        value: Timestamp to format (must carry an offset)
        pattern: ``TimestampPattern`` member or its value

    Example:
        format_timestamp(dt, TimestampPattern.MACHINE_SHORT_OFFSET)
        # "2024-01-31 10:00:00 +01:00"
    """
    pattern = TimestampPattern(pattern)
    offset = _require_offset(value)
    stamp = value.strftime(_STAMP_FORMATS[pattern])

    if pattern is TimestampPattern.MACHINE_SHORT_OFFSET:
        return f"{stamp} {_offset_text(offset, zero='Z')}"
    return f"{stamp} {_offset_text(offset, zero='GMT', prefix='GMT')}"


def parse_timestamp(text: str, pattern: Union[TimestampPattern, str]) -> datetime:
    """
    Parse text produced by ``format_timestamp`` with the same pattern.

    Raises:
        TimestampParseError: If the text does not match the pattern, names
            an impossible date (e.g. month 13) or a weekday the date does
            not fall on
    """
    pattern = TimestampPattern(pattern)
    match = _OFFSET_RES[pattern].match(text.strip())
    if match is None:
        raise TimestampParseError(f"Text {text!r} does not match pattern {pattern.value}")

    try:
        stamp = datetime.strptime(match.group("stamp"), _STAMP_FORMATS[pattern])
    except ValueError as err:
        raise TimestampParseError(f"Text {text!r} does not match pattern {pattern.value}: {err}") from err

    # strptime reads %A but never checks it against the date
    if pattern is TimestampPattern.HUMAN_LONG:
        weekday = match.group("stamp").split(",", 1)[0].strip()
        if weekday.lower() != stamp.strftime("%A").lower():
            raise TimestampParseError(
                f"Weekday {weekday!r} in {text!r} does not match the date ({stamp.strftime('%A')})"
            )

    offset = timedelta(0)
    if match.group("sign"):
        offset = timedelta(
            hours=int(match.group("hours")),
            minutes=int(match.group("minutes")),
            seconds=int(match.group("seconds") or 0),
        )
        if match.group("sign") == "-":
            offset = -offset
    try:
        tz = timezone(offset)
    except ValueError as err:
        raise TimestampParseError(f"Offset in {text!r} is out of range") from err

    return stamp.replace(tzinfo=tz)


def coerce_timestamp(value: Union[datetime, str, None]) -> Optional[datetime]:
    """
    Normalize a timestamp read back from a driver.

    Drivers hand back aware datetimes (PostgreSQL), naive datetimes
    (MySQL, SQL Server) or ISO text (SQLite). Naive values are taken as
    local time.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as err:
            raise TimestampParseError(f"Stored value {value!r} is not a timestamp") from err
    if value.utcoffset() is None:
        value = value.astimezone()
    return value


def display(value: Optional[datetime], pattern: TimestampPattern, missing: str) -> str:
    """Render ``value`` for humans, or ``missing`` when it is unset."""
    if value is None:
        return missing
    return format_timestamp(value, pattern)
