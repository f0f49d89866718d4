"""Date parsing shared by event creation and search.

Two input formats are accepted, tried in order: RFC3339 timestamps
(``2025-05-01T18:30:00Z``, ``2025-05-01T18:30:00.5+02:00``) and plain calendar
dates (``2025-05-01``, read as midnight UTC). Both must match exactly: no
missing seconds, no compact forms, no single-digit month or day. Parsed
values are timezone aware so they compare cleanly against the stored UTC
column.
"""
import re
from datetime import datetime

import pytz

RFC3339_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)
DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _offset(value: str):
    if value == "Z":
        return pytz.utc
    sign = -1 if value[0] == "-" else 1
    hours, minutes = int(value[1:3]), int(value[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"invalid UTC offset: {value!r}")
    return pytz.FixedOffset(sign * (hours * 60 + minutes))


def _parse_rfc3339(value: str) -> datetime:
    match = RFC3339_RE.fullmatch(value)
    if not match:
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    # Digits past microseconds are dropped
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    naive = datetime(int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond)
    return _offset(offset).localize(naive)


def parse_date(value: str) -> datetime:
    """Parse ``value`` as RFC3339, falling back to YYYY-MM-DD.

    Raises ValueError when neither format matches.
    """
    try:
        return _parse_rfc3339(value)
    except ValueError:
        pass
    match = DATE_ONLY_RE.fullmatch(value)
    if not match:
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    year, month, day = (int(part) for part in match.groups())
    return pytz.utc.localize(datetime(year, month, day))


def end_of_day(value: datetime) -> datetime:
    """Move ``value`` to 23:59:59 of its own calendar day."""
    return value.replace(hour=23, minute=59, second=59, microsecond=0)


def to_utc(value: datetime) -> datetime:
    return value.astimezone(pytz.utc)


def utc_now() -> datetime:
    return datetime.now(pytz.utc)
