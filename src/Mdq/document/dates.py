"""Date normalization for front-matter values and query bounds.

Front matter accepts three forms, all normalized to epoch seconds:

- RFC 3339 strings: ``2021-06-22T12:48:16-04:00``
- strptime ``%Y-%m-%dT%H:%M:%S%z`` strings: ``2021-06-22T12:48:16-0400``
- integer epoch seconds: ``1624380496`` (YAML int or digit string)
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil import parser as dt_parser

from Mdq.core.errors import DateParseError

_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)
_EPOCH_RE = re.compile(r"^[+-]?\d+$")
_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_STRPTIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def normalize_date(value: Any) -> int:
    """Normalize a front-matter date value to epoch seconds.

    Args:
        value: Raw YAML value (string or integer).

    Returns:
        Seconds since the Unix epoch.

    Raises:
        DateParseError: If the value matches none of the accepted forms,
            or is an epoch outside the range `datetime` can represent.
    """
    if isinstance(value, bool):
        raise DateParseError(value)
    if isinstance(value, int):
        return _checked_epoch(value, value)
    if isinstance(value, str):
        text = value.strip()
        parsed = _parse_rfc3339(text) or _parse_strptime(text)
        if parsed is not None:
            return int(parsed.timestamp())
        if _EPOCH_RE.match(text):
            return _checked_epoch(int(text), value)
    raise DateParseError(value)


def format_date(epoch: int) -> str:
    """Format epoch seconds as an RFC 3339 string in UTC."""
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat()


def parse_date_bound(text: str, *, end_of_day: bool = False) -> int:
    """Parse a date used as a query bound (`> 2021-01-01`).

    Accepts every front-matter form plus a bare ``YYYY-MM-DD`` day, read as
    UTC. With `end_of_day`, a bare day resolves to its last second so that
    upper bounds include the whole day.

    Raises:
        DateParseError: If the text is not a date.
    """
    value = text.strip()
    if _DAY_RE.match(value):
        try:
            day = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise DateParseError(text) from e
        if end_of_day:
            day += timedelta(days=1, seconds=-1)
        return int(day.timestamp())
    return normalize_date(value)


def _checked_epoch(epoch: int, raw: Any) -> int:
    try:
        datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, ValueError, OSError) as e:
        raise DateParseError(raw) from e
    return epoch


def _parse_rfc3339(text: str) -> datetime | None:
    if not _RFC3339_RE.match(text):
        return None
    try:
        return dt_parser.isoparse(text.upper())
    except ValueError:
        return None


def _parse_strptime(text: str) -> datetime | None:
    try:
        return datetime.strptime(text, _STRPTIME_FORMAT)
    except ValueError:
        return None
