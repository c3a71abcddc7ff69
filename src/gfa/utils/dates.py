"""
Date helpers shared by the search filters and the message wrappers.
"""
from datetime import date, datetime
from typing import Union

import dateparser
import pytz

from gfa.exceptions import DateParseError

DateLike = Union[int, float, str, date, datetime]


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, leave aware ones untouched."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value


def parse_datetime(value: str) -> datetime:
    """
    Parse a free-form date string into an aware datetime.

    Args:
        value: Date string, e.g. "2024-01-31", "yesterday" or an RFC 2822 date

    Returns:
        Timezone-aware datetime (UTC when the input carries no zone)

    Raises:
        DateParseError: If the string cannot be parsed
    """
    if not value or not value.strip():
        raise DateParseError(value)
    parsed = dateparser.parse(value)
    if parsed is None:
        raise DateParseError(value)
    return ensure_aware(parsed)


def to_timestamp(value: DateLike) -> int:
    """
    Convert a date-like input to unix seconds.

    Integers and floats are taken as epoch seconds already, numeric strings
    too. Dates are taken at midnight UTC.

    Raises:
        DateParseError: If the input cannot be interpreted as a date
    """
    if isinstance(value, bool):
        raise DateParseError(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        return int(ensure_aware(value).timestamp())
    if isinstance(value, date):
        midnight = datetime(value.year, value.month, value.day)
        return int(ensure_aware(midnight).timestamp())
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
        return int(parse_datetime(stripped).timestamp())
    raise DateParseError(value)
