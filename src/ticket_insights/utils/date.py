"""Utility functions for date operations."""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

import dateutil.parser

logger = logging.getLogger("ticket-insights.utils")

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# Shorter digit strings are compact ISO dates such as 20240115.
COMPACT_DATE_LENGTH = 8


def _is_epoch_string(value: str) -> bool:
    stripped = value.strip()
    return stripped.isdigit() and len(stripped) > COMPACT_DATE_LENGTH


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a tracker timestamp into a timezone-aware datetime.

    The input accepts:
    - None or an empty string
    - A datetime (naive values are read as UTC)
    - Epoch timestamp in milliseconds (int, float, or a digit-only string
      longer than a compact `YYYYMMDD` date)
    - Other formats supported by `dateutil.parser` (ISO 8601, RFC 3339,
      Jira's `2024-01-01T10:00:00.000+0000`, date-only `2024-12-31`)

    Args:
        value: Raw timestamp value

    Returns:
        Timezone-aware datetime, or None if the value is empty or unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        return None

    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, int | float):
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        elif isinstance(value, str) and _is_epoch_string(value):
            parsed = datetime.fromtimestamp(int(value.strip()) / 1000, tz=timezone.utc)
        elif isinstance(value, str):
            parsed = dateutil.parser.parse(value)
        else:
            logger.debug(f"Unsupported timestamp type {type(value).__name__}")
            return None
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Error parsing timestamp '{value}': {str(e)}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_millis(delta: timedelta) -> int:
    """Convert a timedelta into whole milliseconds."""
    return delta // timedelta(milliseconds=1)


def days_between(start: datetime, end: datetime) -> int:
    """
    Whole days elapsed from start to end, floored.

    Negative when end precedes start.
    """
    return math.floor((end - start).total_seconds() / (MS_PER_DAY / 1000))


def millis_to_days(millis: float) -> float:
    """Convert milliseconds into fractional days."""
    return millis / MS_PER_DAY
