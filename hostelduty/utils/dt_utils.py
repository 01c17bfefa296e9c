# File: utils/dt_utils.py
"""Date and time utilities for hostelduty.

Pure Python date/time functions with no dependency on the rest of the package.
Uses standard library datetime and python-dateutil for ISO 8601 parsing, since
timestamps arrive from the data layer in several ISO shapes ("Z" suffix,
fractional seconds, date-only).

Functions:
    - dt_now_utc: Current datetime in UTC
    - as_utc: Convert a datetime to UTC (naive values are treated as UTC)
    - dt_parse: Normalize str/date/datetime input to an aware UTC datetime
    - dt_days_between: Fractional days between two instants
    - dt_days_since: Fractional days from an instant until now
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging

from dateutil import parser as dt_parser

# Module-level logger
_LOGGER = logging.getLogger(__name__)

SECONDS_PER_DAY = timedelta(days=1).total_seconds()


# ==============================================================================
# Current Time
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Timestamps from the data layer are stored in UTC, so a naive value is
    assumed to already be UTC rather than local time.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse(dt_input: str | date | datetime | None) -> datetime | None:
    """Normalize a datetime-ish input to an aware UTC datetime.

    Args:
        dt_input: ISO 8601 string, date or datetime, or None

    Returns:
        UTC-aware datetime, or None if the input is empty or unparsable.

    Example:
        >>> dt_parse("2026-01-18T12:30:00Z")
        datetime.datetime(2026, 1, 18, 12, 30, tzinfo=datetime.timezone.utc)
        >>> dt_parse("2026-01-18")
        datetime.datetime(2026, 1, 18, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if not dt_input:
        return None

    if isinstance(dt_input, datetime):
        return as_utc(dt_input)

    if isinstance(dt_input, date):
        return datetime.combine(dt_input, datetime.min.time(), tzinfo=UTC)

    if isinstance(dt_input, str):
        try:
            return as_utc(dt_parser.isoparse(dt_input))
        except (ValueError, OverflowError):
            _LOGGER.debug("dt_parse: Failed to parse datetime: %s", dt_input)
            return None

    _LOGGER.debug("dt_parse: Unsupported input type: %s", type(dt_input))
    return None


# ==============================================================================
# Arithmetic
# ==============================================================================


def dt_days_between(later: datetime, earlier: datetime) -> float:
    """Return fractional days from earlier to later (negative if reversed)."""
    return (as_utc(later) - as_utc(earlier)).total_seconds() / SECONDS_PER_DAY


def dt_days_since(
    dt_input: str | date | datetime | None, now: datetime | None = None
) -> float | None:
    """Return fractional days elapsed since dt_input, or None if unparsable.

    Args:
        dt_input: Past instant in any form accepted by dt_parse
        now: Reference time. Defaults to the current UTC time.
    """
    parsed = dt_parse(dt_input)
    if parsed is None:
        return None
    return dt_days_between(now or dt_now_utc(), parsed)
