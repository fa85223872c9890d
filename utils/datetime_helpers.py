"""Timezone-aware date helpers for the club (bookings follow local club time)."""

from datetime import date, datetime, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from flask import current_app

DATE_FORMAT = '%Y-%m-%d'


def get_timezone() -> ZoneInfo:
    """Get the configured club timezone."""
    return ZoneInfo(current_app.config.get('TIMEZONE', 'Asia/Tokyo'))


def get_today() -> date:
    """Get today's date in the club timezone."""
    return datetime.now(get_timezone()).date()


def parse_date(date_str: str) -> date:
    """Parse a YYYY-MM-DD string (raises ValueError when malformed)."""
    return datetime.strptime(date_str, DATE_FORMAT).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def days_in_range(date_from: str, date_to: str) -> int:
    """Number of dates in the inclusive range (0 when reversed)."""
    return max((parse_date(date_to) - parse_date(date_from)).days + 1, 0)


def iter_dates(date_from: str, date_to: str) -> Iterator[str]:
    """
    Yield every date of an inclusive range as YYYY-MM-DD.

    Args:
        date_from: First date
        date_to: Last date

    Yields:
        str: Dates in ascending order
    """
    current = parse_date(date_from)
    end = parse_date(date_to)
    while current <= end:
        yield format_date(current)
        current += timedelta(days=1)


def booking_horizon() -> tuple:
    """
    First and last dates open for advance booking.

    Returns:
        tuple: (today, today + MAX_ADVANCE_BOOKING_DAYS) as date objects
    """
    today = get_today()
    days = current_app.config.get('MAX_ADVANCE_BOOKING_DAYS', 30)
    return today, today + timedelta(days=days)
