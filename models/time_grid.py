"""
Time grid helpers.

Every start/end time the engine handles is quantized to 30-minute slots
inside an operating window (10:00 to 22:00 unless a branch says otherwise).
Times travel as zero-padded 'HH:MM' strings and are compared as minutes
since midnight.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from flask import current_app, has_app_context

from utils.exceptions import ValidationError
from utils.validators import validate_time_format

SLOT_MINUTES = 30

DEFAULT_OPENING_TIME = '10:00'
DEFAULT_CLOSING_TIME = '22:00'

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']


# =============================================================================
# PARSING / FORMATTING
# =============================================================================

def parse_time(value: str, field: str = 'time') -> int:
    """
    Convert 'HH:MM' to minutes since midnight.

    Args:
        value: Time string
        field: Field name reported on failure

    Returns:
        int: Minutes since midnight

    Raises:
        ValidationError: If the string is not a valid HH:MM time
    """
    if not validate_time_format(value):
        raise ValidationError(
            f'{field} must use the HH:MM format',
            errors=[{'field': field, 'value': value, 'error': 'invalid_time'}]
        )
    return int(value[:2]) * 60 + int(value[3:])


def format_time(minutes: int) -> str:
    """Convert minutes since midnight to 'HH:MM'."""
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def is_slot_aligned(value: str) -> bool:
    """True when the time sits exactly on the 30-minute grid."""
    if not validate_time_format(value):
        return False
    return parse_time(value) % SLOT_MINUTES == 0


def add_slots(value: str, count: int = 1) -> str:
    """Shift a time by a number of grid units."""
    return format_time(parse_time(value) + count * SLOT_MINUTES)


def validate_interval(start: str, end: str) -> int:
    """
    Check a candidate interval and return its length in minutes.

    Args:
        start: Start time (HH:MM)
        end: End time (HH:MM)

    Returns:
        int: Duration in minutes, a positive multiple of SLOT_MINUTES

    Raises:
        ValidationError: If either bound is malformed or off-grid, or start >= end
    """
    start_minutes = parse_time(start, 'startTime')
    end_minutes = parse_time(end, 'endTime')

    errors = []
    if start_minutes % SLOT_MINUTES:
        errors.append({'field': 'startTime', 'value': start, 'error': 'not_slot_aligned'})
    if end_minutes % SLOT_MINUTES:
        errors.append({'field': 'endTime', 'value': end, 'error': 'not_slot_aligned'})
    if start_minutes >= end_minutes:
        errors.append({'field': 'endTime', 'value': end, 'error': 'end_not_after_start'})

    if errors:
        raise ValidationError(f'Invalid interval {start}-{end}', errors=errors)

    return end_minutes - start_minutes


# =============================================================================
# OPERATING WINDOW
# =============================================================================

def get_default_window() -> Tuple[str, str]:
    """Configured operating window, falling back to 10:00-22:00."""
    if has_app_context():
        return (
            current_app.config.get('OPENING_TIME', DEFAULT_OPENING_TIME),
            current_app.config.get('CLOSING_TIME', DEFAULT_CLOSING_TIME),
        )
    return DEFAULT_OPENING_TIME, DEFAULT_CLOSING_TIME


def is_day_off(branch: Optional[dict], date_str: str) -> bool:
    """True if the branch is closed on the given date."""
    if not branch or not branch.get('days_off'):
        return False
    days_off = {d.strip().lower() for d in branch['days_off'].split(',') if d.strip()}
    weekday = WEEKDAYS[datetime.strptime(date_str, '%Y-%m-%d').weekday()]
    return weekday in days_off


def get_operating_window(branch: Optional[dict] = None,
                         date_str: str = None) -> Optional[Tuple[str, str]]:
    """
    Operating window for a branch on a date.

    Args:
        branch: Branch dict (opening_time, closing_time, days_off) or None
        date_str: Date (YYYY-MM-DD); used for the day-off check

    Returns:
        (opening, closing) tuple, or None when the branch is closed that day
    """
    if date_str and is_day_off(branch, date_str):
        return None

    opening, closing = get_default_window()
    if branch:
        opening = branch.get('opening_time') or opening
        closing = branch.get('closing_time') or closing
    return opening, closing


def generate_time_slots(opening: str = None, closing: str = None) -> List[str]:
    """
    Slot start instants of an operating window.

    A slot is offered only if it also ends inside the window, so a
    10:00-22:00 window yields 10:00, 10:30, ..., 21:30.

    Args:
        opening: Window start (HH:MM)
        closing: Window end (HH:MM)

    Returns:
        list: Slot start times as 'HH:MM'
    """
    if opening is None or closing is None:
        default_opening, default_closing = get_default_window()
        opening = opening or default_opening
        closing = closing or default_closing

    first = parse_time(opening, 'opening_time')
    last = parse_time(closing, 'closing_time')

    # Snap a misaligned opening forward onto the grid
    if first % SLOT_MINUTES:
        first += SLOT_MINUTES - first % SLOT_MINUTES

    return [format_time(m) for m in range(first, last - SLOT_MINUTES + 1, SLOT_MINUTES)]


def is_within_window(start: str, end: str, opening: str, closing: str) -> bool:
    """True if [start, end) lies inside [opening, closing]."""
    return (parse_time(opening) <= parse_time(start)
            and parse_time(end) <= parse_time(closing))
