"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in zero-padded YYYY-MM-DD format.

    Dates are stored and matched as text, so only the canonical form is
    accepted ('2026-11-1' is rejected).

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    if not isinstance(date_str, str):
        return False
    try:
        parsed = datetime.strptime(date_str, '%Y-%m-%d')
        return parsed.strftime('%Y-%m-%d') == date_str
    except ValueError:
        return False


def validate_time_format(time_str: str) -> bool:
    """
    Validate time is in zero-padded HH:MM format (00:00 to 24:00).

    Args:
        time_str: Time string to validate

    Returns:
        True if valid format
    """
    if not isinstance(time_str, str) or not re.match(r'^\d{2}:\d{2}$', time_str):
        return False
    hours, minutes = int(time_str[:2]), int(time_str[3:])
    if hours == 24:
        return minutes == 0
    return hours < 24 and minutes < 60


def validate_date_range(start_date: str, end_date: str) -> bool:
    """
    Validate that end date is not before start date.

    Args:
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)

    Returns:
        True if valid date range
    """
    try:
        start = datetime.strptime(start_date, '%Y-%m-%d')
        end = datetime.strptime(end_date, '%Y-%m-%d')
        return end >= start
    except (TypeError, ValueError):
        return False


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = str(text).strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def require_fields(data: dict, fields: list) -> list:
    """
    List required fields that are missing or empty.

    Args:
        data: Parsed request body
        fields: Required field names

    Returns:
        Names of the missing fields (empty when all present)
    """
    return [f for f in fields if data.get(f) in (None, '')]


def validate_optional_id(value) -> bool:
    """
    Validate an optional record ID taken from a JSON body.

    Args:
        value: Raw body value

    Returns:
        True if the value is absent or a positive integer
    """
    if value is None:
        return True
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
