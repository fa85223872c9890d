"""
Standardized API response helpers.

Every endpoint answers with the same envelope:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "message", ...details}

Booking errors carry their details (offending fields, conflicting seat ids)
as extra top-level keys so clients can refresh just what changed.

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data={'reservation': reservation}, status=201)
    return api_error('Required fields are missing', status=400)
"""

from flask import jsonify, request
from typing import Any

from utils.exceptions import BookingError


def api_success(
    data: dict | None = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a success JSON response.

    Args:
        data: Payload placed under 'data'.
        message: Optional human-readable confirmation.
        status: HTTP status code (200, or 201 for created reservations).
        **extra_fields: Top-level fields such as 'count'.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build an error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Top-level context (e.g., 'errors', 'seat_ids').

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}
    response.update(extra_fields)
    return jsonify(response), status


def api_booking_error(error: BookingError) -> tuple:
    """Error response for a BookingError, using its status code and details."""
    return api_error(error.message, status=error.status_code, **error.to_dict())


def get_json_body() -> dict:
    """
    Parsed JSON object of the current request.

    Returns:
        dict: The body, or an empty dict when it is missing or not an object
    """
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
