"""
Centralized user-facing messages.
All API error and success text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'reservation_created': 'Reservation created',
    'reservations_created': 'Booking confirmed for {count} seat(s)',
    'reservation_updated': 'Reservation updated',
    'reservation_cancelled': 'Reservation cancelled',
    'selection_created': 'Selection started',
    'selection_cleared': 'Selection cleared',

    # Error messages
    'unauthenticated': 'Authentication required: a valid bearer token is needed',
    'permission_denied': 'You do not have permission for this action',
    'not_owner': 'This reservation belongs to another member',
    'selection_not_owner': 'This selection belongs to another member',
    'reservation_not_found': 'Reservation not found',
    'seat_not_found': 'Seat not found',
    'branch_not_found': 'Branch not found',
    'selection_not_found': 'Selection session not found',
    'missing_fields': 'Required fields are missing: {fields}',
    'invalid_request': 'The booking request is invalid',
    'invalid_date': 'Date must use the YYYY-MM-DD format',
    'invalid_time': 'Time must use the HH:MM format',
    'invalid_date_range': 'dateTo must not be before dateFrom',
    'date_range_too_long': 'The date range may cover at most {days} days',
    'empty_request': 'Select at least one seat and time range',
    'conflict': 'The selected time is already reserved for seat(s) {seats}',
    'contention': 'The seat was being booked by someone else, please refresh and try again',
    'invalid_status': 'Status must be one of {statuses}',
    'invalid_status_change': 'A {current} reservation cannot become {new}',
    'not_cancellable': 'Only confirmed reservations can be cancelled',
    'reservation_modified': 'The reservation was changed by another request, please reload it',
    'invalid_headcount': 'Headcount must be between 1 and {max}',
    'internal_error': 'The reservation service failed, please try again',
    'not_found': 'Resource not found',
    'method_not_allowed': 'Method not allowed',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message by key with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message string
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
