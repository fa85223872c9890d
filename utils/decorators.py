"""
Route decorators for authentication and error translation.
"""

import logging
from functools import wraps
from flask_login import login_required

from utils.api_response import api_booking_error
from utils.exceptions import BookingError

logger = logging.getLogger(__name__)


def handle_booking_errors(func):
    """
    Decorator turning booking errors raised by a route into JSON responses.

    Usage:
        @bp.route('/reservations', methods=['POST'])
        @login_required
        @handle_booking_errors
        def create():
            ...

    ValidationError -> 400, AuthorizationError -> 403, NotFoundError -> 404,
    ConflictError -> 409, InternalError -> 500. The error's details (offending
    fields, conflicting seat ids) are merged into the response body.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BookingError as e:
            if e.status_code >= 500:
                logger.error('%s failed: %s', func.__name__, e.message)
            return api_booking_error(e)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'handle_booking_errors']
