"""
Booking error taxonomy.

Every failure the engine reports to a caller is one of these. Routes turn
them into JSON responses through ``utils.decorators.handle_booking_errors``.
"""


class BookingError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Extra fields merged into the error response."""
        return dict(self.details)


class ValidationError(BookingError):
    """Malformed interval, missing field or off-grid time. Never retried."""

    status_code = 400

    def __init__(self, message: str, errors: list = None):
        super().__init__(message, {'errors': errors} if errors else None)
        self.errors = errors or []


class AuthorizationError(BookingError):
    """Caller does not own the reservation or session being changed."""

    status_code = 403


class NotFoundError(BookingError):
    """Referenced reservation, seat, branch or session does not exist."""

    status_code = 404


class ConflictError(BookingError):
    """Requested interval overlaps a confirmed reservation at submission time."""

    status_code = 409

    def __init__(self, message: str, seat_ids: list = None, conflicts: list = None):
        details = {'seat_ids': list(seat_ids or [])}
        if conflicts:
            details['conflicts'] = conflicts
        super().__init__(message, details)
        self.seat_ids = list(seat_ids or [])
        self.conflicts = conflicts or []


class InternalError(BookingError):
    """Persistence failure unrelated to the above. Safe to retry."""

    status_code = 500
