"""
Reservation data access functions.

This module re-exports the reservation functions from the split modules:
- reservation_crud.py: Booking, status changes and note edits
- reservation_queries.py: Listing, history and the confirmed-set reads
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# CRUD operations
from .reservation_crud import (
    # Constants
    ALLOWED_STATUS_CHANGES,
    # Create
    validate_booking_request,
    submit_booking_request,
    create_reservation,
    # Update
    update_reservation,
    cancel_reservation,
)

# Queries
from .reservation_queries import (
    # Constants
    RESERVATION_STATUSES,
    # Confirmed set
    get_confirmed_reservations,
    get_confirmed_reservations_between,
    # Read
    get_reservation_by_id,
    get_member_reservations,
    get_status_history,
)

__all__ = [
    'ALLOWED_STATUS_CHANGES',
    'validate_booking_request',
    'submit_booking_request',
    'create_reservation',
    'update_reservation',
    'cancel_reservation',
    'RESERVATION_STATUSES',
    'get_confirmed_reservations',
    'get_confirmed_reservations_between',
    'get_reservation_by_id',
    'get_member_reservations',
    'get_status_history',
]
