"""
Reservation CRUD operations.
Turns validated booking requests into confirmed reservations, and handles
status changes (cancel/complete) and note edits.

Creation re-reads the confirmed set inside a BEGIN IMMEDIATE transaction:
SQLite grants the write lock before the read, so two submissions for the
same seat/slot cannot both pass the conflict check.
"""

import logging
import sqlite3

from flask import current_app

from database import write_transaction
from utils.datetime_helpers import booking_horizon, parse_date
from utils.exceptions import (
    AuthorizationError, ConflictError, InternalError,
    NotFoundError, ValidationError
)
from utils.messages import get_message
from utils.validators import sanitize_input, validate_date_format

from .conflict import find_conflicts
from .reservation_queries import (
    RESERVATION_STATUSES, get_confirmed_reservations, get_reservation_by_id
)
from .seat import get_seats_by_ids, is_bookable
from .time_grid import get_operating_window, is_day_off, is_within_window, validate_interval

logger = logging.getLogger(__name__)

# Status changes a member may request on an existing reservation
ALLOWED_STATUS_CHANGES = {
    'confirmed': ('cancelled', 'completed'),
}


# =============================================================================
# REQUEST VALIDATION
# =============================================================================

def _validate_date(date: str) -> list:
    if not validate_date_format(date):
        return [{'field': 'date', 'value': date, 'error': 'invalid_date'}]

    requested = parse_date(date)
    first_day, last_day = booking_horizon()

    if requested < first_day:
        return [{'field': 'date', 'value': date, 'error': 'date_in_past'}]
    if requested > last_day:
        return [{'field': 'date', 'value': date, 'error': 'beyond_booking_horizon'}]
    return []


def _validate_headcount(headcount) -> list:
    max_headcount = current_app.config.get('MAX_HEADCOUNT', 10)
    if not isinstance(headcount, int) or isinstance(headcount, bool) \
            or not 1 <= headcount <= max_headcount:
        return [{'field': 'headcount', 'value': headcount, 'error': 'out_of_range',
                 'message': get_message('invalid_headcount', max=max_headcount)}]
    return []


def validate_booking_request(request: dict) -> tuple:
    """
    Check the structural preconditions of a booking request.

    Args:
        request: {'date': str, 'headcount': int (optional),
                  'items': [{'seat_id', 'start_time', 'end_time'}]}

    Returns:
        tuple: (date, headcount, entries, seats_by_id)

    Raises:
        ValidationError: Listing every offending entry
        NotFoundError: If a referenced seat does not exist
    """
    items = request.get('items') or []
    if not items:
        raise ValidationError(get_message('empty_request'),
                              errors=[{'field': 'items', 'error': 'empty'}])

    date = request.get('date')
    headcount = request.get('headcount', 1)

    errors = _validate_date(date) + _validate_headcount(headcount)

    entries = []
    seen = set()
    for index, item in enumerate(items):
        seat_id = item.get('seat_id')
        start = item.get('start_time')
        end = item.get('end_time')

        if not isinstance(seat_id, int) or isinstance(seat_id, bool):
            errors.append({'index': index, 'field': 'seatId', 'value': seat_id, 'error': 'invalid_seat'})
            continue
        if seat_id in seen:
            errors.append({'index': index, 'seat_id': seat_id, 'error': 'duplicate_seat'})
            continue
        seen.add(seat_id)

        try:
            validate_interval(start, end)
        except ValidationError as e:
            errors.extend({'index': index, 'seat_id': seat_id, **err} for err in e.errors)
            continue

        entries.append({'index': index, 'seat_id': seat_id, 'start_time': start, 'end_time': end})

    if errors:
        raise ValidationError(get_message('invalid_request'), errors=errors)

    seats_by_id = get_seats_by_ids([e['seat_id'] for e in entries])
    missing = [e['seat_id'] for e in entries if e['seat_id'] not in seats_by_id]
    if missing:
        raise NotFoundError(get_message('seat_not_found'), {'seat_ids': missing})

    for entry in entries:
        seat = seats_by_id[entry['seat_id']]
        base = {'index': entry['index'], 'seat_id': seat['id']}

        if not is_bookable(seat):
            errors.append({**base, 'error': 'seat_under_maintenance'})
            continue
        if is_day_off(seat, date):
            errors.append({**base, 'field': 'date', 'error': 'branch_closed'})
            continue

        opening, closing = get_operating_window(seat, date)
        if not is_within_window(entry['start_time'], entry['end_time'], opening, closing):
            errors.append({**base, 'error': 'outside_operating_hours',
                           'opening_time': opening, 'closing_time': closing})

    if errors:
        raise ValidationError(get_message('invalid_request'), errors=errors)

    return date, headcount, entries, seats_by_id


# =============================================================================
# CREATE
# =============================================================================

def _is_contention(error: sqlite3.OperationalError) -> bool:
    message = str(error).lower()
    return 'locked' in message or 'busy' in message


def _commit_booking(user_id: int, date: str, headcount: int,
                    entries: list, notes: str) -> list:
    """Conflict check and inserts inside one write transaction."""
    reservation_ids = []

    try:
        with write_transaction() as cursor:
            seat_ids = [e['seat_id'] for e in entries]
            existing = get_confirmed_reservations(date, seat_ids, cursor)

            conflicts = []
            for entry in entries:
                for r in find_conflicts(entry['seat_id'], date, entry['start_time'],
                                        entry['end_time'], existing):
                    conflicts.append({
                        'seat_id': entry['seat_id'],
                        'start_time': r['start_time'],
                        'end_time': r['end_time']
                    })

            if conflicts:
                conflicting_seats = sorted({c['seat_id'] for c in conflicts})
                raise ConflictError(
                    get_message('conflict', seats=', '.join(str(s) for s in conflicting_seats)),
                    seat_ids=conflicting_seats,
                    conflicts=conflicts
                )

            for entry in entries:
                duration = validate_interval(entry['start_time'], entry['end_time'])
                cursor.execute('''
                    INSERT INTO reservations (
                        seat_id, user_id, reservation_date, start_time, end_time,
                        duration, status, headcount, notes, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, 'confirmed', ?, ?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                ''', (entry['seat_id'], user_id, date, entry['start_time'], entry['end_time'],
                      duration, headcount, notes))
                reservation_id = cursor.lastrowid
                reservation_ids.append(reservation_id)

                cursor.execute('''
                    INSERT INTO reservation_status_history
                    (reservation_id, status, action, changed_by, notes, created_at)
                    VALUES (?, 'confirmed', 'created', ?, 'Reservation created', CURRENT_TIMESTAMP)
                ''', (reservation_id, user_id))

    except sqlite3.OperationalError:
        raise
    except sqlite3.Error as e:
        logger.exception('Booking insert failed for member %s on %s', user_id, date)
        raise InternalError(get_message('internal_error')) from e

    return [get_reservation_by_id(rid) for rid in reservation_ids]


def submit_booking_request(user_id: int, request: dict, notes: str = '') -> list:
    """
    Book every seat of a request, or none of them.

    Args:
        user_id: Authenticated member ID
        request: {'date', 'headcount', 'items': [{'seat_id', 'start_time', 'end_time'}]}
        notes: Free-text notes copied onto each reservation

    Returns:
        list: Created reservation dicts, in request order

    Raises:
        ValidationError: Malformed request (nothing written)
        NotFoundError: Unknown seat (nothing written)
        ConflictError: A seat interval overlaps a confirmed reservation,
            or the write lock stayed contended after the retry (nothing written)
        InternalError: Unexpected database failure (nothing written)
    """
    date, headcount, entries, _ = validate_booking_request(request)
    notes = sanitize_input(notes, current_app.config.get('NOTES_MAX_LENGTH', 500))

    retries = current_app.config.get('BOOKING_CONTENTION_RETRIES', 1)
    attempt = 0

    while True:
        try:
            reservations = _commit_booking(user_id, date, headcount, entries, notes)
            break
        except ConflictError as e:
            logger.info('Booking rejected for member %s on %s: conflicts on seats %s',
                        user_id, date, e.seat_ids)
            raise
        except sqlite3.OperationalError as e:
            if not _is_contention(e):
                logger.exception('Booking failed for member %s on %s', user_id, date)
                raise InternalError(get_message('internal_error')) from e
            if attempt < retries:
                attempt += 1
                logger.warning('Write lock contended for member %s on %s, retry %d',
                               user_id, date, attempt)
                continue
            seat_ids = sorted({entry['seat_id'] for entry in entries})
            raise ConflictError(get_message('contention'), seat_ids=seat_ids) from e

    logger.info('Member %s booked %d seat(s) on %s: reservations %s',
                user_id, len(reservations), date, [r['id'] for r in reservations])
    return reservations


def create_reservation(user_id: int, seat_id: int, date: str, start_time: str,
                       end_time: str, notes: str = '', headcount: int = 1) -> dict:
    """
    Book a single seat interval.

    Wrapper for submit_booking_request with a one-entry request.

    Returns:
        dict: The created reservation
    """
    request = {
        'date': date,
        'headcount': headcount,
        'items': [{'seat_id': seat_id, 'start_time': start_time, 'end_time': end_time}]
    }
    return submit_booking_request(user_id, request, notes)[0]


# =============================================================================
# UPDATE
# =============================================================================

def _get_owned_reservation(reservation_id: int, user_id: int) -> dict:
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise NotFoundError(get_message('reservation_not_found'))
    if reservation['user_id'] != user_id:
        raise AuthorizationError(get_message('not_owner'))
    return reservation


def update_reservation(reservation_id: int, user_id: int,
                       notes: str = None, status: str = None) -> dict:
    """
    Update notes and/or status of a member's own reservation.

    Status may only move from 'confirmed' to 'cancelled' or 'completed';
    bringing a reservation back to 'confirmed' would skip the conflict check.

    Args:
        reservation_id: Reservation ID
        user_id: Authenticated member ID
        notes: New notes (optional)
        status: New status (optional)

    Returns:
        dict: Updated reservation

    Raises:
        NotFoundError, AuthorizationError, ValidationError, ConflictError
    """
    reservation = _get_owned_reservation(reservation_id, user_id)
    current_status = reservation['status']

    if status is not None and status != current_status:
        if status not in RESERVATION_STATUSES:
            raise ValidationError(
                get_message('invalid_status', statuses=', '.join(RESERVATION_STATUSES)),
                errors=[{'field': 'status', 'value': status, 'error': 'invalid_status'}]
            )
        if status not in ALLOWED_STATUS_CHANGES.get(current_status, ()):
            raise ValidationError(
                get_message('invalid_status_change', current=current_status, new=status),
                errors=[{'field': 'status', 'value': status, 'error': 'invalid_status_change'}]
            )
    else:
        status = None

    updates = []
    values = []

    if notes is not None:
        updates.append('notes = ?')
        values.append(sanitize_input(notes, current_app.config.get('NOTES_MAX_LENGTH', 500)))

    if status is not None:
        updates.append('status = ?')
        values.append(status)

    if not updates:
        return reservation

    updates.append('updated_at = CURRENT_TIMESTAMP')

    try:
        with write_transaction() as cursor:
            # Only apply if nobody changed the status since it was read
            cursor.execute(
                f'UPDATE reservations SET {", ".join(updates)} WHERE id = ? AND status = ?',
                values + [reservation_id, current_status]
            )
            if cursor.rowcount == 0:
                raise ConflictError(get_message('reservation_modified'),
                                    seat_ids=[reservation['seat_id']])

            if status is not None:
                cursor.execute('''
                    INSERT INTO reservation_status_history
                    (reservation_id, status, action, changed_by, notes, created_at)
                    VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                ''', (reservation_id, status, status, user_id,
                      f'Status changed from {current_status}'))

    except sqlite3.Error as e:
        logger.exception('Updating reservation %s failed', reservation_id)
        raise InternalError(get_message('internal_error')) from e

    if status is not None:
        logger.info('Member %s moved reservation %s from %s to %s',
                    user_id, reservation_id, current_status, status)

    return get_reservation_by_id(reservation_id)


def cancel_reservation(reservation_id: int, user_id: int) -> dict:
    """
    Cancel a member's confirmed reservation. The row is kept with status
    'cancelled' and no longer counts for conflict checks.

    Returns:
        dict: Cancelled reservation

    Raises:
        NotFoundError, AuthorizationError, ValidationError
    """
    reservation = _get_owned_reservation(reservation_id, user_id)
    if reservation['status'] != 'confirmed':
        raise ValidationError(
            get_message('not_cancellable'),
            errors=[{'field': 'status', 'value': reservation['status'], 'error': 'not_cancellable'}]
        )
    return update_reservation(reservation_id, user_id, status='cancelled')
