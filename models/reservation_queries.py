"""
Reservation query functions.
Handles listing, filtering, and the confirmed-set reads used for conflict checks.
"""

from database import get_db

RESERVATION_STATUSES = ('confirmed', 'cancelled', 'completed')


# =============================================================================
# CONFIRMED SET
# =============================================================================

def get_confirmed_reservations(date: str, seat_ids: list = None, cursor=None) -> list:
    """
    Confirmed reservations for a date, optionally limited to some seats.

    This is the authoritative input of both the conflict detector and the
    availability aggregator. Pass the cursor of an open write transaction to
    read inside it.

    Args:
        date: Date (YYYY-MM-DD)
        seat_ids: Restrict to these seat IDs (optional)
        cursor: Active transaction cursor (optional)

    Returns:
        list: Reservation dicts ordered by seat and start time
    """
    cur = cursor or get_db().cursor()

    query = '''
        SELECT id, seat_id, user_id, reservation_date, start_time, end_time, status
        FROM reservations
        WHERE reservation_date = ?
          AND status = 'confirmed'
    '''
    params = [date]

    if seat_ids:
        placeholders = ','.join('?' * len(seat_ids))
        query += f' AND seat_id IN ({placeholders})'
        params.extend(seat_ids)

    query += ' ORDER BY seat_id, start_time'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def get_confirmed_reservations_between(date_from: str, date_to: str,
                                       seat_ids: list = None) -> list:
    """
    Confirmed reservations for an inclusive date range.

    Args:
        date_from: Range start (YYYY-MM-DD)
        date_to: Range end (YYYY-MM-DD)
        seat_ids: Restrict to these seat IDs (optional)

    Returns:
        list: Reservation dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT id, seat_id, user_id, reservation_date, start_time, end_time, status
        FROM reservations
        WHERE reservation_date >= ?
          AND reservation_date <= ?
          AND status = 'confirmed'
    '''
    params = [date_from, date_to]

    if seat_ids:
        placeholders = ','.join('?' * len(seat_ids))
        query += f' AND seat_id IN ({placeholders})'
        params.extend(seat_ids)

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: int, cursor=None) -> dict:
    """
    Get reservation by ID with seat information.

    Args:
        reservation_id: Reservation ID
        cursor: Active transaction cursor (optional)

    Returns:
        dict: Reservation or None
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT r.*, s.name as seat_name, s.branch_id
        FROM reservations r
        JOIN seats s ON r.seat_id = s.id
        WHERE r.id = ?
    ''', (reservation_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_member_reservations(
    user_id: int,
    status: str = None,
    date_from: str = None,
    date_to: str = None
) -> list:
    """
    List a member's reservations, newest first.

    Args:
        user_id: Owning member ID
        status: Status filter (optional)
        date_from: Range start, inclusive (optional)
        date_to: Range end, inclusive (optional)

    Returns:
        list: Reservation dicts with seat names
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*, s.name as seat_name, s.branch_id
        FROM reservations r
        JOIN seats s ON r.seat_id = s.id
        WHERE r.user_id = ?
    '''
    params = [user_id]

    if status:
        query += ' AND r.status = ?'
        params.append(status)

    if date_from:
        query += ' AND r.reservation_date >= ?'
        params.append(date_from)

    if date_to:
        query += ' AND r.reservation_date <= ?'
        params.append(date_to)

    query += ' ORDER BY r.reservation_date DESC, r.start_time DESC'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_status_history(reservation_id: int) -> list:
    """
    Status change history of a reservation, oldest first.

    Args:
        reservation_id: Reservation ID

    Returns:
        list: History entries
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT status, action, changed_by, notes, created_at
        FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY id
    ''', (reservation_id,))
    return [dict(row) for row in cursor.fetchall()]
