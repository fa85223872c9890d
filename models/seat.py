"""
Seat catalog data access functions.
Seats are read-only for the booking engine; the catalog is maintained elsewhere.
"""

from database import get_db

SEAT_STATUSES = ('available', 'in-use', 'maintenance')


def get_all_seats(branch_id: int = None, status: str = None) -> list:
    """
    Get seats with their branch information.

    Args:
        branch_id: Filter by branch (optional)
        status: Filter by seat status (optional)

    Returns:
        List of seat dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT s.*, b.code as branch_code, b.name as branch_name
        FROM seats s
        JOIN branches b ON s.branch_id = b.id
        WHERE 1=1
    '''
    params = []

    if branch_id:
        query += ' AND s.branch_id = ?'
        params.append(branch_id)

    if status:
        query += ' AND s.status = ?'
        params.append(status)

    query += ' ORDER BY b.code, s.seat_number, s.id'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_seats_by_ids(seat_ids: list) -> dict:
    """
    Get several seats at once.

    Args:
        seat_ids: List of seat IDs

    Returns:
        dict: {seat_id: seat dict} for the IDs that exist
    """
    if not seat_ids:
        return {}

    db = get_db()
    cursor = db.cursor()
    placeholders = ','.join('?' * len(seat_ids))
    cursor.execute(f'''
        SELECT s.*, b.code as branch_code, b.name as branch_name,
               b.opening_time, b.closing_time, b.days_off
        FROM seats s
        JOIN branches b ON s.branch_id = b.id
        WHERE s.id IN ({placeholders})
    ''', list(seat_ids))
    return {row['id']: dict(row) for row in cursor.fetchall()}


def create_seat(branch_id: int, name: str, rate_per_minute: float,
                seat_number: int = None, seat_type: str = 'PC',
                status: str = 'available') -> int:
    """
    Create a seat.

    Args:
        branch_id: Owning branch
        name: Display name
        rate_per_minute: Reservation rate (currency per minute)
        seat_number: Number within the branch
        seat_type: Seat type label
        status: 'available', 'in-use' or 'maintenance'

    Returns:
        New seat ID
    """
    if status not in SEAT_STATUSES:
        raise ValueError(f'Unknown seat status: {status}')

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO seats (branch_id, name, seat_type, seat_number,
                           rate_per_minute, rate_per_hour, status)
        VALUES (?, ?, ?, ?, ?, ?, ?)
    ''', (branch_id, name, seat_type, seat_number,
          rate_per_minute, rate_per_minute * 60, status))
    db.commit()
    return cursor.lastrowid


def is_bookable(seat: dict) -> bool:
    """Seats under maintenance cannot take advance reservations."""
    return seat.get('status') != 'maintenance'
