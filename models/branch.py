"""
Branch data access functions.
Branches own seats and define the operating window bookings must fit in.
"""

from database import get_db


def get_all_branches() -> list:
    """
    Get all branches with their seat counts.

    Returns:
        List of branch dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT b.*, COUNT(s.id) as total_seats
        FROM branches b
        LEFT JOIN seats s ON s.branch_id = b.id
        GROUP BY b.id
        ORDER BY b.code
    ''')
    return [dict(row) for row in cursor.fetchall()]


def get_branch_by_id(branch_id: int) -> dict:
    """
    Get branch by ID.

    Args:
        branch_id: Branch ID

    Returns:
        Branch dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM branches WHERE id = ?', (branch_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_branch(code: str, name: str, address: str = '',
                  opening_time: str = None, closing_time: str = None,
                  days_off: str = '') -> int:
    """
    Create a branch.

    Args:
        code: Short unique code (e.g. 'TACH')
        name: Display name
        address: Street address
        opening_time: HH:MM, or None for the configured default
        closing_time: HH:MM, or None for the configured default
        days_off: CSV of weekday names ('monday,tuesday')

    Returns:
        New branch ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO branches (code, name, address, opening_time, closing_time, days_off)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (code, name, address, opening_time, closing_time, days_off))
    db.commit()
    return cursor.lastrowid
