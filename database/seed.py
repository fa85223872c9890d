"""
Database seed data.
Initial data population for fresh database installations.
"""

import math


# (code, name, address, opening, closing, days_off, seat_count)
BRANCHES = [
    ('TACH', 'Tachikawa', 'Nishikicho 2-1-2, Tachikawa, Tokyo', '10:00', '22:00', '', 12),
    ('AKIB', 'Akihabara', 'Sotokanda, Chiyoda, Tokyo', '10:00', '23:00', '', 16),
]

HIGH_SPEC_RATE_PER_MINUTE = 12
STANDARD_RATE_PER_MINUTE = 8


def seed_database(db):
    """Insert initial seed data."""

    for code, name, address, opening, closing, days_off, seat_count in BRANCHES:
        cursor = db.execute('''
            INSERT INTO branches (code, name, address, opening_time, closing_time, days_off)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (code, name, address, opening, closing, days_off))
        branch_id = cursor.lastrowid

        # Half of every branch runs high-spec machines
        high_spec_count = math.ceil(seat_count / 2)
        for number in range(1, seat_count + 1):
            is_high_spec = number <= high_spec_count
            rate = HIGH_SPEC_RATE_PER_MINUTE if is_high_spec else STANDARD_RATE_PER_MINUTE
            label = f'Gaming PC #{number}' + (' (High-Spec)' if is_high_spec else '')
            db.execute('''
                INSERT INTO seats (branch_id, name, seat_type, seat_number,
                                   rate_per_minute, rate_per_hour, status)
                VALUES (?, ?, 'PC', ?, ?, ?, 'available')
            ''', (branch_id, label, number, rate, rate * 60))
