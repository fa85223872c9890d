"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'selection_sessions',
        'reservation_status_history',
        'reservations',
        'seats',
        'branches',
        'members',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Members (identity collaborator mirror)
    db.execute('''
        CREATE TABLE members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            display_name TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL,
            token_hash TEXT UNIQUE NOT NULL,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Seat catalog
    db.execute('''
        CREATE TABLE branches (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            code TEXT UNIQUE NOT NULL,
            name TEXT NOT NULL,
            address TEXT,
            opening_time TEXT,
            closing_time TEXT,
            days_off TEXT DEFAULT '',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE seats (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            branch_id INTEGER NOT NULL REFERENCES branches(id),
            name TEXT NOT NULL,
            seat_type TEXT DEFAULT 'PC',
            seat_number INTEGER,
            rate_per_minute REAL NOT NULL DEFAULT 0,
            rate_per_hour REAL NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'available'
                CHECK (status IN ('available', 'in-use', 'maintenance')),
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Reservations
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            seat_id INTEGER NOT NULL REFERENCES seats(id),
            user_id INTEGER NOT NULL REFERENCES members(id),
            reservation_date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            duration INTEGER NOT NULL CHECK (duration > 0 AND duration % 30 = 0),
            status TEXT NOT NULL DEFAULT 'confirmed'
                CHECK (status IN ('confirmed', 'cancelled', 'completed')),
            headcount INTEGER NOT NULL DEFAULT 1,
            notes TEXT DEFAULT '',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK (start_time < end_time)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
            status TEXT NOT NULL,
            action TEXT NOT NULL,
            changed_by INTEGER REFERENCES members(id),
            notes TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 4. In-progress seat selections, one JSON document per client session
    db.execute('''
        CREATE TABLE selection_sessions (
            session_id TEXT PRIMARY KEY,
            member_id INTEGER NOT NULL REFERENCES members(id) ON DELETE CASCADE,
            state_json TEXT NOT NULL,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Seat indexes
    db.execute('CREATE INDEX idx_seats_branch ON seats(branch_id)')
    db.execute('CREATE INDEX idx_seats_status ON seats(status)')

    # Reservation indexes
    db.execute('CREATE INDEX idx_reservations_seat_date ON reservations(seat_id, reservation_date, status)')
    db.execute('CREATE INDEX idx_reservations_user ON reservations(user_id, reservation_date)')
    db.execute('CREATE INDEX idx_reservations_date ON reservations(reservation_date, status)')

    # History indexes
    db.execute('CREATE INDEX idx_status_history_reservation ON reservation_status_history(reservation_id)')

    # Selection session indexes
    db.execute('CREATE INDEX idx_selection_sessions_member ON selection_sessions(member_id)')
