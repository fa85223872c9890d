"""
Database connection management.
Handles per-request connections, write transactions, initialization, and teardown.
"""

import sqlite3
import os
from contextlib import contextmanager
from flask import g, current_app


def get_db():
    """
    Get the request-scoped database connection with row factory.

    Each app context (request, CLI command or worker thread) gets its own
    connection; sqlite3 connections are never shared across threads.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/seatclub.db')
        db_dir = os.path.dirname(db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

        g.db = sqlite3.connect(
            db_path,
            # Seconds to wait for another writer's lock before "database is locked"
            timeout=current_app.config.get('DATABASE_TIMEOUT', 5.0)
        )
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # WAL lets readers proceed while a booking transaction holds the write lock
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


@contextmanager
def write_transaction():
    """
    Run a block inside ``BEGIN IMMEDIATE`` on the request connection.

    The write lock is taken before the first read, so nothing another
    connection commits can invalidate what the block reads before it
    commits. Commits on success and rolls back on any exception.

    Usage:
        with write_transaction() as cursor:
            cursor.execute('SELECT ...')
            cursor.execute('INSERT ...')

    Raises:
        sqlite3.OperationalError: 'database is locked' when the lock could
            not be taken within DATABASE_TIMEOUT
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('BEGIN IMMEDIATE')
    try:
        yield cursor
    except BaseException:
        db.rollback()
        raise
    db.commit()


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    seed_database(db)

    db.commit()
    current_app.logger.info('Database initialized at %s', current_app.config.get('DATABASE_PATH'))
