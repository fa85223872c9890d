"""
Database package for the SeatClub reservation engine.

This package provides modular database operations:
- connection: Database connection management (get_db, write_transaction, close_db, init_db)
- schema: Table creation and indexes
- seed: Initial seed data (branches and seat catalog)
"""

from database.connection import get_db, write_transaction, close_db, init_db
from database.schema import drop_tables, create_tables, create_indexes
from database.seed import seed_database

__all__ = [
    # Connection
    'get_db',
    'write_transaction',
    'close_db',
    'init_db',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    # Seed
    'seed_database',
]
