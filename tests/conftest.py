"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import timedelta

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'seatclub_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database (and WAL side files) after all tests
    for path in (TEST_DB_PATH, TEST_DB_PATH + '-wal', TEST_DB_PATH + '-shm'):
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """
    Create test application with a freshly seeded database.

    The app context is closed before the test runs, so every request and
    every ``with app.app_context()`` block gets its own connection.
    """
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


def _make_member(app, name, email):
    from models.member import create_member

    with app.app_context():
        member_id, token = create_member(name, email)
    return {'id': member_id, 'token': token,
            'headers': {'Authorization': f'Bearer {token}'}}


@pytest.fixture
def member(app):
    """A registered member with a bearer token."""
    return _make_member(app, 'Aoi Tanaka', 'aoi@example.com')


@pytest.fixture
def other_member(app):
    """A second member, for ownership checks."""
    return _make_member(app, 'Ren Sato', 'ren@example.com')


@pytest.fixture
def booking_date(app):
    """Tomorrow in the club timezone (always bookable)."""
    from utils.datetime_helpers import get_today

    with app.app_context():
        return (get_today() + timedelta(days=1)).strftime('%Y-%m-%d')
