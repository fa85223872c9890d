"""
Member model and data access functions.
Mirrors the identity collaborator: maps bearer tokens to member IDs for Flask-Login.
"""

import hashlib
import secrets

from database import get_db


class Member:
    """
    Member class for Flask-Login integration.
    Wraps database row dictionary with required Flask-Login properties.
    """

    def __init__(self, member_dict):
        self.id = member_dict['id']
        self.display_name = member_dict['display_name']
        self.email = member_dict['email']
        self.active = member_dict['active']

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return self.active == 1

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    def get_id(self):
        """Required by Flask-Login. Returns member ID as string."""
        return str(self.id)


def hash_token(token: str) -> str:
    """Stored form of a bearer token."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def get_member_by_token(token: str) -> dict:
    """
    Get active member by bearer token.

    Args:
        token: Raw bearer token

    Returns:
        Member dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(
        'SELECT * FROM members WHERE token_hash = ? AND active = 1',
        (hash_token(token),)
    )
    row = cursor.fetchone()
    return dict(row) if row else None


def create_member(display_name: str, email: str) -> tuple:
    """
    Register a member and issue a bearer token.

    Args:
        display_name: Member display name
        email: Member email (unique)

    Returns:
        tuple: (member_id, token). The raw token is only returned here.
    """
    token = secrets.token_urlsafe(32)

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO members (display_name, email, token_hash)
        VALUES (?, ?, ?)
    ''', (display_name, email, hash_token(token)))
    db.commit()

    return cursor.lastrowid, token
