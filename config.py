"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os
from datetime import timedelta


class Config:
    """Base configuration class with common settings."""

    # Secret key for session management and CSRF protection
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/seatclub.db'
    # Seconds a connection waits on a locked database before giving up
    DATABASE_TIMEOUT = float(os.environ.get('DATABASE_TIMEOUT', 5.0))

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False
    PERMANENT_SESSION_LIFETIME = timedelta(
        hours=int(os.environ.get('SESSION_TIMEOUT_HOURS', 8))
    )

    # Timezone
    TIMEZONE = os.environ.get('TIMEZONE', 'Asia/Tokyo')

    # Operating window used when a branch does not define its own hours
    OPENING_TIME = os.environ.get('OPENING_TIME', '10:00')
    CLOSING_TIME = os.environ.get('CLOSING_TIME', '22:00')

    # Availability aggregation
    LIMITED_AVAILABILITY_THRESHOLD = float(
        os.environ.get('LIMITED_AVAILABILITY_THRESHOLD', 0.25)
    )
    MAX_CALENDAR_DAYS = int(os.environ.get('MAX_CALENDAR_DAYS', 62))

    # Booking rules
    MAX_ADVANCE_BOOKING_DAYS = int(os.environ.get('MAX_ADVANCE_BOOKING_DAYS', 30))
    MAX_HEADCOUNT = int(os.environ.get('MAX_HEADCOUNT', 10))
    BOOKING_CONTENTION_RETRIES = int(os.environ.get('BOOKING_CONTENTION_RETRIES', 1))
    NOTES_MAX_LENGTH = 500

    # Application settings
    APP_NAME = 'SeatClub'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_SSL_STRICT = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'true').lower() == 'true'
    WTF_CSRF_SSL_STRICT = SESSION_COOKIE_SECURE

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    PREFERRED_URL_SCHEME = 'https' if SESSION_COOKIE_SECURE else 'http'

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    WTF_CSRF_ENABLED = False
    DATABASE_PATH = os.environ.get('DATABASE_PATH', 'instance/seatclub_test.db')
    DATABASE_TIMEOUT = 10.0
    SECRET_KEY = 'test-secret-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
