"""Configuration module for the retail panel Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional_float(value):
    """Empty or missing means None (no timeout)."""
    if value is None or not str(value).strip():
        return None
    return float(value)


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Session Configuration (Production-safe defaults)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Retail backend API
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:8000/api')
    API_TOKEN = os.getenv('API_TOKEN') or None
    # Seconds; unset means requests wait as long as the backend takes
    API_TIMEOUT = _optional_float(os.getenv('API_TIMEOUT'))
    # httpx transport override (tests inject an httpx.MockTransport here)
    API_TRANSPORT = None

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Orders
    ORDER_DELETE_CONFIRM_MESSAGE = os.getenv('ORDER_DELETE_CONFIRM_MESSAGE', 'Delete order?')

    # Panel sessions idle longer than this are dropped from memory
    PANEL_SESSION_IDLE_SECONDS = int(os.getenv('PANEL_SESSION_IDLE_SECONDS', '86400'))


class TestConfig(Config):
    """Configuration for the test suite."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    API_BASE_URL = 'http://backend.test/api'
    API_TOKEN = None
    API_TIMEOUT = None
    LOG_LEVEL = 'DEBUG'
