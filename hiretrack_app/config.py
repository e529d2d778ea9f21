"""
Configuration management for HireTrack.
"""
import hashlib
import logging
import os
from dotenv import load_dotenv

load_dotenv()


def _get_secret_key():
    """Read SECRET_KEY from env; support common alternate names and treat empty as unset."""
    for name in ("SECRET_KEY", "FLASK_SECRET_KEY"):
        val = os.environ.get(name)
        if val and isinstance(val, str) and val.strip():
            return val.strip()
    return None


def _production_secret_fallback():
    """Deterministic key from DATABASE_URL so all Gunicorn workers share the same key."""
    url = os.environ.get("DATABASE_URL") or ""
    if not url:
        return None
    return hashlib.sha256(url.encode()).hexdigest()


class Config:
    """Base configuration."""
    SECRET_KEY = _get_secret_key()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # S3-compatible object storage (resumes, job descriptions, receipts)
    STORAGE_ENDPOINT_URL = os.environ.get('STORAGE_ENDPOINT_URL')
    STORAGE_REGION = os.environ.get('STORAGE_REGION', 'us-east-1')
    STORAGE_ACCESS_KEY_ID = os.environ.get('STORAGE_ACCESS_KEY_ID')
    STORAGE_SECRET_ACCESS_KEY = os.environ.get('STORAGE_SECRET_ACCESS_KEY')
    STORAGE_PUBLIC_URL = os.environ.get('STORAGE_PUBLIC_URL')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    _db_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'instance', 'hiretrack.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{_db_path}'
    )
    if not Config.SECRET_KEY:
        SECRET_KEY = "dev-secret-key-change-in-production"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///instance/hiretrack.db')
    if not Config.SECRET_KEY:
        _fallback = _production_secret_fallback()
        if _fallback:
            SECRET_KEY = _fallback
            logging.warning(
                "SECRET_KEY not set; using deterministic key from DATABASE_URL. "
                "Set SECRET_KEY for stronger security."
            )
        else:
            SECRET_KEY = "production-change-me-set-SECRET_KEY"

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours in seconds

    @staticmethod
    def init_app(app):
        app.config['SESSION_COOKIE_SECURE'] = os.environ.get('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
        app.config['SESSION_COOKIE_PATH'] = '/'


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORAGE_PUBLIC_URL = 'https://storage.test/public'
    STORAGE_ACCESS_KEY_ID = 'testing'
    STORAGE_SECRET_ACCESS_KEY = 'testing'
    if not Config.SECRET_KEY:
        SECRET_KEY = "test-secret-key"


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
