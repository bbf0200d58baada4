"""
Flow SMS Studio Dashboard
Configuration classes for Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
"""

import os
import secrets

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

# Default SQLite path for local dev when PostgreSQL is not running
_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'flowsms_dev.db')}"
_SQLITE_TEST = "sqlite:///:memory:"

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_EXPIRES = int(os.getenv("JWT_ACCESS_EXPIRES", str(7 * 24 * 3600)))
    DEBUG = False
    TESTING = False

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Redis (cache + rate limiter storage)
    REDIS_URL = os.getenv("REDIS_URL", "memory://")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # ── External feeds ───────────────────────────────────────────────────
    FEED_TIMEOUT_SECONDS = int(os.getenv("FEED_TIMEOUT_SECONDS", "15"))
    FEED_CACHE_ENABLED = os.getenv("FEED_CACHE_ENABLED", "true").lower() == "true"

    # Google Sheets CSV exports
    HR_SHEET_ID = os.getenv("HR_SHEET_ID", "1_ju_qYu8Rbvykm4vn0z5Sw9BgQ9zIaHy8A4Xvg-wEI0")
    HR_LIST_GID = os.getenv("HR_LIST_GID", "252386052")
    PROJECT_STATS_SHEET_ID = os.getenv(
        "PROJECT_STATS_SHEET_ID", "1HORluZ8llo3uKTLfe884cI9C7jNe38ny_5OQd1yCeus"
    )
    PROJECT_STATS_GID = os.getenv("PROJECT_STATS_GID", "1893317411")
    PXT_SHEET_ID = os.getenv("PXT_SHEET_ID", "1AKxB64tY68H7RvzzzKWOjsZlKrQB7GI91PA9JacfUlQ")
    PXT_SHEET_NAME = os.getenv("PXT_SHEET_NAME", "MASTER")
    BUILDING_INFO_SHEET_ID = os.getenv("BUILDING_INFO_SHEET_ID", "")
    BUILDING_INFO_GID = os.getenv("BUILDING_INFO_GID", "0")

    # Airtable (Flow Standards SKU library)
    AIRTABLE_TOKEN = os.getenv("AIRTABLE_TOKEN", "")
    AIRTABLE_BASE_ID = os.getenv("AIRTABLE_BASE_ID", "app97iqZiJbwTuYcG")

    # Monday.com
    MONDAY_API_TOKEN = os.getenv("MONDAY_API_TOKEN", "")

    # Seeded test users
    SEED_DEFAULT_PASSWORD = os.getenv("SEED_DEFAULT_PASSWORD", "flow123")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = (
        _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else _SQLITE_DEV
    )


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", _SQLITE_TEST)
    RATELIMIT_ENABLED = False
    FEED_CACHE_ENABLED = False
    AIRTABLE_TOKEN = "test-airtable-token"
    MONDAY_API_TOKEN = "test-monday-token"
    BUILDING_INFO_SHEET_ID = "test-building-sheet"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-for-hs256"


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    # Railway/Heroku use postgres:// but SQLAlchemy 2.0 requires postgresql://
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else None
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
    }

    def __init__(self):
        if not self.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL environment variable is required in production")
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
