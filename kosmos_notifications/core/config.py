import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Content store (PostgreSQL)
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_DB = os.getenv("POSTGRES_DB", "kosmos")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "db")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)
CREATE_TABLES_ON_STARTUP = (
    os.getenv("CREATE_TABLES_ON_STARTUP", "false").lower() == "true"
)

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()
DEBUG = ENVIRONMENT in ["development", "dev"]

# Database retry (startup checks only)
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_DELAY = float(os.getenv("DB_RETRY_DELAY", "1.0"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if not DEBUG else "text")

# Application
APP_NAME = os.getenv("APP_NAME", "Kosmos Notifications")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
API_PREFIX = os.getenv("API_PREFIX", "/wp-json/kosmos/v1")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Notifications
DEFAULT_CATEGORY = os.getenv("DEFAULT_CATEGORY", "news")
NOTIFICATIONS_LIMIT = 10
NOTIFICATIONS_RATE_LIMIT = os.getenv("NOTIFICATIONS_RATE_LIMIT", "120/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
SITE_URL = os.getenv("SITE_URL", "http://localhost:8000").rstrip("/")
SITE_TIMEZONE = os.getenv("SITE_TIMEZONE", "UTC")


def validate_config():
    """Validate settings at startup"""
    errors = []

    if not DATABASE_URL:
        errors.append("DATABASE_URL is required")

    if not DEFAULT_CATEGORY.strip():
        errors.append("DEFAULT_CATEGORY must not be empty")

    if not API_PREFIX.startswith("/"):
        errors.append("API_PREFIX must start with '/'")

    if not 0 < PORT < 65536:
        errors.append("PORT must be between 1 and 65535")

    if not SITE_URL.startswith(("http://", "https://")):
        errors.append("SITE_URL must be an absolute http(s) URL")

    try:
        ZoneInfo(SITE_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"SITE_TIMEZONE '{SITE_TIMEZONE}' is not a known time zone")

    if DB_RETRY_ATTEMPTS < 1:
        errors.append("DB_RETRY_ATTEMPTS must be >= 1")

    if DB_RETRY_DELAY < 0:
        errors.append("DB_RETRY_DELAY must be >= 0")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
