import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SITE_URL", "https://kosmos.example")
os.environ.setdefault("SITE_TIMEZONE", "UTC")
