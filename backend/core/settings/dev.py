# flake8: noqa
"""
Development settings for the Taskboard API.

Local Postgres, open CORS for the frontend dev server and DEBUG logging to
a rotating file under ``backend/logs``.
"""

import logging

from .base import *
from .utils import load_environment_config

config = load_environment_config("development")

ENVIRONMENT = "development"

DEBUG = True
SECRET_KEY = config("SECRET_KEY", default="django-insecure-taskboard-dev-key")
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

CORS_ALLOW_ALL_ORIGINS = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB", default="taskboard"),
        "USER": config("POSTGRES_USER", default="taskboard"),
        "PASSWORD": config("POSTGRES_PASSWORD", default="taskboard"),
        "HOST": config("DB_HOST", default="localhost"),
        "PORT": config("DB_PORT", default="5432"),
    }
}

# =============================================================================
# LOGGING
# =============================================================================

LOG_DIR = BASE_DIR / "logs"
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING["handlers"]["dev_file"] = {
    "level": "DEBUG",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": LOG_DIR / "taskboard_dev.log",
    "maxBytes": 10 * 1024 * 1024,
    "backupCount": 3,
    "formatter": "json",
    "encoding": "utf-8",
}
LOGGING["handlers"]["console"]["level"] = "DEBUG"

for logger_name in ("core", "users", "boards"):
    LOGGING["loggers"][logger_name].update(handlers=["console", "dev_file"], level="DEBUG")

# DEBUG prints every SQL statement, INFO keeps only the per-request query counts
LOGGING["loggers"]["django.db.backends"]["level"] = config("DB_QUERY_LOGGING_LEVEL", default="INFO")

logging.getLogger(__name__).debug(
    "Development environment initialized",
    extra={"environment": ENVIRONMENT, "action": "environment_startup", "component": "settings"},
)
