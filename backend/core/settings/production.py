# flake8: noqa
"""
Production settings for the Taskboard API.

Hosts and origins come from the environment, static files are served by
whitenoise and every app logger writes JSON lines for aggregation.
"""

import logging

from .base import *
from .utils import load_environment_config

config = load_environment_config("production")

ENVIRONMENT = "production"


def _csv(value):
    return [item.strip() for item in value.split(",") if item.strip()]


DEBUG = False
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="api.taskboard.app", cast=_csv)

CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", default="https://taskboard.app", cast=_csv)
CORS_ALLOW_ALL_ORIGINS = False

SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB"),
        "USER": config("POSTGRES_USER"),
        "PASSWORD": config("POSTGRES_PASSWORD"),
        "HOST": config("DB_HOST"),
        "PORT": config("DB_PORT", default="5432"),
        "CONN_MAX_AGE": 60,
        "OPTIONS": {"connect_timeout": 5},
    }
}

# =============================================================================
# JSON LOGGING
# =============================================================================

LOG_DIR = config("LOG_DIR", default="/var/log/taskboard")
os.makedirs(LOG_DIR, exist_ok=True)

# handler name -> (file, level, max size in MB)
LOG_FILES = {
    "app_file": ("taskboard.log", "INFO", 100),
    "error_file": ("errors.log", "ERROR", 50),
    "security_file": ("security.log", "WARNING", 50),
}

for handler_name, (filename, level, size_mb) in LOG_FILES.items():
    LOGGING["handlers"][handler_name] = {
        "level": level,
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(LOG_DIR, filename),
        "maxBytes": size_mb * 1024 * 1024,
        "backupCount": 10,
        "formatter": "json",
        "encoding": "utf-8",
    }

LOGGING["handlers"]["console"]["formatter"] = "json"

for logger_name in ("django", "core", "users", "boards"):
    LOGGING["loggers"][logger_name]["handlers"] = ["console", "app_file", "error_file"]

# access denials from the boards services are WARNING records
LOGGING["loggers"]["boards"]["handlers"].append("security_file")
LOGGING["loggers"]["django.security"]["handlers"] = ["security_file"]
LOGGING["loggers"]["django.db.backends"]["level"] = "ERROR"

# =============================================================================
# STATIC FILES
# =============================================================================

MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

logging.getLogger(__name__).info(
    "Production environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
    },
)
