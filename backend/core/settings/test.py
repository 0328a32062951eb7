# flake8: noqa
"""
Test settings for the Taskboard API.

Uses an in-memory SQLite database, a fast password hasher and keeps
logging quiet so pytest output stays readable.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

for logger_name in ["core", "users", "boards"]:
    LOGGING["loggers"][logger_name]["level"] = "WARNING"
