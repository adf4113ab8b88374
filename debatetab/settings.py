"""
Django settings for debatetab.

Values come from the environment; a .env file in the project root is loaded
first so local overrides do not need to be exported.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(name, default):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc


SECRET_KEY = os.getenv("DEBATETAB_SECRET_KEY", "debatetab-insecure-development-key")
DEBUG = env_bool("DEBATETAB_DEBUG", True)
ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DEBATETAB_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "reversion",
    "debatetab.tournament_core",
    "debatetab.tournament",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
]

DATABASES = {
    "default": {
        "ENGINE": os.getenv("DEBATETAB_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("DEBATETAB_DB_NAME", str(BASE_DIR / "debatetab.sqlite3")),
        "USER": os.getenv("DEBATETAB_DB_USER", ""),
        "PASSWORD": os.getenv("DEBATETAB_DB_PASSWORD", ""),
        "HOST": os.getenv("DEBATETAB_DB_HOST", ""),
        "PORT": os.getenv("DEBATETAB_DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Pairing and standings engine
DEBATETAB_DEFAULT_LEFTOVER_POLICY = os.getenv(
    "DEBATETAB_DEFAULT_LEFTOVER_POLICY", "partial"
)
DEBATETAB_ADMIN_CACHE_TTL = env_int("DEBATETAB_ADMIN_CACHE_TTL", 300)

LOG_LEVEL = os.getenv("DEBATETAB_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "debatetab": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
