"""Base Django settings for the EcoTrack API."""
from __future__ import annotations

from pathlib import Path
import os

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "backend.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "backend.urls"

WSGI_APPLICATION = "backend.wsgi.application"

FAVORITES_CACHE_ALIAS = "favorites"
FAVORITES_DIR = env("ECOTRACK_FAVORITES_DIR", str(BASE_DIR / ".ecotrack" / "favorites"))

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "ecotrack-local",
    },
    FAVORITES_CACHE_ALIAS: {
        "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
        "LOCATION": FAVORITES_DIR,
        "TIMEOUT": None,
    },
}

ECOTRACK = {
    "GEOCODING_URL": env("ECOTRACK_GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search"),
    "REVERSE_GEOCODING_URL": env("ECOTRACK_REVERSE_GEOCODING_URL", "https://nominatim.openstreetmap.org/reverse"),
    "AIR_QUALITY_URL": env("ECOTRACK_AIR_QUALITY_URL", "https://air-quality-api.open-meteo.com/v1/air-quality"),
    "GEOCODING_LANGUAGE": env("ECOTRACK_GEOCODING_LANGUAGE", "en"),
    "TIMEZONE": env("ECOTRACK_TIMEZONE", "auto"),
    "HTTP_TIMEOUT": float(env("ECOTRACK_HTTP_TIMEOUT", "10")),
    "USER_AGENT": env("ECOTRACK_USER_AGENT", "ecotrack/0.1"),
    "FAVORITES_KEY": env("ECOTRACK_FAVORITES_KEY", "ecotrack:favorites"),
    # "cache" stores favorites in the cache alias above, "file" as plain JSON in FAVORITES_DIR.
    "FAVORITES_BACKEND": env("ECOTRACK_FAVORITES_BACKEND", "cache"),
    "FAVORITES_DIR": FAVORITES_DIR,
}

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("ECOTRACK_LOG_LEVEL", "INFO"),
    },
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
