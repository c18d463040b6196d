# smartspend/settings.py
# Django settings for the SmartSpend web client.
# All values can be overridden from the environment (or a .env file).

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")  # no-op when the file is missing


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ===== Core ==================================================================
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-smartspend-dev-key")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "accounts.apps.AccountsConfig",
    "finance.apps.FinanceConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "accounts.middleware.ApiSessionMiddleware",       # 🔒 sign out on API 401
]

ROOT_URLCONF = "smartspend.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "accounts.context_processors.api_user",
            ],
        },
    },
]

WSGI_APPLICATION = "smartspend.wsgi.application"

# ===== Storage ===============================================================
# The client keeps no data of its own; everything lives behind the API.
DATABASES = {}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "smartspend",
    }
}

# cache-backed sessions by default; point SESSION_ENGINE at
# "django.contrib.sessions.backends.signed_cookies" for multi-process deploys
SESSION_ENGINE = os.getenv("SESSION_ENGINE", "django.contrib.sessions.backends.cache")
SESSION_COOKIE_AGE = 60 * 60 * 24 * 7           # matches the API's 7-day JWT
SESSION_COOKIE_HTTPONLY = True

MESSAGE_STORAGE = "django.contrib.messages.storage.session.SessionStorage"

# ===== SmartSpend API ========================================================
SMARTSPEND_API_URL = os.getenv("SMARTSPEND_API_URL", "http://localhost:5000/api")
SMARTSPEND_API_TIMEOUT = float(os.getenv("SMARTSPEND_API_TIMEOUT", "10"))
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")

LOGIN_URL = "accounts:login"
LOGIN_REDIRECT_URL = "finance:dashboard"

# ===== I18N / static =========================================================
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATICFILES_DIRS = [BASE_DIR / "static"]
STATIC_ROOT = BASE_DIR / "staticfiles"

# avatars are uploaded straight to the API; cap what Django will buffer
DATA_UPLOAD_MAX_MEMORY_SIZE = 6 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 6 * 1024 * 1024

# ===== Logging ===============================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "smartspend": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "accounts": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "finance": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
