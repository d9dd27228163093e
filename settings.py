# settings.py
"""
Runtime configuration for lib.reviews.

Values come from the environment (a local .env is loaded once on import).
Everything is read through small getters so tests can monkeypatch the
environment after import.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def db_path() -> str:
    return os.getenv("LIBREVIEWS_DB_PATH", "libreviews.db")


def secret_key() -> str:
    return os.getenv("FLASK_SECRET_KEY", "dev")


def default_locale() -> str:
    return os.getenv("DEFAULT_LOCALE", "en")


def log_level() -> str:
    return os.getenv("LIBREVIEWS_LOG_LEVEL", "INFO").upper()


# ---------------- search service ----------------

def search_url() -> str:
    host = os.getenv("SEARCH_HOST", "http://localhost").rstrip("/")
    if "://" not in host:
        host = f"http://{host}"
    port = os.getenv("SEARCH_PORT", "9200")
    return f"{host}:{port}" if port else host


def search_index() -> str:
    return os.getenv("SEARCH_INDEX", "libreviews")


def search_timeout() -> float:
    return float(os.getenv("SEARCH_TIMEOUT", "10"))


def search_log() -> bool:
    return os.getenv("SEARCH_LOG", "0") == "1"
