# locales/i18n.py
"""
Message catalogues (one JSON file per locale under locales/messages/) and
locale negotiation for requests.

Messages use positional ``%s`` placeholders. Missing translations fall back
to English, then to the key itself.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import settings
from locales import languages

MESSAGES_DIR = Path(__file__).resolve().parent / "messages"


@lru_cache(maxsize=None)
def load_catalogue(locale: str) -> Dict[str, str]:
    path = MESSAGES_DIR / f"{locale}.json"
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def _format(template: str, params) -> str:
    out = template
    for p in params:
        if "%s" not in out:
            break
        out = out.replace("%s", str(p), 1)
    return out


def translate(locale: Optional[str], key: str, *params) -> str:
    locale = locale or settings.default_locale()
    for candidate in (locale, languages.DEFAULT_LANGUAGE):
        template = load_catalogue(candidate).get(key)
        if template is not None:
            return _format(template, params)
    return _format(key, params)


def negotiate_locale(session_locale: Optional[str], accept_languages) -> str:
    """
    Pick the request locale: an explicit choice stored in the session wins,
    otherwise the best Accept-Language match, otherwise the default.
    """
    if session_locale and languages.is_valid(session_locale):
        return session_locale
    if accept_languages is not None:
        match = accept_languages.best_match(languages.get_valid_languages())
        if match:
            return match
    return settings.default_locale()
