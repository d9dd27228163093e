# locales/languages.py
"""
Supported interface/content languages and their fallback chains.

Every language falls back to English and finally to 'und' (undetermined),
which is where content of unknown language lives.
"""
from __future__ import annotations

import copy
from typing import Dict, List

DEFAULT_LANGUAGE = "en"
UNDETERMINED = "und"

# language code -> message key (for the localized name) and native name
LANGUAGES: Dict[str, Dict[str, str]] = {
    "ar": {"messageKey": "arabic", "nativeName": "العربية"},
    "bn": {"messageKey": "bangla", "nativeName": "বাংলা"},
    "de": {"messageKey": "german", "nativeName": "Deutsch"},
    "en": {"messageKey": "english", "nativeName": "English"},
    "eo": {"messageKey": "esperanto", "nativeName": "Esperanto"},
    "es": {"messageKey": "spanish", "nativeName": "Español"},
    "eu": {"messageKey": "basque", "nativeName": "Euskara"},
    "fi": {"messageKey": "finnish", "nativeName": "Suomi"},
    "fr": {"messageKey": "french", "nativeName": "Français"},
    "hu": {"messageKey": "hungarian", "nativeName": "Magyar"},
    "it": {"messageKey": "italian", "nativeName": "Italiano"},
    "ja": {"messageKey": "japanese", "nativeName": "日本語"},
    "nl": {"messageKey": "dutch", "nativeName": "Nederlands"},
    "pt": {"messageKey": "brazilian portuguese", "nativeName": "Português (Brasil)"},
    "pt-PT": {"messageKey": "european portuguese", "nativeName": "Português (Portugal)"},
    "sv": {"messageKey": "swedish", "nativeName": "Svenska"},
    "tr": {"messageKey": "turkish", "nativeName": "Türkçe"},
    "uk": {"messageKey": "ukrainian", "nativeName": "Українська"},
    "zh": {"messageKey": "simplified chinese", "nativeName": "中文（简体）"},
    "zh-Hant": {"messageKey": "traditional chinese", "nativeName": "中文（繁體）"},
}

# Closely related variants are tried before the default language
SPECIFIC_FALLBACKS: Dict[str, List[str]] = {
    "pt": ["pt-PT"],
    "pt-PT": ["pt"],
    "zh": ["zh-Hant"],
    "zh-Hant": ["zh"],
}


def get_valid_languages() -> List[str]:
    return list(LANGUAGES)


def is_valid(lang: str) -> bool:
    return lang in LANGUAGES


def get_all() -> Dict[str, Dict[str, str]]:
    """Return a copy of the language table that callers may annotate."""
    return copy.deepcopy(LANGUAGES)


def get_fallbacks(lang: str) -> List[str]:
    """
    Languages to try, in order, when content is missing in `lang`.
    `lang` itself is never part of the result.
    """
    chain = SPECIFIC_FALLBACKS.get(lang, []) + [DEFAULT_LANGUAGE, UNDETERMINED]
    out: List[str] = []
    for code in chain:
        if code != lang and code not in out:
            out.append(code)
    return out


def get_chain(lang: str) -> List[str]:
    """`lang` followed by its fallbacks."""
    return [lang] + get_fallbacks(lang)
