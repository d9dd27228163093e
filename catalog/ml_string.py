# catalog/ml_string.py
"""
Helpers for multilingual strings: dicts mapping language codes to text,
e.g. {"en": "Lord of the Rings", "de": "Der Herr der Ringe"}.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from markupsafe import Markup

from locales import languages


def resolve(lang: str, ml_string: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    """
    Find the best available value for `lang`, walking its fallback chain and
    finally taking any language at all. Returns {"str": ..., "lang": ...}
    or None if there is nothing to show.
    """
    if not ml_string:
        return None
    for code in languages.get_chain(lang):
        value = ml_string.get(code)
        if value:
            return {"str": value, "lang": code}
    for code, value in ml_string.items():
        if value:
            return {"str": value, "lang": code}
    return None


def _strip(value: Any) -> Any:
    return Markup(value).striptags() if isinstance(value, str) else value


def strip_html(ml_string: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    if not ml_string:
        return ml_string
    return {lang: _strip(value) for lang, value in ml_string.items()}


def strip_html_from_array(ml_array: Optional[Dict[str, List[str]]]) -> Optional[Dict[str, List[str]]]:
    """Same as strip_html for aliases-style values ({lang: [str, ...]})."""
    if not ml_array:
        return ml_array
    return {lang: [_strip(v) for v in (values or [])] for lang, values in ml_array.items()}
