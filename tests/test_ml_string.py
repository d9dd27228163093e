# tests/test_ml_string.py
from catalog import ml_string


def test_resolve_prefers_requested_language():
    assert ml_string.resolve("de", {"en": "Ring", "de": "Ring (de)"}) == {"str": "Ring (de)", "lang": "de"}


def test_resolve_follows_fallback_chain():
    assert ml_string.resolve("fr", {"en": "Ring", "de": "Ring (de)"}) == {"str": "Ring", "lang": "en"}
    assert ml_string.resolve("zh", {"zh-Hant": "魔戒", "en": "Ring"}) == {"str": "魔戒", "lang": "zh-Hant"}


def test_resolve_takes_any_language_as_last_resort():
    assert ml_string.resolve("fr", {"de": "Ring (de)"}) == {"str": "Ring (de)", "lang": "de"}
    assert ml_string.resolve("fr", {}) is None
    assert ml_string.resolve("fr", None) is None


def test_strip_html():
    assert ml_string.strip_html({"en": "<p>Hello <b>world</b></p>"}) == {"en": "Hello world"}
    assert ml_string.strip_html_from_array({"en": ["<i>LOTR</i>", "The Ring"]}) == {"en": ["LOTR", "The Ring"]}
    assert ml_string.strip_html(None) is None
