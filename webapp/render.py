# webapp/render.py
"""
Page rendering shared by all views.

template() assembles what every page needs (client-side config, scripts,
language menu, site-wide flash messages) and renders a view from
webapp/templates. The error helpers render the standard error pages with
the right status code.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import g, get_flashed_messages, make_response, render_template

from locales import i18n, languages

BASE_SCRIPTS = ["libreviews.js"]

# Strings editor.js needs on the client
EDITOR_MESSAGES = (
    "forget rte preference",
    "remember rte preference",
)


def t(key: str, *params) -> str:
    """Translate `key` into the current request's locale."""
    return i18n.translate(g.get("locale"), key, *params)


def template(view: str, extra_vars: Optional[Dict[str, Any]] = None,
             extra_config: Optional[Dict[str, Any]] = None, status: int = 200):
    user = g.get("user")
    locale = g.get("locale") or languages.DEFAULT_LANGUAGE

    config: Dict[str, Any] = {
        "userName": user.display_name if user else None,
        "language": locale,
        "userPrefersRichTextEditor": bool(user and user.prefers_rich_text_editor),
        "messages": {key: t(key) for key in EDITOR_MESSAGES},
    }
    if extra_config:
        config.update(extra_config)

    page_vars: Dict[str, Any] = {"client_config": config}
    if extra_vars:
        page_vars.update(extra_vars)

    page_vars["user"] = user

    scripts = list(BASE_SCRIPTS)
    if extra_vars and isinstance(extra_vars.get("scripts"), list):
        scripts += extra_vars["scripts"]
    page_vars["scripts"] = scripts

    # language code -> message key for its name, plus the current language marker
    all_languages = languages.get_all()
    if locale in all_languages:
        all_languages[locale]["isCurrentLanguage"] = True
    page_vars["languages"] = all_languages

    message_key = all_languages.get(locale, {}).get("messageKey", locale)
    page_vars["current_language"] = {
        "lang_key": locale,
        "message_key": message_key,
        "label": t(message_key),
    }

    # Not page-specific, shown on any page if there are any
    page_vars["site_messages"] = get_flashed_messages(category_filter=["siteMessages"])
    page_vars["site_errors"] = get_flashed_messages(category_filter=["siteErrors"])

    return make_response(render_template(f"{view}.html", **page_vars), status)


def signin_required(extra_vars: Optional[Dict[str, Any]] = None):
    return template("signin-required", extra_vars, status=401)


def permission_error(extra_vars: Optional[Dict[str, Any]] = None):
    """Pass `details_key` in extra_vars to explain why permission is denied."""
    return template("permission-error", extra_vars, status=403)


def resource_error(extra_vars: Optional[Dict[str, Any]] = None, status: int = 404):
    """Pass `title_key` and `body_key` (and optionally `body_params`) to describe the error."""
    return template("resource-error", extra_vars, status=status)
