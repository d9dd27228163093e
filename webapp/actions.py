# webapp/actions.py
"""Small user actions: Ajax endpoints for preferences/notices and the language switch."""
from __future__ import annotations

from flask import Blueprint, g, jsonify, redirect, request, session, url_for

from catalog.user import NOTICES, PREFERENCES
from locales import languages
from util import debug
from webapp.render import t

bp = Blueprint("actions", __name__)


def _json_error(message_key: str, status: int, *params):
    return jsonify({"message": t(message_key, *params), "errors": [t(message_key, *params)]}), status


def _json_body() -> dict:
    # only JSON objects carry parameters
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.route("/api/actions/toggle-preference/", methods=["POST"])
def toggle_preference():
    if not g.user:
        return _json_error("must be signed in", 401)

    name = _json_body().get("preferenceName")
    if not isinstance(name, str) or name not in PREFERENCES:
        return _json_error("unknown preference", 400, str(name))

    new_value = g.user.toggle_preference(name)
    debug.app.info("User %s set %s to %s", g.user.id, name, new_value)
    return jsonify({
        "message": "Toggled preference.",
        "newValue": "true" if new_value else "false",
    })


@bp.route("/api/actions/suppress-notice/", methods=["POST"])
def suppress_notice():
    if not g.user:
        return _json_error("must be signed in", 401)

    notice = _json_body().get("noticeType")
    if not isinstance(notice, str) or notice not in NOTICES:
        return _json_error("unknown notice", 400, str(notice))

    g.user.suppress_notice(notice)
    return jsonify({"message": "Notice suppressed."})


@bp.route("/actions/change-language", methods=["POST"])
def change_language():
    lang = request.form.get("lang", "").strip()
    if languages.is_valid(lang):
        session["locale"] = lang
    return_to = request.form.get("return-to", "")
    # local paths only
    if not return_to.startswith("/") or return_to.startswith("//"):
        return_to = url_for("home")
    return redirect(return_to)
