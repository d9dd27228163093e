# webapp/app.py
from __future__ import annotations

from flask import Flask, g, request, session

import settings
from catalog.errors import DocumentNotFound
from catalog.ml_string import resolve
from catalog.thing import Thing
from catalog.user import User
from infra.db import get_conn
from locales import i18n
from util import debug
from webapp import render
from webapp.actions import bp as actions_bp
from webapp.reviews import bp as reviews_bp
from webapp.search_views import bp as search_bp
from webapp.things import bp as things_bp

debug.configure_logging()

app = Flask(__name__)
app.secret_key = settings.secret_key()

# --- Register blueprints -------------------------------------------------------
app.register_blueprint(things_bp)    # /thing/...
app.register_blueprint(reviews_bp)   # /thing/<id>/review/new, /review/...
app.register_blueprint(search_bp)    # /search, /api/suggest/...
app.register_blueprint(actions_bp)   # /api/actions/..., /actions/...


# --- Per-request context ---------------------------------------------------------
@app.before_request
def load_request_context():
    # static files and the health check need neither the database nor a user
    if request.endpoint in ("static", "health"):
        return
    g.db = get_conn()
    g.locale = i18n.negotiate_locale(session.get("locale"), request.accept_languages)
    g.user = None
    user_id = session.get("user_id")
    if user_id:
        try:
            g.user = User.get(g.db, user_id)
        except DocumentNotFound:
            session.pop("user_id", None)


@app.teardown_request
def close_db(exc):
    conn = g.pop("db", None)
    if conn is not None:
        conn.close()


@app.context_processor
def inject_helpers():
    return {"t": render.t, "resolve": lambda ml: resolve(g.get("locale") or "en", ml)}


# --- Views -----------------------------------------------------------------------
@app.route("/")
def home():
    things = Thing.filter_current(g.db)
    return render.template("index", {"things": things})


@app.get("/health")
def health():
    return "ok", 200


@app.errorhandler(404)
def page_not_found(e):
    return render.resource_error({
        "title_key": "page not found title",
        "body_key": "page not found",
    }, status=404)


@app.errorhandler(500)
def internal_error(e):
    debug.error(context="unhandled exception", req=request, user=g.get("user"),
                error=getattr(e, "original_exception", None) or e)
    return render.resource_error({
        "title_key": "something went wrong title",
        "body_key": "unknown error",
    }, status=500)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
