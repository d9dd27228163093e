# webapp/search_views.py
from __future__ import annotations

from typing import Any, Dict, List

import requests
from flask import Blueprint, g, get_flashed_messages, jsonify, request
from markupsafe import Markup, escape

import search
from catalog import ml_string
from util import debug
from webapp import render
from webapp.flash_error import flash_error

bp = Blueprint("search", __name__)


def _safe_highlight(fragment: str) -> Markup:
    """
    Highlight fragments come from HTML-stripped text, so anything in them
    except our own highlight tags has to be escaped again.
    """
    escaped = str(escape(fragment))
    escaped = escaped.replace(str(escape(search.HIGHLIGHT_PRE_TAG)), search.HIGHLIGHT_PRE_TAG)
    escaped = escaped.replace(str(escape(search.HIGHLIGHT_POST_TAG)), search.HIGHLIGHT_POST_TAG)
    return Markup(escaped)


def _highlights(hit: Dict[str, Any]) -> List[Markup]:
    out: List[Markup] = []
    for fragments in (hit.get("highlight") or {}).values():
        out += [_safe_highlight(f) for f in fragments]
    return out


def thing_results(result: Dict[str, Any], lang: str) -> List[Dict[str, Any]]:
    things = []
    for hit in result.get("hits", {}).get("hits", []):
        source = hit.get("_source") or {}
        things.append({
            "id": hit.get("_id"),
            "label": ml_string.resolve(lang, source.get("label")),
            "highlights": _highlights(hit),
        })
    return things


def review_results(result: Dict[str, Any], lang: str) -> List[Dict[str, Any]]:
    """One entry per thing, with the matching reviews (inner hits) attached."""
    things = []
    for hit in result.get("hits", {}).get("hits", []):
        source = hit.get("_source") or {}
        inner = hit.get("inner_hits", {}).get("reviews", {}).get("hits", {}).get("hits", [])
        things.append({
            "id": hit.get("_id"),
            "label": ml_string.resolve(lang, source.get("label")),
            "reviews": [
                {
                    "id": review_hit.get("_id"),
                    "title": ml_string.resolve(lang, (review_hit.get("_source") or {}).get("title")),
                    "highlights": _highlights(review_hit),
                }
                for review_hit in inner
            ],
        })
    return things


@bp.route("/search")
def search_page():
    query = request.args.get("query", "").strip()
    things, reviews = [], []
    if query:
        try:
            things = thing_results(search.search_things(query, g.locale), g.locale)
            reviews = review_results(search.search_reviews(query, g.locale), g.locale)
        except requests.RequestException as e:
            flash_error(e, "searching")

    return render.template("search", {
        "title_key": "search results",
        "query": query,
        "things": things,
        "reviews": reviews,
        "page_errors": get_flashed_messages(category_filter=["pageErrors"]),
    })


@bp.route("/api/suggest/thing/<path:prefix>")
def suggest_thing(prefix: str):
    try:
        result = search.suggest_thing(prefix, g.locale)
    except requests.RequestException as e:
        debug.error(context="suggesting things", req=request, user=g.get("user"), error=e)
        return jsonify({"message": render.t("search unavailable")}), 503

    results: Dict[str, List[Dict[str, Any]]] = {}
    for name, entries in (result.get("suggest") or {}).items():
        lang = name[len("labels-"):] if name.startswith("labels-") else name
        options = []
        for entry in entries:
            for option in entry.get("options", []):
                options.append({"id": option.get("_id"), "text": option.get("text")})
        results[lang] = options
    return jsonify({"results": results})
