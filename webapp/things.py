# webapp/things.py
from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from flask import Blueprint, g, get_flashed_messages, redirect, request, url_for, flash
from markupsafe import Markup, escape

import search
from catalog import ml_string
from catalog.errors import ModelError
from catalog.thing import Thing
from catalog.user import User
from locales import languages
from util.error_message import ErrorMessage
from webapp import render, resource_errors
from webapp.flash_error import flash_error

bp = Blueprint("things", __name__)

LANGUAGE_NOTICE = "language-notice-thing"


# ------------------------ Views ------------------------

@bp.route("/thing/<thing_id>")
def show(thing_id: str):
    thing_id = thing_id.strip()
    try:
        thing = Thing.get_not_stale_or_deleted(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)
    thing.populate_user_info(g.user)
    return send_thing(thing)


@bp.route("/thing/<thing_id>/edit/label")
def edit_label(thing_id: str):
    if not g.user:
        return render.signin_required({"title_key": "edit label"})

    thing_id = thing_id.strip()
    try:
        thing = Thing.get_not_stale_or_deleted(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)

    thing.populate_user_info(g.user)
    if not thing.user_can_edit:
        return render.permission_error({"title_key": "edit label"})

    return send_thing(thing, edit={"label": True, "title_key": "edit label"})


@bp.route("/thing/<thing_id>/edit/label", methods=["POST"])
def save_label(thing_id: str):
    thing_id = thing_id.strip()
    try:
        thing = Thing.get_not_stale_or_deleted(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)

    thing.populate_user_info(g.user)
    if not thing.user_can_edit:
        return render.permission_error({"title_key": "edit label"})

    edit = {"label": True, "title_key": "edit label"}
    lang = request.form.get("thing-label-language", "").strip()
    label = request.form.get("thing-label", "").strip()

    # Never touch the stored label unless we have something to write
    if not languages.is_valid(lang):
        flash_error(ErrorMessage("invalid language code", [lang]), "editing label - validating")
        return send_thing(thing, edit, status=400)
    if not label:
        flash_error(ErrorMessage("need label"), "editing label - validating")
        return send_thing(thing, edit, status=400)

    try:
        thing.new_revision(g.user)
    except sqlite3.Error as e:
        g.db.rollback()
        flash_error(e, "editing label - creating new revision")
        return send_thing(thing, edit, status=500)

    thing.label = dict(thing.label or {})
    thing.label[lang] = str(escape(label))
    try:
        thing.save()
    except (ModelError, sqlite3.Error) as e:
        flash_error(Thing.resolve_error(e), "editing label - saving")
        return send_thing(thing, edit, status=400)

    search.index_thing(thing)
    return redirect(url_for("things.show", thing_id=thing_id))


@bp.route("/thing/<thing_id>/history")
def history(thing_id: str):
    thing_id = thing_id.strip()
    try:
        current = Thing.get_not_stale_or_deleted(g.db, thing_id)
        revisions = Thing.history(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)

    users: Dict[str, Optional[User]] = {}
    for rev in revisions:
        if rev.rev_user and rev.rev_user not in users:
            try:
                users[rev.rev_user] = User.get(g.db, rev.rev_user)
            except ModelError:
                users[rev.rev_user] = None

    return render.template("thing-history", {
        "thing": current,
        "thing_label": label_markup(current),
        "revisions": revisions,
        "users": users,
        "title_key": "thing history",
    })


@bp.route("/new/thing", methods=["GET", "POST"])
def new_thing():
    if not g.user:
        return render.signin_required({"title_key": "add thing"})

    form: Dict[str, Any] = {
        "lang": g.locale,
        "label": "",
        "url": "",
    }
    if request.method == "POST":
        form["lang"] = request.form.get("thing-label-language", "").strip()
        form["label"] = request.form.get("thing-label", "").strip()
        form["url"] = request.form.get("thing-url", "").strip()

        if not languages.is_valid(form["lang"]):
            flash_error(ErrorMessage("invalid language code", [form["lang"]]), "adding thing - validating")
        elif not form["label"]:
            flash_error(ErrorMessage("need label"), "adding thing - validating")
        else:
            try:
                thing = Thing.create(g.db, g.user, label={form["lang"]: str(escape(form["label"]))},
                                     urls=[form["url"]] if form["url"] else [])
            except (ModelError, sqlite3.Error) as e:
                flash_error(Thing.resolve_error(e), "adding thing - saving")
            else:
                search.index_thing(thing)
                return redirect(url_for("things.show", thing_id=thing.id))

    return render.template("new-thing", {
        "title_key": "add thing",
        "form": form,
        "page_errors": get_flashed_messages(category_filter=["pageErrors"]),
    }, status=400 if request.method == "POST" else 200)


@bp.route("/thing/<thing_id>/delete", methods=["POST"])
def delete(thing_id: str):
    thing_id = thing_id.strip()
    try:
        thing = Thing.get_not_stale_or_deleted(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)

    thing.populate_user_info(g.user)
    if not thing.user_can_delete:
        return render.permission_error({"title_key": "delete thing"})

    try:
        thing.delete(g.user)
    except (ModelError, sqlite3.Error) as e:
        flash_error(e, "deleting thing")
        return send_thing(thing)

    search.delete_thing(thing)
    flash(render.t("thing deleted message"), "siteMessages")
    return redirect(url_for("home"))


# ------------------------ helpers ------------------------

def label_markup(thing: Thing) -> Optional[Markup]:
    # Labels are stored HTML-escaped
    resolved = ml_string.resolve(g.locale, thing.label)
    return Markup(resolved["str"]) if resolved else None


def send_thing(thing: Thing, edit: Optional[Dict[str, Any]] = None, status: int = 200):
    page_errors = get_flashed_messages(category_filter=["pageErrors"])
    user = g.user

    # For convenient access to the primary URL
    urls = list(thing.urls or [])
    main_url = urls.pop(0) if urls else None
    other_urls = urls

    show_language_notice = bool(
        edit and request.method == "GET" and user and not user.has_suppressed(LANGUAGE_NOTICE)
    )

    edit_lang = g.locale
    edit_value = Markup((thing.label or {}).get(edit_lang, "")).unescape()

    reviews = thing.get_reviews()
    for review in reviews:
        review.populate_user_info(user)

    return render.template("thing", {
        "defer_header": bool(edit),
        "title_key": edit["title_key"] if edit else None,
        "thing": thing,
        "thing_label": label_markup(thing),
        "main_url": main_url,
        "other_urls": other_urls,
        "reviews": reviews,
        "edit": edit,
        "edit_lang": edit_lang,
        "edit_value": edit_value,
        "page_errors": page_errors,
        "show_language_notice": show_language_notice,
    }, status=status)
