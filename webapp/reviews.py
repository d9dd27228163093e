# webapp/reviews.py
from __future__ import annotations

import sqlite3

from flask import Blueprint, flash, g, get_flashed_messages, redirect, request, url_for

import search
from catalog.errors import ModelError
from catalog.review import Review
from catalog.thing import Thing
from locales import languages
from util.error_message import ErrorMessage
from webapp import render, resource_errors
from webapp.flash_error import flash_error
from webapp.things import label_markup

bp = Blueprint("reviews", __name__)


def _parse_star_rating(raw: str):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@bp.route("/thing/<thing_id>/review/new", methods=["GET", "POST"])
def new_review(thing_id: str):
    if not g.user:
        return render.signin_required({"title_key": "write a review"})

    thing_id = thing_id.strip()
    try:
        thing = Thing.get_not_stale_or_deleted(g.db, thing_id)
    except ModelError as e:
        return resource_errors.handle(e, "thing", thing_id)

    form = {
        "lang": g.locale,
        "title": "",
        "text": "",
        "star_rating": "",
    }
    if request.method == "POST":
        form["lang"] = request.form.get("review-language", "").strip()
        form["title"] = request.form.get("review-title", "").strip()
        form["text"] = request.form.get("review-text", "")
        form["star_rating"] = request.form.get("review-rating", "").strip()

        if not languages.is_valid(form["lang"]):
            flash_error(ErrorMessage("invalid language code", [form["lang"]]), "adding review - validating")
        else:
            try:
                review = Review.create(g.db, g.user, thing, lang=form["lang"], title=form["title"],
                                       text=form["text"],
                                       star_rating=_parse_star_rating(form["star_rating"]))
            except (ModelError, sqlite3.Error) as e:
                flash_error(Review.resolve_error(e), "adding review - saving")
            else:
                search.index_review(review)
                return redirect(url_for("things.show", thing_id=thing.id))

    return render.template("review-form", {
        "title_key": "write a review",
        "thing": thing,
        "thing_label": label_markup(thing),
        "form": form,
        "page_errors": get_flashed_messages(category_filter=["pageErrors"]),
        "scripts": ["editor.js"],
    }, status=400 if request.method == "POST" else 200)


@bp.route("/review/<review_id>/delete", methods=["POST"])
def delete(review_id: str):
    review_id = review_id.strip()
    try:
        review = Review.get_not_stale_or_deleted(g.db, review_id)
    except ModelError as e:
        return resource_errors.handle(e, "review", review_id)

    review.populate_user_info(g.user)
    if not review.user_can_delete:
        return render.permission_error({"title_key": "delete review"})

    try:
        review.delete(g.user)
    except (ModelError, sqlite3.Error) as e:
        flash_error(e, "deleting review", category="siteErrors")
    else:
        search.delete_review(review)
        flash(render.t("review deleted message"), "siteMessages")
    return redirect(url_for("things.show", thing_id=review.thing_id))
