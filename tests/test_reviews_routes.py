# tests/test_reviews_routes.py
from catalog.review import Review
from conftest import sign_in


def _post_review(client, thing, **overrides):
    data = {
        "review-language": "en",
        "review-title": "A classic",
        "review-text": "Long, but *worth it*.",
        "review-rating": "5",
    }
    data.update(overrides)
    return client.post(f"/thing/{thing.id}/review/new", data=data)


def test_review_form_requires_sign_in(client, thing):
    assert client.get(f"/thing/{thing.id}/review/new").status_code == 401


def test_review_form_loads_editor(client, users, thing):
    sign_in(client, users["other"])
    r = client.get(f"/thing/{thing.id}/review/new")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'type="module" src="/static/js/editor.js"' in html
    assert 'name="review-text"' in html


def test_review_for_unknown_thing_is_404(client, users):
    sign_in(client, users["other"])
    assert client.get("/thing/nope/review/new").status_code == 404


def test_publish_review(client, db, users, thing, search_service):
    sign_in(client, users["other"])
    r = _post_review(client, thing)
    assert r.status_code == 302
    assert r.headers["Location"].endswith(f"/thing/{thing.id}")

    [review] = Review.filter_current(db, "thing_id = ?", (thing.id,))
    assert review.title == {"en": "A classic"}
    assert review.star_rating == 5
    assert "<em>worth it</em>" in review.html["en"]

    req = search_service.last_request
    assert req.path == f"/libreviews/reviews/{review.id}".lower()
    assert req.qs == {"parent": [thing.id]}

    page = client.get(f"/thing/{thing.id}").get_data(as_text=True)
    assert "A classic" in page
    assert "<em>worth it</em>" in page


def test_review_html_is_escaped(client, db, users, thing):
    sign_in(client, users["other"])
    _post_review(client, thing, **{"review-title": "<i>Title</i>",
                                   "review-text": "<script>alert(1)</script>"})
    page = client.get(f"/thing/{thing.id}").get_data(as_text=True)
    assert "<script>alert(1)</script>" not in page
    assert "&lt;i&gt;Title&lt;/i&gt;" in page


def test_invalid_review_is_reported(client, db, users, thing):
    sign_in(client, users["other"])
    r = _post_review(client, thing, **{"review-rating": "9"})
    assert r.status_code == 400
    assert "star rating between 1 and 5" in r.get_data(as_text=True)

    r = _post_review(client, thing, **{"review-title": ""})
    assert "Please give your review a title." in r.get_data(as_text=True)

    r = _post_review(client, thing, **{"review-language": "xx"})
    assert "'xx' is not supported" in r.get_data(as_text=True)
    assert Review.filter_current(db, "thing_id = ?", (thing.id,)) == []


def test_form_keeps_input_after_error(client, users, thing):
    sign_in(client, users["other"])
    r = _post_review(client, thing, **{"review-title": ""})
    assert "Long, but *worth it*." in r.get_data(as_text=True)


def test_delete_review(client, db, users, thing, search_service):
    review = Review.create(db, users["other"], thing, lang="en", title="Meh",
                           text="Not for me.", star_rating=2)

    sign_in(client, users["trusted"])
    assert client.post(f"/review/{review.id}/delete").status_code == 403

    sign_in(client, users["admin"])
    r = client.post(f"/review/{review.id}/delete")
    assert r.status_code == 302
    assert search_service.last_request.method == "DELETE"
    assert search_service.last_request.qs == {"parent": [thing.id]}

    page = client.get(f"/thing/{thing.id}").get_data(as_text=True)
    assert "The review has been deleted." in page
    assert "Meh" not in page
    assert client.post(f"/review/{review.id}/delete").status_code == 404
