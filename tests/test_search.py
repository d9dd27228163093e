# tests/test_search.py
import logging

import requests

import search
from conftest import SEARCH_BASE


def test_search_options_put_requested_language_first():
    options = search.get_search_options("things", "label", "fr")
    assert options["fields"] == ["label.fr*", "label.en*", "label.und*"]
    assert list(options["highlight"]["fields"]) == ["label.fr", "label.en", "label.und"]
    assert options["highlight"]["pre_tags"] == ['<span class="search-highlight">']
    assert options["highlight"]["post_tags"] == ["</span>"]


def test_search_options_do_not_duplicate_default_language():
    options = search.get_search_options("things", "label", "en")
    assert options["fields"] == ["label.en*", "label.und*"]


def test_search_things_sends_simple_query(search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", json={"hits": {"hits": []}})
    result = search.search_things("lord rings", "de")
    assert result == {"hits": {"hits": []}}
    body = search_service.last_request.json()
    assert body["query"]["simple_query_string"] == {
        "fields": ["label.de*", "label.en*", "label.und*"],
        "query": "lord rings",
        "default_operator": "and",
    }
    assert "label.de" in body["highlight"]["fields"]


def test_search_reviews_uses_parent_child_join(search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", json={"hits": {"hits": []}})
    search.search_reviews("epic", "en")
    has_child = search_service.last_request.json()["query"]["has_child"]
    assert has_child["type"] == "reviews"
    assert has_child["query"]["simple_query_string"]["fields"] == ["text.en*", "text.und*"]
    assert "text.en" in has_child["inner_hits"]["highlight"]["fields"]


def test_suggest_thing_has_one_suggester_per_language(search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", json={"suggest": {}})
    search.suggest_thing("Lor", "pt")
    suggest = search_service.last_request.json()["suggest"]
    assert list(suggest) == ["labels-pt", "labels-pt-PT", "labels-en", "labels-und"]
    assert suggest["labels-pt"] == {"prefix": "Lor", "completion": {"field": "label.pt.completion"}}


def test_index_thing_strips_html(search_service, thing):
    search_service.put(f"{SEARCH_BASE}/things/{thing.id}", json={"result": "created"})
    thing.description = {"en": "<p>A <em>novel</em></p>"}
    assert search.index_thing(thing) == {"result": "created"}
    body = search_service.last_request.json()
    assert body["label"] == {"en": "Lord of the Rings", "de": "Der Herr der Ringe"}
    assert body["description"] == {"en": "A novel"}
    assert body["urls"] == thing.urls


def test_index_review_sets_parent(search_service, db, users, thing):
    from catalog.review import Review
    review = Review.create(db, users["other"], thing, lang="en", title="Epic",
                           text="An *epic* tale", star_rating=4)
    search_service.put(f"{SEARCH_BASE}/reviews/{review.id}", json={"result": "created"})
    search.index_review(review)
    req = search_service.last_request
    assert req.qs == {"parent": [thing.id]}
    assert req.json()["text"] == {"en": "An epic tale"}
    assert req.json()["starRating"] == 4


def test_index_failures_are_logged_not_raised(search_service, thing, caplog):
    search_service.put(f"{SEARCH_BASE}/things/{thing.id}", status_code=503)
    with caplog.at_level(logging.ERROR):
        assert search.index_thing(thing) is None
    assert "indexing thing" in caplog.text


def test_connection_errors_are_logged_not_raised(search_service, thing, caplog):
    search_service.delete(f"{SEARCH_BASE}/things/{thing.id}", exc=requests.exceptions.ConnectionError)
    with caplog.at_level(logging.ERROR):
        assert search.delete_thing(thing) is None
    assert "removing thing from index" in caplog.text


def test_create_indices_mapping(search_service):
    search_service.put(SEARCH_BASE, json={"acknowledged": True})
    assert search.create_indices() == {"acknowledged": True}
    body = search_service.last_request.json()
    things = body["mappings"]["things"]["properties"]
    fr = things["label"]["properties"]["fr"]
    assert fr["fields"]["processed"]["analyzer"] == "french"
    assert fr["fields"]["completion"]["max_input_length"] == 256
    assert "completion" not in things["description"]["properties"]["fr"]["fields"]
    assert things["urls"]["fields"]["raw"] == {"type": "keyword"}
    assert body["mappings"]["reviews"]["_parent"] == {"type": "things"}
    assert body["settings"]["analysis"]["analyzer"]["label"]["filter"] == ["trim", "lowercase"]
