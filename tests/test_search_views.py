# tests/test_search_views.py
import logging

import requests

from conftest import SEARCH_BASE

THING_HITS = {
    "hits": {"hits": [{
        "_id": "t1",
        "_source": {"label": {"en": "Dune", "de": "Der Wüstenplanet"}},
        "highlight": {"label.en": ['<span class="search-highlight">Dune</span> <script>x</script>']},
    }]}
}

REVIEW_HITS = {
    "hits": {"hits": [{
        "_id": "t1",
        "_source": {"label": {"en": "Dune"}},
        "inner_hits": {"reviews": {"hits": {"hits": [{
            "_id": "r1",
            "_source": {"title": {"en": "Spice <b>must</b> flow"}},
            "highlight": {"text.en": ['the <span class="search-highlight">sandworms</span>']},
        }]}}},
    }]}
}


def _register_search(search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", [
        {"json": THING_HITS},
        {"json": REVIEW_HITS},
    ])


def test_search_page_without_query(client, search_service):
    r = client.get("/search")
    assert r.status_code == 200
    assert not search_service.called


def test_search_lists_things_and_reviews(client, search_service):
    _register_search(search_service)
    r = client.get("/search?query=dune")
    assert r.status_code == 200
    html = r.get_data(as_text=True)

    assert html.count('href="/thing/t1"') == 2
    assert '<span class="search-highlight">sandworms</span>' in html
    assert "Spice &lt;b&gt;must&lt;/b&gt; flow" in html

    first, second = search_service.request_history
    assert "simple_query_string" in first.json()["query"]
    assert "has_child" in second.json()["query"]


def test_search_highlights_are_escaped(client, search_service):
    _register_search(search_service)
    html = client.get("/search?query=dune").get_data(as_text=True)
    assert '<span class="search-highlight">Dune</span> &lt;script&gt;x&lt;/script&gt;' in html
    assert "<script>x</script>" not in html


def test_search_uses_request_language(client, search_service):
    _register_search(search_service)
    html = client.get("/search?query=dune", headers={"Accept-Language": "de"}).get_data(as_text=True)
    assert "Der Wüstenplanet" in html
    fields = search_service.request_history[0].json()["query"]["simple_query_string"]["fields"]
    assert fields[0] == "label.de*"


def test_search_failure_is_reported_and_logged(client, search_service, caplog):
    search_service.post(f"{SEARCH_BASE}/things/_search", exc=requests.ConnectionError("down"))
    with caplog.at_level(logging.ERROR):
        r = client.get("/search?query=dune")
    assert r.status_code == 200
    assert "An unknown error occurred." in r.get_data(as_text=True)
    assert any("searching" in rec.getMessage() for rec in caplog.records)


def test_suggest_thing(client, search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", json={
        "suggest": {
            "labels-en": [{"text": "Du", "options": [{"_id": "t1", "text": "Dune"}]}],
            "labels-und": [{"text": "Du", "options": []}],
        }
    })
    r = client.get("/api/suggest/thing/Du")
    assert r.status_code == 200
    assert r.get_json() == {"results": {"en": [{"id": "t1", "text": "Dune"}], "und": []}}
    body = search_service.last_request.json()
    assert body["suggest"]["labels-en"]["prefix"] == "Du"


def test_suggest_thing_unavailable(client, search_service):
    search_service.post(f"{SEARCH_BASE}/things/_search", status_code=500)
    r = client.get("/api/suggest/thing/Du")
    assert r.status_code == 503
    assert r.get_json()["message"] == "Search is currently unavailable."
