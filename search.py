# search.py
"""
Full-text search for things and reviews.

A thin request-shaping layer over an Elasticsearch 5.x cluster spoken to
over its REST API. Everything lives in one index (``libreviews`` by default)
with two types: ``things`` and ``reviews``, where reviews are children of
the thing they review. Multilingual fields are indexed per language:

    label.<lang>              full text
    label.<lang>.processed    stemmed with the language analyzer
    label.<lang>.completion   completion suggester (labels and aliases only)

Queries (search_things, search_reviews, suggest_thing) raise
requests.RequestException when the cluster is unhappy. Writes (index_*,
delete_*, create_indices) never raise: failures are logged and the caller
gets None.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

import settings
from catalog import ml_string
from locales import languages
from util import debug

# All supported stemmers as of Elasticsearch 5.2.0
ANALYZERS: Dict[str, str] = {
    "ar": "arabic",
    "hy": "armenian",
    "eu": "basque",
    "pt": "brazilian",
    "bg": "bulgarian",
    "ca": "catalan",
    "zh": "cjk",
    "zh-Hant": "cjk",
    "cs": "czech",
    "da": "danish",
    "nl": "dutch",
    "en": "english",
    "fi": "finnish",
    "fr": "french",
    "gl": "galician",
    "de": "german",
    "el": "greek",
    "hi": "hindi",
    "hu": "hungarian",
    "id": "indonesian",
    "ga": "irish",
    "it": "italian",
    "lv": "latvian",
    "lt": "lithuanian",
    "no": "norwegian",
    "fa": "persian",
    "pt-PT": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "ckb": "sorani",
    "es": "spanish",
    "sv": "swedish",
    "tr": "turkish",
    "th": "thai",
}

HIGHLIGHT_PRE_TAG = '<span class="search-highlight">'
HIGHLIGHT_POST_TAG = "</span>"
COMPLETION_MAX_INPUT_LENGTH = 256  # labels may be up to 256 characters


# ---------------- client ----------------

class SearchClient:
    def __init__(self, base_url: str, index: str, timeout: float = 10, log_bodies: bool = False):
        self.base_url = base_url.rstrip("/")
        self.index_name = index
        self.timeout = timeout
        self.log_bodies = log_bodies
        self._session = requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        if self.log_bodies:
            debug.search.debug("%s %s %s", method, url, json.dumps(kwargs.get("json")))
        r = self._session.request(method, url, timeout=self.timeout, **kwargs)
        r.raise_for_status()
        return r

    def search(self, body: Dict[str, Any], doc_type: Optional[str] = None) -> Dict[str, Any]:
        path = f"/{self.index_name}/{doc_type}/_search" if doc_type else f"/{self.index_name}/_search"
        return self._request("POST", path, json=body).json()

    def index(self, doc_type: str, doc_id: str, body: Dict[str, Any],
              parent: Optional[str] = None) -> Dict[str, Any]:
        params = {"parent": parent} if parent else None
        return self._request("PUT", f"/{self.index_name}/{doc_type}/{doc_id}",
                             json=body, params=params).json()

    def delete(self, doc_type: str, doc_id: str, parent: Optional[str] = None) -> Dict[str, Any]:
        params = {"parent": parent} if parent else None
        return self._request("DELETE", f"/{self.index_name}/{doc_type}/{doc_id}", params=params).json()

    def create_index(self, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/{self.index_name}", json=body).json()


_client: Optional[SearchClient] = None


def get_client() -> SearchClient:
    global _client
    if _client is None:
        _client = SearchClient(settings.search_url(), settings.search_index(),
                               timeout=settings.search_timeout(), log_bodies=settings.search_log())
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call picks up current settings."""
    global _client
    _client = None


# ---------------- queries ----------------

def raw(body: Dict[str, Any], doc_type: Optional[str] = None) -> Dict[str, Any]:
    """Run an arbitrary search body; handy for trying out queries."""
    return get_client().search(body, doc_type)


def get_search_options(doc_type: str, field_prefix: str, lang: str) -> Dict[str, Any]:
    """
    Field list and highlighter for a search in `lang`: the requested language
    first, then its fallbacks. ``<prefix>.<lang>*`` matches both the plain
    and the stemmed (``.processed``) sub-field.
    """
    langs = languages.get_chain(lang)
    fields = [f"{field_prefix}.{code}*" for code in langs]
    highlight = {
        "pre_tags": [HIGHLIGHT_PRE_TAG],
        "post_tags": [HIGHLIGHT_POST_TAG],
        "fields": {f"{field_prefix}.{code}": {} for code in langs},
    }
    return {"fields": fields, "highlight": highlight}


def _simple_query(query: str, fields: List[str]) -> Dict[str, Any]:
    return {
        "simple_query_string": {
            "fields": fields,
            "query": query,
            "default_operator": "and",
        }
    }


def search_things(query: str, lang: str = "en") -> Dict[str, Any]:
    """Find things by their label, with language fallback."""
    options = get_search_options("things", "label", lang)
    body = {
        "query": _simple_query(query, options["fields"]),
        "highlight": options["highlight"],
    }
    return get_client().search(body, "things")


def search_reviews(query: str, lang: str = "en") -> Dict[str, Any]:
    """
    Find reviews by their text. Hits are the reviewed things; the matching
    reviews come back as inner hits, with highlights.
    """
    options = get_search_options("reviews", "text", lang)
    body = {
        "query": {
            "has_child": {
                "type": "reviews",
                "query": _simple_query(query, options["fields"]),
                "inner_hits": {"highlight": options["highlight"]},
            }
        }
    }
    return get_client().search(body, "things")


def suggest_thing(prefix: str = "", lang: str = "en") -> Dict[str, Any]:
    """Autocomplete for thing labels: one completion suggester per language in the chain."""
    suggest = {}
    for code in languages.get_chain(lang):
        suggest[f"labels-{code}"] = {
            "prefix": prefix,
            "completion": {"field": f"label.{code}.completion"},
        }
    return get_client().search({"suggest": suggest}, "things")


# ---------------- writes (never raise) ----------------

def index_review(review) -> Optional[Dict[str, Any]]:
    try:
        return get_client().index("reviews", review.id, {
            "createdOn": review.created_on,
            "title": ml_string.strip_html(review.title),
            "text": ml_string.strip_html(review.html),
            "starRating": review.star_rating,
        }, parent=review.thing_id)
    except requests.RequestException as e:
        debug.error(context="indexing review", error=e)
        return None


def index_thing(thing) -> Optional[Dict[str, Any]]:
    try:
        return get_client().index("things", thing.id, {
            "createdOn": thing.created_on,
            "label": ml_string.strip_html(thing.label),
            "aliases": ml_string.strip_html_from_array(thing.aliases),
            "description": ml_string.strip_html(thing.description),
            "urls": thing.urls,
        })
    except requests.RequestException as e:
        debug.error(context="indexing thing", error=e)
        return None


def delete_thing(thing) -> Optional[Dict[str, Any]]:
    try:
        return get_client().delete("things", thing.id)
    except requests.RequestException as e:
        debug.error(context="removing thing from index", error=e)
        return None


def delete_review(review) -> Optional[Dict[str, Any]]:
    try:
        return get_client().delete("reviews", review.id, parent=review.thing_id)
    except requests.RequestException as e:
        debug.error(context="removing review from index", error=e)
        return None


# ---------------- index setup ----------------

def create_indices() -> Optional[Dict[str, Any]]:
    """Create the index with its mappings. Safe to call once per cluster."""
    body = {
        "settings": {
            "analysis": {
                "tokenizer": {
                    "whitespace": {"type": "whitespace"},
                },
                "analyzer": {
                    "label": {
                        "type": "custom",
                        "tokenizer": "whitespace",
                        "filter": ["trim", "lowercase"],
                    }
                },
            }
        },
        "mappings": {
            "reviews": {
                "_parent": {"type": "things"},
                "properties": {
                    "createdOn": {"type": "date"},
                    "text": get_multilingual_text_properties(),
                    "title": get_multilingual_text_properties(),
                },
            },
            "things": {
                "properties": {
                    "createdOn": {"type": "date"},
                    "urls": get_url_properties(),
                    "label": get_multilingual_text_properties(completion_mapping=True),
                    "aliases": get_multilingual_text_properties(completion_mapping=True),
                    "description": get_multilingual_text_properties(),
                }
            },
        },
    }
    try:
        return get_client().create_index(body)
    except requests.RequestException as e:
        debug.error(context="creating search index", error=e)
        return None


def get_url_properties() -> Dict[str, Any]:
    """
    URLs are indexed three ways:
      text   https://www.wikidata.org/wiki/Q27940587 -> https, www.wikidata.org, wiki, q27940587
      raw    the URL as a single keyword
      simple https, www, wikidata, org, wiki, q
    """
    return {
        "type": "text",
        "fields": {
            "raw": {"type": "keyword"},
            "simple": {"type": "text", "analyzer": "simple"},
        },
    }


def get_multilingual_text_properties(completion_mapping: bool = False) -> Dict[str, Any]:
    """
    Mapping for a multilingual string. Every language Elasticsearch can stem
    gets a sub-field, whether or not the site offers it yet, so the mapping
    doesn't need updating when languages are added.
    """
    properties: Dict[str, Any] = {}
    for lang, analyzer in ANALYZERS.items():
        properties[lang] = {
            "type": "text",
            "index_options": "offsets",  # sentence-based highlighting
            "fields": {
                "processed": {
                    "type": "text",
                    "analyzer": analyzer,
                    "index_options": "offsets",
                }
            },
        }
        if completion_mapping:
            properties[lang]["fields"]["completion"] = {
                "type": "completion",
                "analyzer": "label",
                "max_input_length": COMPLETION_MAX_INPUT_LENGTH,
            }
    return {"properties": properties}
