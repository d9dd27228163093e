# tests/conftest.py
import pathlib, sys
import pytest
import requests_mock as rm

# Put repo root on sys.path so 'webapp', 'catalog', 'search', etc. import cleanly.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SEARCH_BASE = "http://search.test:9200/libreviews"


@pytest.fixture(autouse=True)
def _env_isolation(monkeypatch, tmp_path):
    monkeypatch.setenv("LIBREVIEWS_DB_PATH", str(tmp_path / "libreviews.db"))
    monkeypatch.setenv("SEARCH_HOST", "http://search.test")
    monkeypatch.setenv("SEARCH_PORT", "9200")
    monkeypatch.setenv("SEARCH_INDEX", "libreviews")
    monkeypatch.setenv("DEFAULT_LOCALE", "en")
    import search
    search.reset_client()
    yield
    search.reset_client()


@pytest.fixture(autouse=True)
def search_service(requests_mock):
    """Never hit a real cluster; accept every request unless a test registers something more specific."""
    requests_mock.register_uri(rm.ANY, rm.ANY, json={"acknowledged": True, "result": "created"})
    return requests_mock


@pytest.fixture
def db():
    from infra.db import get_conn
    conn = get_conn()
    yield conn
    conn.close()


@pytest.fixture
def users(db):
    from catalog.user import User
    return {
        "creator": User.create(db, "Creator"),
        "trusted": User.create(db, "Trusted", is_trusted=True),
        "other": User.create(db, "Other"),
        "admin": User.create(db, "Admin", is_super_user=True),
    }


@pytest.fixture
def thing(db, users):
    from catalog.thing import Thing
    return Thing.create(
        db, users["creator"],
        label={"en": "Lord of the Rings", "de": "Der Herr der Ringe"},
        urls=["https://en.wikipedia.org/wiki/The_Lord_of_the_Rings", "https://www.wikidata.org/wiki/Q15228"],
    )


@pytest.fixture
def client():
    from webapp.app import app
    app.config["TESTING"] = True
    return app.test_client()


def sign_in(client, user):
    with client.session_transaction() as sess:
        sess["user_id"] = user.id
