# tests/test_app.py
import webapp.app as app_module


def _no_db(path=None):
    raise AssertionError("database opened")


def test_health_and_static_skip_the_database(client, monkeypatch):
    monkeypatch.setattr(app_module, "get_conn", _no_db)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_data(as_text=True) == "ok"

    r = client.get("/static/js/libreviews.js")
    assert r.status_code == 200
    r.close()


def test_pages_open_the_database(client, monkeypatch):
    opened = []
    real_get_conn = app_module.get_conn

    def counting_get_conn(path=None):
        opened.append(path)
        return real_get_conn(path)

    monkeypatch.setattr(app_module, "get_conn", counting_get_conn)
    assert client.get("/").status_code == 200
    assert len(opened) == 1
