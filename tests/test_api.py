import pytest
from callback_registry.app import create_app
from callback_registry.services.registry import Registry, RegistryConfig


@pytest.fixture
def app():
    return create_app(Registry(RegistryConfig(mount="/_r/", max_age=0)), start_gc=False)


@pytest.fixture
def client(app):
    return app.test_client()


def test_get_with_query_then_gone(app, client):
    addr = app.extensions["rest"].emit(lambda req, name: {"content": "hi " + name})
    resp = client.get(addr, query_string={"name": "Bob"})
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "hi Bob"
    assert resp.headers["Cache-Control"] == "no-store"

    resp = client.get(addr, query_string={"name": "Bob"})
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_form_post(app, client):
    addr = app.extensions["rest"].emit(lambda req, name, age="?": {"content": f"{name}:{age}"})
    resp = client.post(addr, data={"name": "Ann"})
    assert resp.get_data(as_text=True) == "Ann:?"


def test_json_content_and_status(app, client):
    addr = app.extensions["rest"].emit(
        lambda req: {"content": {"ok": True}, "code": 201, "headers_out": {"X-Rest": "1"}})
    resp = client.get(addr)
    assert resp.status_code == 201
    assert resp.get_json() == {"ok": True}
    assert resp.headers["X-Rest"] == "1"


def test_callback_failure_is_500_and_entry_survives(app, client):
    registry = app.extensions["rest"]
    def cb(req):
        raise RuntimeError("kaput")
    addr = registry.emit(cb, key="bad")
    resp = client.get(addr)
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "kaput"
    assert registry.exists("bad")


def test_redirect_location(app, client):
    registry = app.extensions["rest"]

    @app.get("/start")
    def start():
        from callback_registry.api.rest import request_dict, to_response
        return to_response(registry.redirect(lambda req: {"content": "landed"}, request_dict()))

    resp = client.get("/start")
    assert resp.status_code == 303
    follow = client.get(resp.headers["Location"])
    assert follow.get_data(as_text=True) == "landed"


def test_unknown_paths_are_404(client):
    assert client.get("/_r/nothing").status_code == 404
    assert client.get("/elsewhere").status_code == 404


def test_create_app_options():
    app = create_app(start_gc=False, mount="/cb/", max_age=0)
    registry = app.extensions["rest"]
    assert registry.mount == "/cb/"
    addr = registry.emit(lambda req: {"content": "x"})
    assert addr.startswith("/cb/")
    assert app.test_client().get(addr).get_data(as_text=True) == "x"


def test_head_does_not_spend_address(app, client):
    calls = []
    def cb(req):
        calls.append(1)
        return {"content": "once"}
    addr = app.extensions["rest"].emit(cb)

    assert client.head(addr).status_code == 200
    assert calls == []
    assert client.get(addr).get_data(as_text=True) == "once"
    assert calls == [1]
    assert client.head(addr).status_code == 404


def test_create_app_rejects_options_with_registry():
    with pytest.raises(TypeError):
        create_app(Registry(RegistryConfig(max_age=0)), start_gc=False, mount="/cb/")
