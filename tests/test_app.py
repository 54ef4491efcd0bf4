import json

import pytest
from fastapi.testclient import TestClient

from assistant_admin import build_console
from assistant_admin.app import create_app
from assistant_admin.config import ConsoleConfig
from assistant_admin.errors import TransportFailure
from assistant_admin.storage import SETTINGS_CACHE_KEY, MemoryKeyValueStore

from conftest import FakeAuthority, FakeBackend, json_response


@pytest.fixture
def cache():
    return MemoryKeyValueStore()


@pytest.fixture
def authority():
    return FakeAuthority(
        fetch=[json_response(200, {"model": "gpt-x", "temperature": 1.5})],
        persist=[json_response(500, {"error": "boom"}, reason="Internal Server Error")],
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(authority, backend, cache):
    console = build_console(authority=authority, backend=backend, cache_store=cache)
    return TestClient(create_app(console, config=ConsoleConfig()))


def _login(client):
    resp = client.post("/login", json={"username": "admin", "password": "secret"})
    assert resp.status_code == 200
    return resp.json()


def test_settings_require_login(client):
    assert client.get("/settings").status_code == 401
    assert client.post("/test", json={"prompt": "hello"}).status_code == 401


def test_bad_login(client):
    resp = client.post("/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid username or password."


def test_login_loads_partial_remote_record(client):
    body = _login(client)
    assert body["authed"] is True
    assert body["source"] == "remote"
    assert body["settings"]["model"] == "gpt-x"
    assert body["settings"]["temperature"] == 1.5
    assert body["settings"]["maxTokens"] == 1024
    assert body["settings"]["rateLimit"] == 60


def test_patch_coerces_form_values(client):
    _login(client)
    resp = client.patch("/settings", json={"maxTokens": "0", "temperature": "0.9", "model": "gpt-y"})
    settings = resp.json()["settings"]
    assert settings["maxTokens"] == 1
    assert settings["temperature"] == 0.9
    assert settings["model"] == "gpt-y"
    assert resp.json()["dirty"] is True


def test_save_server_error_is_local_only(client, authority, cache):
    _login(client)
    client.patch("/settings", json={"model": "edited"})

    resp = client.post("/settings/save")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "local_server_error"
    assert body["httpStatus"] == 500
    assert json.loads(cache.get(SETTINGS_CACHE_KEY)) == authority.persisted[0]
    assert authority.persisted[0]["model"] == "edited"
    status = client.get("/status").json()
    assert status["error"] == "Save failed: 500 Internal Server Error"


def test_reset_and_reload(client):
    _login(client)
    body = client.post("/settings/reset").json()
    assert body["settings"]["model"] == "gpt-4o-mini"
    assert body["message"] == "Restored defaults (local only until saved)."
    reloaded = client.post("/settings/reload").json()
    assert reloaded["fromRemote"] is True
    assert reloaded["settings"]["model"] == "gpt-x"


def test_run_test_output(client):
    _login(client)
    resp = client.post("/test", json={"prompt": "hello"})
    assert resp.status_code == 200
    assert resp.json()["output"] == "hi there"


def test_run_test_bare_string(client, backend):
    backend.response = json_response(200, "ok")
    _login(client)
    assert client.post("/test", json={"prompt": "hello"}).json()["output"] == "ok"


def test_run_test_empty_prompt(client, backend):
    _login(client)
    resp = client.post("/test", json={"prompt": "   "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Test prompt cannot be empty."
    assert backend.calls == []


def test_run_test_network_failure(client, backend):
    backend.response = TransportFailure("down")
    _login(client)
    resp = client.post("/test", json={"prompt": "hello"})
    assert resp.status_code == 502
    assert resp.json()["status"] == "network_error"


def test_logout_closes_gate(client):
    _login(client)
    body = client.post("/logout").json()
    assert body["authed"] is False
    assert body["settings"] is None
    assert client.get("/settings").status_code == 401


def test_startup_resumes_open_session(authority, backend, cache):
    session = MemoryKeyValueStore({"admin_token": "ok"})
    console = build_console(authority=authority, backend=backend, cache_store=cache, session_store=session)
    with TestClient(create_app(console, config=ConsoleConfig())) as client:
        body = client.get("/settings").json()
    assert body["settings"]["model"] == "gpt-x"
