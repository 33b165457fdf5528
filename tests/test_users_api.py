"""
End-to-end tests of the /users endpoints through FastAPI's TestClient.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import requests
from fastapi.testclient import TestClient

# Garante que o pacote users_api seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import users_api.services.seed_service as seed_service  # noqa: E402
from users_api.app import create_app  # noqa: E402
from users_api.core import config as core_config  # noqa: E402


def _seed_document(count: int = 10) -> dict:
    return {"users": [{"id": i, "firstName": f"User{i}"} for i in range(1, count + 1)], "total": count}


@pytest.fixture()
def data_file(tmp_path, monkeypatch):
    """Aponta DATA_FILE para um arquivo temporário e desliga o seed remoto."""
    path = tmp_path / "data" / "users.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(_seed_document()), encoding="utf-8")
    monkeypatch.setenv("DATA_FILE", str(path))
    monkeypatch.setenv("SEED_ON_STARTUP", "false")
    monkeypatch.delenv("LEGACY_ERROR_STATUS", raising=False)
    core_config.get_settings.cache_clear()
    yield path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(data_file):
    with TestClient(create_app()) as test_client:
        yield test_client


def test_list_users_returns_collection(client):
    resp = client.get("/users")
    assert resp.status_code == 200
    assert resp.json() == _seed_document()["users"]


def test_get_user_by_id(client):
    for user_id in (1, 5, 10):
        resp = client.get(f"/users/{user_id}")
        assert resp.status_code == 200
        assert resp.json() == {"id": user_id, "firstName": f"User{user_id}"}


def test_get_unknown_and_invalid_ids(client):
    missing = client.get("/users/404")
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"

    invalid = client.get("/users/abc")
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "bad_request"


def test_create_returns_only_new_id(client, data_file):
    resp = client.post("/users", json={"name": "X", "id": 3})

    assert resp.status_code == 200
    assert resp.json() == 11
    stored = json.loads(data_file.read_text(encoding="utf-8"))["users"]
    assert stored[-1] == {"name": "X", "id": 11}


@pytest.mark.parametrize("content", [b"", b"{}", b"[1, 2]", b"{broken"])
def test_create_rejects_missing_or_non_object_body(client, data_file, content):
    before = data_file.read_bytes()
    resp = client.post("/users", content=content, headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert data_file.read_bytes() == before


@pytest.mark.parametrize("content", [b'{"name": NaN}', b'{"n": 1e999}', b'{"n": -Infinity}'])
def test_non_finite_numbers_are_rejected_and_store_stays_readable(client, data_file, content):
    before = data_file.read_bytes()
    headers = {"content-type": "application/json"}

    assert client.post("/users", content=content, headers=headers).status_code == 400
    assert client.put("/users/2", content=content, headers=headers).status_code == 400

    assert data_file.read_bytes() == before
    assert client.get("/users").status_code == 200
    assert client.get("/users/2").status_code == 200


def test_replace_returns_full_collection(client):
    resp = client.put("/users/2", json={"name": "Y"})

    assert resp.status_code == 200
    users = resp.json()
    assert len(users) == 10
    assert users[1] == {"name": "Y", "id": 2}


def test_replace_unknown_id_and_missing_body(client, data_file):
    before = data_file.read_bytes()
    assert client.put("/users/99", json={"name": "Y"}).status_code == 404
    assert client.put("/users/2").status_code == 400
    assert data_file.read_bytes() == before


def test_delete_then_repeat_is_idempotent_error(client, data_file):
    resp = client.delete("/users/7")
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [1, 2, 3, 4, 5, 6, 8, 9, 10]

    before = data_file.read_bytes()
    again = client.delete("/users/7")
    assert again.status_code == 404
    assert data_file.read_bytes() == before


def test_delete_removes_duplicated_ids(data_file):
    data_file.write_text(json.dumps({"users": [{"id": 1}, {"id": 1}, {"id": 2}]}), encoding="utf-8")
    with TestClient(create_app()) as client:
        resp = client.delete("/users/1")
    assert resp.status_code == 200
    assert resp.json() == [{"id": 2}]


def test_missing_document_is_storage_error(client, data_file):
    data_file.unlink()
    resp = client.get("/users")
    assert resp.status_code == 500
    assert resp.json()["error"] == "storage_error"


def test_legacy_error_status_collapses_to_400(data_file, monkeypatch):
    monkeypatch.setenv("LEGACY_ERROR_STATUS", "true")
    core_config.get_settings.cache_clear()
    with TestClient(create_app()) as client:
        assert client.get("/users/404").status_code == 400
        data_file.unlink()
        assert client.get("/users").status_code == 400


def test_startup_seed_gates_first_request(data_file, monkeypatch):
    body = json.dumps({"users": [{"id": 1, "firstName": "Emily"}], "total": 1}).encode()

    class _Resp:
        content = body

        def raise_for_status(self):
            return None

    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    monkeypatch.setattr(seed_service.requests, "get", lambda url, timeout: _Resp())
    core_config.get_settings.cache_clear()

    with TestClient(create_app()) as client:
        assert client.get("/users").json() == [{"id": 1, "firstName": "Emily"}]
        health = client.get("/health").json()

    assert health == {"status": "ok", "seeded": True, "seed_error": None, "data_file_present": True}
    assert data_file.read_bytes() == body


def test_health_without_seed(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["seeded"] is False
    assert resp.json()["data_file_present"] is True


def test_app_factory_exposes_configured_app(data_file):
    import importlib

    import users_api.app_factory as app_factory

    app_factory = importlib.reload(app_factory)
    paths = {route.path for route in app_factory.app.routes}
    assert {"/users", "/users/{user_id}", "/health"} <= paths
    assert app_factory.app.state.settings.data_file == data_file


def test_startup_survives_failed_seed(data_file, monkeypatch):
    before = data_file.read_bytes()

    def fake_get(url, timeout):
        raise requests.ConnectionError("seed host unreachable")

    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    monkeypatch.setattr(seed_service.requests, "get", fake_get)
    core_config.get_settings.cache_clear()

    with TestClient(create_app()) as client:
        resp = client.get("/users")
        health = client.get("/health").json()

    assert resp.status_code == 200
    assert resp.json() == _seed_document()["users"]
    assert health["seeded"] is False
    assert "seed host unreachable" in health["seed_error"]
    assert data_file.read_bytes() == before


def test_startup_survives_non_positive_seed_timeout(data_file, monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append(timeout)
        raise requests.Timeout("slow")

    monkeypatch.setenv("SEED_ON_STARTUP", "true")
    monkeypatch.setenv("SEED_TIMEOUT_SECONDS", "0")
    monkeypatch.setattr(seed_service.requests, "get", fake_get)
    core_config.get_settings.cache_clear()

    with TestClient(create_app()) as client:
        assert client.get("/health").json()["seeded"] is False

    assert calls == [10.0]
