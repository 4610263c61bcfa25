"""Shared fixtures: field builders and an app wired to a temporary store."""

import pytest
from fastapi.testclient import TestClient

from fieldform.app import create_app
from fieldform.config import Settings
from fieldform.fields import field_from_payload


@pytest.fixture
def make_field():
    """Build a FieldSchema from a camelCase payload, the way the API receives it."""

    def _make(**raw):
        raw.setdefault("id", "f1")
        raw.setdefault("label", "Field")
        raw.setdefault("type", "text")
        return field_from_payload(raw)

    return _make


@pytest.fixture(params=["sqlite", "json"])
def settings(request, tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", request.param)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "data" / "app.db"))
    monkeypatch.setenv("JSON_PATH", str(tmp_path / "data" / "store.json"))
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def signup_form():
    return {
        "name": "Event signup",
        "description": "Tell us who is coming",
        "status": "published",
        "fields": [
            {"id": "1", "type": "text", "required": True, "label": "Name"},
            {
                "id": "2",
                "type": "checkbox-group",
                "label": "Sessions",
                "options": [{"label": "A"}, {"label": "B"}],
                "selectionLimit": 1,
            },
            {"id": "3", "type": "checkbox", "label": "Subscribe"},
        ],
    }


@pytest.fixture
def published_form(client, signup_form):
    resp = client.post("/api/forms", json=signup_form)
    assert resp.status_code == 200
    return resp.json()
