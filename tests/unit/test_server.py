# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from config import AppConfig
from observability import logger
from playback import prompts
from playback.errors import CatalogError
from server.app import create_app
from session.store import InMemorySessionStore

EXAMPLE_CATALOG = Path(__file__).resolve().parents[2] / "data" / "catalog.example.json"


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    lines: list[dict[str, Any]] = []
    monkeypatch.setattr(logger, "_print", lambda line: lines.append(json.loads(line)))
    return lines


@pytest.fixture
def client(captured) -> TestClient:
    app = create_app(
        AppConfig(catalog_path=str(EXAMPLE_CATALOG), shuffle_seed=1),
        store=InMemorySessionStore(),
    )
    return TestClient(app)


def _launch_envelope() -> dict[str, Any]:
    return {
        "session": {"user": {"userId": "amzn1.ask.account.HTTP"}},
        "context": {
            "System": {
                "user": {"userId": "amzn1.ask.account.HTTP"},
                "device": {"supportedInterfaces": {"AudioPlayer": {}}},
            }
        },
        "request": {"type": "LaunchRequest", "requestId": "req-http-1"},
    }


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_skill_answers_launch(client, captured):
    res = client.post("/skill", json=_launch_envelope())

    assert res.status_code == 200
    body = res.json()
    assert body["version"] == "1.0"
    assert body["response"]["outputSpeech"]["text"] == prompts.WELCOME
    assert captured[0]["event_type"] == "APP_STARTED"


def test_skill_rejects_invalid_json(client, captured):
    res = client.post(
        "/skill",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 400
    assert res.json()["error"] == "invalid_json"
    assert captured[-1]["event_type"] == "ENVELOPE_REJECTED"


@pytest.mark.parametrize("payload,error", [
    ({"version": "1.0"}, "MalformedEnvelope"),
    ({"request": {"type": "LaunchRequest"}}, "MissingUserId"),
])
def test_skill_rejects_unattributable_envelopes(client, payload, error):
    res = client.post("/skill", json=payload)

    assert res.status_code == 400
    assert res.json()["error"] == error


def test_app_refuses_to_start_without_catalog(tmp_path, captured):
    with pytest.raises(CatalogError):
        create_app(AppConfig(catalog_path=str(tmp_path / "missing.json")))
