import json
import time
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from intentbus.api.app import create_app
from intentbus.runtime.assembly import Runtime, build_runtime
from intentbus.settings import IntentBusSettings

API_KEY = "test-key"


def _settings(tmp_path: Path, api_key: str = API_KEY) -> IntentBusSettings:
    intents = tmp_path / "intents.json"
    intents.write_text(
        json.dumps([{"name": "greetings", "examples": ["hello there"]}]), encoding="utf-8"
    )
    return IntentBusSettings(
        _env_file=None,
        api_key=api_key,
        intent_file=intents,
        response_file=tmp_path / "missing.json",
        dispatch_poll_ms=5,
    )


@pytest.fixture
def runtime(tmp_path: Path) -> Runtime:
    return build_runtime(_settings(tmp_path))


@pytest.fixture
def client(runtime: Runtime) -> Iterator[TestClient]:
    with TestClient(create_app(runtime=runtime)) as c:
        yield c


def _post(client: TestClient, body: dict, key: str | None = API_KEY):
    headers = {"X-Api-Key": key} if key is not None else {}
    return client.post("/intents", json=body, headers=headers)


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.parametrize("key", [None, "", "wrong-key"])
def test_intents_require_api_key(client: TestClient, runtime: Runtime, key: str | None) -> None:
    resp = _post(client, {"intent": "chat.greet"}, key)

    assert resp.status_code == 401
    assert len(runtime.queue) == 0


def test_empty_configured_key_rejects_everything(tmp_path: Path) -> None:
    app = create_app(runtime=build_runtime(_settings(tmp_path, api_key="")))

    with TestClient(app) as c:
        assert _post(c, {"intent": "chat.greet"}, "").status_code == 401
        assert _post(c, {"intent": "chat.greet"}, "anything").status_code == 401


def test_accepts_known_intent(client: TestClient) -> None:
    resp = _post(
        client,
        {"intent": "nlp.route", "priority": 2, "correlationId": "req-1", "payload": {"text": "hi"}},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["accepted"] is True
    assert body["correlationId"] == "req-1"
    assert body["id"]


def test_generates_correlation_id_when_absent(client: TestClient) -> None:
    body = _post(client, {"intent": "chat.greet"}).json()

    assert body["correlationId"]
    assert body["correlationId"] != body["id"]


@pytest.mark.parametrize(
    ("body", "error"),
    [
        ({"intent": "weather.tomorrow"}, "unknown intent 'weather.tomorrow'"),
        ({"intent": "   "}, "intent required"),
        ({}, "intent required"),
        ({"intent": "chat.greet", "payload": [1, 2]}, "payload must be an object"),
    ],
)
def test_rejects_bad_requests(client: TestClient, runtime: Runtime, body: dict, error: str) -> None:
    resp = _post(client, body)

    assert resp.status_code == 400
    assert resp.json() == {"error": error}
    assert len(runtime.queue) == 0


def test_lists_registered_intents(client: TestClient) -> None:
    resp = client.get("/intents", headers={"X-Api-Key": API_KEY})

    assert resp.status_code == 200
    names = resp.json()["intents"]
    assert "nlp.route" in names
    assert "chat.greet" in names
    assert names == sorted(names, key=str.casefold)


def test_accepted_work_is_dispatched(client: TestClient, runtime: Runtime) -> None:
    _post(client, {"intent": "nlp.route", "payload": {"text": "hello there"}})

    deadline = time.monotonic() + 2
    while runtime.dispatcher.processed < 3 and time.monotonic() < deadline:
        time.sleep(0.01)

    assert runtime.dispatcher.processed == 3
    assert len(runtime.queue) == 0
