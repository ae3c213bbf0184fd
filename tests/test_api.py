"""Tests for the REST endpoints and the realtime socket route."""

import json

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from sculpture_guide.app import create_app
from sculpture_guide.config import Settings
from sculpture_guide.data.store import DatasetStore
from sculpture_guide.prompts import DEFAULT_PROMPTS
from tests.fakes.fake_upstream import FakeConversationClient, text_response


def _client(store, client_factory=None) -> TestClient:
    app = create_app(Settings(), store=store, client_factory=client_factory)
    return TestClient(app)


def test_gallery_and_gothic_info(store):
    client = _client(store)

    gallery = client.get("/api/general/gallery")
    gothic = client.get("/api/general/gothic")

    assert gallery.status_code == 200
    assert gallery.json()["title"].startswith("Medieval Art")
    assert gothic.status_code == 200
    assert set(gothic.json()) == {"title", "description"}


def test_general_info_missing_returns_404(tmp_path):
    client = _client(DatasetStore(tmp_path / "missing.json"))

    gallery = client.get("/api/general/gallery")
    gothic = client.get("/api/general/gothic")

    assert gallery.status_code == 404
    assert gallery.json() == {"error": "Gallery information not found"}
    assert gothic.status_code == 404
    assert gothic.json() == {"error": "Gothic style information not found"}


def test_get_sculpture_by_name(store):
    client = _client(store)

    response = client.get("/api/sculptures/Anna of Schweidnitz")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Anna of Schweidnitz"
    assert body["artist"] == "Workshop of Peter Parler"
    assert "artifacts" not in body


def test_unknown_sculpture_returns_404(store):
    response = _client(store).get("/api/sculptures/Unknown Artifact")

    assert response.status_code == 404
    assert response.json() == {"error": "Sculpture not found"}


def test_search_sculptures(store):
    client = _client(store)

    by_year = client.get("/api/sculptures", params={"year": "1375", "artist": "parler"})
    no_criteria = client.get("/api/sculptures")
    no_match = client.get("/api/sculptures", params={"name": "prague"})

    assert by_year.status_code == 200
    assert [s["name"] for s in by_year.json()] == ["Charles the fourth", "Anna of Schweidnitz"]
    assert no_criteria.status_code == 200
    assert no_criteria.json() == []
    assert no_match.json() == []


def test_health(store):
    assert _client(store).get("/health").json() == {"status": "ok"}


def test_realtime_socket_relays_session(store):
    upstreams: list[FakeConversationClient] = []

    def factory(settings):
        upstream = FakeConversationClient(
            respond=lambda: [text_response("r1", "i1", ["Anna ", "was a queen."])]
        )
        upstreams.append(upstream)
        return upstream

    client = _client(store, factory)
    with client.websocket_connect("/realtime") as ws:
        assert ws.receive_json() == {
            "type": "control",
            "action": "connected",
            "greeting": DEFAULT_PROMPTS.greeting,
        }
        ws.send_bytes(b"\x01\x02")
        ws.send_text(
            json.dumps({"id": "m1", "type": "user_message", "text": "Who was Anna of Schweidnitz?"})
        )
        assert ws.receive_json() == {"id": "i1-0", "type": "text_delta", "delta": "Anna "}
        assert ws.receive_json() == {"id": "i1-0", "type": "text_delta", "delta": "was a queen."}
        assert ws.receive_json() == {"type": "control", "action": "text_done", "id": "i1-0"}

        upstream = upstreams[0]
        assert upstream.audio == [b"\x01\x02"]
        assert "Name: Anna of Schweidnitz" in upstream.items[-2]["content"][0]["text"]
        assert upstream.items[-1]["role"] == "user"


def test_other_socket_paths_are_rejected(store):
    client = _client(store, lambda settings: FakeConversationClient())
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/elsewhere"):
            pass
