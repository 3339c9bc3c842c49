from functools import partial
from unittest import mock

from fastapi.testclient import TestClient

from sudokupad_relay.config import Settings
from sudokupad_relay.relay import manager
from sudokupad_relay.relay.relay import Relay
from sudokupad_relay.server.app import create_app


async def _uploaded(puzzle, short_id, format="scl", *, settings=None):
    return True


def _client(connector) -> TestClient:
    app = create_app(Settings(), relay_factory=partial(Relay, connection_factory=connector.connection_factory()))
    return TestClient(app)


def test_healthz_and_index(connector):
    with _client(connector) as client:
        assert client.get("/healthz").json() == {"ok": True}
        page = client.get("/")
        assert page.status_code == 200
        assert 'id="sudokupad"' in page.text


def test_ready_without_relay_is_not_ok(connector):
    with _client(connector) as client:
        assert client.post("/api/ready").json() == {"ok": False}
        assert client.post("/api/mark-selections").json() == {"ok": False}


def test_settings_roundtrip(connector):
    with _client(connector) as client:
        assert client.get("/api/settings").json() == {"sendPointer": True, "showPointers": True}
        resp = client.post("/api/settings", json={"showPointers": False})
        assert resp.json() == {"sendPointer": True, "showPointers": False}
        assert client.app.state.relay_settings.show_pointers is False


def test_connect_ready_disconnect(connector):
    with mock.patch.object(manager, "upload_puzzle", _uploaded):
        with _client(connector) as client:
            resp = client.post("/api/connect", json={"roomId": "room", "name": "Alice", "color": "#ff0000"})
            assert resp.status_code == 200
            body = resp.json()
            user_id = body["userInfo"]["userId"]
            assert body["userInfo"]["name"] == "Alice"
            assert body["connected"] is True
            assert body["url"].startswith(f"https://sudokupad.app/sudokucon/room_{user_id}?")

            relay = client.app.state.slot.current
            assert relay is not None
            # relays share the app's policy object
            assert relay.settings is client.app.state.relay_settings

            assert client.post("/api/ready").json() == {"ok": True}
            assert client.post("/api/disconnect").json() == {"ok": True}
            assert client.app.state.slot.current is None
            assert not relay.active


def test_reconnect_keeps_stored_user_id(connector):
    with mock.patch.object(manager, "upload_puzzle", _uploaded):
        with _client(connector) as client:
            body = client.post(
                "/api/connect",
                json={"roomId": "room", "name": "Alice", "color": "#ff0000", "userId": "42"},
            ).json()
            assert body["userInfo"] == {"key": "1", "name": "Alice", "color": "#ff0000", "userId": "42"}
            assert body["url"].startswith("https://sudokupad.app/sudokucon/room_42?")


def test_connect_requires_room(connector):
    with _client(connector) as client:
        resp = client.post("/api/connect", json={"roomId": "", "name": "Alice", "color": "#ff0000"})
        assert resp.status_code == 422
