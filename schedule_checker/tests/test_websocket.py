import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from starlette.websockets import WebSocketDisconnect

from schedule_checker import db, state
from schedule_checker.config import clear_settings_cache
from schedule_checker.errors import DatabaseError


class DummyPubSub:
    def __init__(self, data_text: str):
        self._data_text = data_text
        self.subscribed: list[str] = []
        self.closed = False

    async def subscribe(self, channel: str):
        self.subscribed.append(channel)
        return True

    async def unsubscribe(self, _channel: str):
        return True

    async def aclose(self):
        self.closed = True
        return True

    async def listen(self):
        yield {"type": "subscribe", "data": 1}
        yield {"type": "message", "data": self._data_text}
        await asyncio.sleep(0)  # allow cancellation


class IdlePubSub(DummyPubSub):
    """Subscribes but never delivers a message."""

    def __init__(self):
        super().__init__("")

    async def listen(self):
        yield {"type": "subscribe", "data": 1}
        await asyncio.Event().wait()


@pytest.fixture
def fast_heartbeat(monkeypatch):
    monkeypatch.setenv("EVENT_WS_HEARTBEAT_SEC", "0.05")
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_websocket_forwards_event_updates(client, make_event, monkeypatch):
    created = make_event()
    event_id = created["event_id"]
    payload = {"type": "participant_joined", "event_id": event_id, "user_id": "u1", "user_name": "Bob"}
    pubsub = DummyPubSub(json.dumps(payload))
    monkeypatch.setattr(state.redis_client, "pubsub", lambda: pubsub)

    with client.websocket_connect(f"/ws/events/{event_id}") as ws:
        received = json.loads(ws.receive_text())
        assert received == payload

    assert pubsub.subscribed == [f"event_updates:{event_id}"]


def test_websocket_unknown_event_is_rejected(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/events/missing"):
            pass
    assert exc_info.value.code == 4404


def test_websocket_sends_heartbeat_ping(client, make_event, monkeypatch, fast_heartbeat):
    created = make_event()
    event_id = created["event_id"]
    pubsub = IdlePubSub()
    monkeypatch.setattr(state.redis_client, "pubsub", lambda: pubsub)

    with client.websocket_connect(f"/ws/events/{event_id}") as ws:
        assert json.loads(ws.receive_text()) == {"type": "ping"}

    assert pubsub.subscribed == [f"event_updates:{event_id}"]


def test_websocket_closes_1013_when_redis_disconnected(client, monkeypatch):
    monkeypatch.setattr(state, "redis_client", None)
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/events/anything"):
            pass
    assert exc_info.value.code == 1013


def test_websocket_closes_1013_on_store_error(client, monkeypatch):
    monkeypatch.setattr(db, "get_event", AsyncMock(side_effect=DatabaseError(detail="boom")))
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/events/anything"):
            pass
    assert exc_info.value.code == 1013
