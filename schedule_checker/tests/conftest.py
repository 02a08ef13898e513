import os
import sys
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
import fakeredis.aioredis as fakeredis

import schedule_checker.lifespan as lifespan
import schedule_checker.main as main
from schedule_checker import state


@pytest.fixture
def client(monkeypatch):
    async def fake_init_redis():
        return fakeredis.FakeRedis(decode_responses=True)

    monkeypatch.setattr(lifespan, "init_redis", fake_init_redis)

    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def fake_redis():
    fake = fakeredis.FakeRedis(decode_responses=True)
    with patch.object(state, "redis_client", fake):
        yield fake


@pytest.fixture
def make_event(client):
    """Create an event over HTTP and return the creator's credentials."""

    def _make(event_name: str = "Standup", user_name: str = "Alice") -> dict:
        res = client.post("/events", json={"event_name": event_name, "user_name": user_name})
        assert res.status_code == 201
        return res.json()

    return _make
