import os
import tempfile

# keep the app's default data dir out of the working tree
os.environ.setdefault("TYPERACE_DATA_DIR", tempfile.mkdtemp(prefix="typerace-"))

import pytest
from fastapi.testclient import TestClient

import server
from leaderboard import LeaderboardStore
from sessions import SessionRegistry


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def tick(self, seconds):
        self.now += seconds


@pytest.fixture
def store(tmp_path):
    return LeaderboardStore(tmp_path / "data" / "leaderboard.json")


@pytest.fixture
def fake_clock(monkeypatch):
    c = FakeClock()
    monkeypatch.setattr(server, "clock", c)
    return c


@pytest.fixture
def client(monkeypatch, store, fake_clock):
    monkeypatch.setattr(server, "STORE", store)
    monkeypatch.setattr(server, "SESSIONS", SessionRegistry(store))
    monkeypatch.setattr(server, "AI_CALIBRATION", None)
    return TestClient(server.app)
