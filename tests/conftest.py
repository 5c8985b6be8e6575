"""Shared test fixtures and configuration for chatrelay tests."""
import pytest
from fastapi.testclient import TestClient

from chatrelay.core import state
from chatrelay.main import app
from chatrelay.services.connection_manager import ConnectionManager



@pytest.fixture
def router():
    """A fresh EventRouter with its own stores and a fixed clock."""
    r = state.build_router(history_limit=100)
    r.clock = lambda: "server-time"
    return r


@pytest.fixture
def fresh_state(monkeypatch):
    """Swap the process-wide router/manager for empty ones."""
    r = state.build_router(history_limit=100)
    monkeypatch.setattr(state, "event_router", r)
    monkeypatch.setattr(state, "connection_manager", ConnectionManager(router=r))
    return r


@pytest.fixture
def api_client(fresh_state):
    return TestClient(app)
