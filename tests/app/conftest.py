"""Test fixtures for the web layer."""

import pytest
from fastapi.testclient import TestClient

from app.dependencies import ProgressSync
from app.main import app
from roadmap.session_reconciler import SessionReconciler
from roadmap.sync_gateway import SyncGateway


@pytest.fixture
def sync(state, cache, fake_remote):
    """A ProgressSync wired to the in-memory remote and a temp cache."""
    gateway = SyncGateway(state, cache, fake_remote)
    return ProgressSync(
        state=state,
        cache=cache,
        remote=fake_remote,
        gateway=gateway,
        reconciler=SessionReconciler(gateway, fake_remote),
    )


@pytest.fixture
def client(sync, monkeypatch):
    """Create a TestClient whose app uses the test ProgressSync."""
    monkeypatch.setattr(app.state, "sync", sync, raising=False)
    return TestClient(app)


@pytest.fixture
def logged_in(client):
    """Log the test client in as the seeded account."""
    response = client.post(
        "/api/session/login",
        json={"email": "jane@example.com", "password": "secret"},
    )
    assert response.status_code == 200
    return client
