"""Shared test fixtures for the Homebuyer Roadmap test suite."""

import asyncio

import pytest

from roadmap.errors import AuthRejected, RecordNotFound
from roadmap.local_cache import LocalCache
from roadmap.remote_client import AuthSession
from roadmap.session_reconciler import SessionReconciler
from roadmap.session_state import SessionState
from roadmap.sync_gateway import SyncGateway


@pytest.fixture(autouse=True)
def set_test_environment(monkeypatch):
    """Ensure all tests run with ENVIRONMENT=test."""
    monkeypatch.setenv("ENVIRONMENT", "test")


class FakeRemote:
    """In-memory stand-in for RemoteStore.

    Records every call, can fail any method with a preset exception, and can
    hold any method at a gate (an asyncio.Event) to simulate a call in flight.
    """

    def __init__(self):
        self.responses = {}
        self.todos = {}
        self.calls = []
        self.fail_with = {}
        self.gates = {}
        self.accounts = {
            "jane@example.com": {
                "password": "secret",
                "token": "tok-jane",
                "user": {"id": 7, "email": "jane@example.com", "username": "jane"},
            },
        }

    async def _enter(self, name, *args):
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        exc = self.fail_with.get(name)
        if exc is not None:
            raise exc

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    async def login(self, email, password):
        await self._enter("login", email)
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise AuthRejected("Invalid credentials")
        return AuthSession(token=account["token"], user=dict(account["user"]))

    async def register(self, email, username, password):
        await self._enter("register", email, username)
        user = {"id": 100 + len(self.accounts), "email": email, "username": username}
        self.accounts[email] = {"password": password, "token": f"tok-{username}", "user": user}
        return AuthSession(token=f"tok-{username}", user=dict(user))

    async def get_survey_responses(self):
        await self._enter("get_survey_responses")
        return [{"questionId": q, "response": r} for q, r in sorted(self.responses.items())]

    async def submit_survey_responses_batch(self, responses):
        await self._enter("submit_survey_responses_batch", responses)
        for item in responses:
            self.responses[item["questionId"]] = item["response"]

    async def get_user_todos(self):
        await self._enter("get_user_todos")
        return [dict(t) for t in self.todos.values()]

    async def update_todo(self, todo_id, status):
        await self._enter("update_todo", todo_id, status)
        if todo_id not in self.todos:
            raise RecordNotFound("Todo not found")
        self.todos[todo_id]["status"] = status
        return dict(self.todos[todo_id])

    async def add_todo(self, todo_id, step_id, status):
        await self._enter("add_todo", todo_id, step_id, status)
        self.todos[todo_id] = {"todoId": todo_id, "stepId": step_id, "status": status}
        return dict(self.todos[todo_id])


@pytest.fixture
def fake_remote():
    return FakeRemote()


@pytest.fixture
def cache(tmp_path):
    """A LocalCache backed by a file in a temporary directory."""
    return LocalCache(tmp_path / "cache" / "local_cache.json")


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture
def gateway(state, cache, fake_remote):
    return SyncGateway(state, cache, fake_remote)


@pytest.fixture
def authed_gateway(gateway):
    """A gateway whose session already holds a token."""
    gateway.set_session("tok-jane", {"id": 7, "email": "jane@example.com", "username": "jane"})
    return gateway


@pytest.fixture
def reconciler(gateway, fake_remote):
    return SessionReconciler(gateway, fake_remote)


async def _wait_for_call(remote, name, timeout=1.0):
    async def _poll():
        while name not in remote.call_names():
            await asyncio.sleep(0)
    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def wait_for_call():
    """Return a coroutine function that yields until remote has received a call to name."""
    return _wait_for_call
