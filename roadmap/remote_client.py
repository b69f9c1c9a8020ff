"""Thin async client for the remote progress store.

Handles only transport: building requests, attaching the bearer
credential, classifying failures into the sync error taxonomy, and
validating response shapes. Deciding what to do about a failure is the
gateway's job.
"""

from dataclasses import dataclass

import httpx

import config.settings as settings
from roadmap.errors import AuthRejected, NetworkFailure, RecordNotFound, RemoteError, ValidationFailure
from roadmap.schema_validator import (
    validate_auth_response,
    validate_survey_responses,
    validate_todo_record,
    validate_user_todos,
)

STATUS_COMPLETED = "Completed"
STATUS_PENDING = "Pending"


def status_for(completed: bool) -> str:
    return STATUS_COMPLETED if completed else STATUS_PENDING


@dataclass
class AuthSession:
    """Token and user record returned by login or register."""

    token: str
    user: dict


class RemoteStore:
    """RPC surface of the remote store over HTTP.

    Args:
        token_provider: Callable returning the current bearer token or None.
        base_url: API root (defaults to API_BASE_URL from settings).
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(self, token_provider=None, base_url: str | None = None,
                 timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.token_provider = token_provider or (lambda: None)
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REMOTE_TIMEOUT
        self._transport = transport

    def _headers(self) -> dict:
        token = self.token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, path: str, json_body=None):
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=self._headers(), json=json_body)
        except httpx.TimeoutException as e:
            raise NetworkFailure(f"Timeout after {self.timeout}s: {method} {path}") from e
        except httpx.TransportError as e:
            raise NetworkFailure(f"Network error for {method} {path}: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise ValidationFailure(f"Non-JSON response from {method} {path}") from e

        message = _error_message(response)
        code = response.status_code
        if code in (401, 403):
            raise AuthRejected(message)
        if code == 404:
            raise RecordNotFound(message)
        if code >= 500:
            raise NetworkFailure(f"Server error {code} for {method} {path}: {message}")
        raise RemoteError(message, status_code=code)

    # Auth

    async def login(self, email: str, password: str) -> AuthSession:
        data = await self._request("POST", "/auth/login", {"email": email, "password": password})
        validate_auth_response(data)
        return AuthSession(token=data["token"], user=data["user"])

    async def register(self, email: str, username: str, password: str) -> AuthSession:
        data = await self._request(
            "POST", "/auth/register",
            {"email": email, "username": username, "password": password},
        )
        validate_auth_response(data)
        return AuthSession(token=data["token"], user=data["user"])

    # Surveys

    async def get_survey_responses(self) -> list[dict]:
        data = await self._request("GET", "/surveys/responses")
        return validate_survey_responses(data)

    async def submit_survey_responses_batch(self, responses: list[dict]) -> None:
        await self._request("POST", "/surveys/responses/batch", {"responses": responses})

    # Todos

    async def get_user_todos(self) -> list[dict]:
        data = await self._request("GET", "/todos")
        return validate_user_todos(data)

    async def update_todo(self, todo_id: int, status: str) -> dict:
        data = await self._request("PUT", f"/todos/{todo_id}", {"status": status})
        return validate_todo_record(data)["todo"]

    async def add_todo(self, todo_id: int, step_id: int, status: str) -> dict:
        data = await self._request(
            "POST", "/todos", {"todoId": todo_id, "stepId": step_id, "status": status}
        )
        return validate_todo_record(data)["todo"]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"
