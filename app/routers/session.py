"""Session routes: login, account creation, logout."""

from fastapi import APIRouter, Request

from app.dependencies import get_sync, progress_view
from app.models.requests import LoginRequest, RegisterRequest

router = APIRouter()


@router.get("/api/session")
async def get_session(request: Request):
    state = get_sync(request).state
    return {
        "authenticated": state.authenticated,
        "user": state.user,
        "survey_completed": state.survey_completed,
    }


@router.post("/api/session/login")
async def login(request: Request, body: LoginRequest):
    """Log in and reload progress from the remote store."""
    sync = get_sync(request)
    await sync.reconciler.login(body.email, body.password)
    return progress_view(sync)


@router.post("/api/session/register")
async def register(request: Request, body: RegisterRequest):
    sync = get_sync(request)
    await sync.reconciler.create_account(body.username, body.email, body.password)
    return progress_view(sync)


@router.post("/api/session/logout")
async def logout(request: Request):
    """Local-only logout: clears the cache and resets state."""
    sync = get_sync(request)
    sync.reconciler.logout()
    return progress_view(sync)
