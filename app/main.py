"""FastAPI application for the Homebuyer Roadmap local API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.dependencies import build_sync
from app.routers import checklist, progress, session, survey
from roadmap.errors import (
    AuthRejected,
    NetworkFailure,
    RecordNotFound,
    RemoteError,
    StepLocked,
    SyncError,
    ValidationFailure,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Restore the cached session and, if one exists, reload it from the remote."""
    sync = build_sync()
    app.state.sync = sync
    if sync.state.authenticated:
        await sync.reconciler.reload()
    yield


app = FastAPI(title="Homebuyer Roadmap", lifespan=lifespan)

app.include_router(progress.router)
app.include_router(survey.router)
app.include_router(checklist.router)
app.include_router(session.router)


def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), **extra})


@app.exception_handler(AuthRejected)
async def auth_rejected_handler(request: Request, exc: AuthRejected):
    return _error(401, exc)


@app.exception_handler(NetworkFailure)
async def network_failure_handler(request: Request, exc: NetworkFailure):
    """Remote unreachable: local state was kept, the client may retry."""
    logger.warning("Remote unavailable for %s: %s", request.url.path, exc)
    return _error(502, exc, retry=True)


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    return _error(exc.status_code or 400, exc)


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return _error(404, exc)


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return _error(422, exc)


@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError):
    return _error(502, exc, retry=True)


@app.exception_handler(StepLocked)
async def step_locked_handler(request: Request, exc: StepLocked):
    return _error(409, exc, step_id=exc.step_id)


@app.exception_handler(LookupError)
async def lookup_error_handler(request: Request, exc: LookupError):
    return _error(404, exc)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(422, exc)
