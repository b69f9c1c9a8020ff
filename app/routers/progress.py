"""Progress routes: snapshot and local-only goal fields."""

from fastapi import APIRouter, Request

from app.dependencies import get_sync, progress_view
from app.models.requests import CommittedTimelineRequest, SavedAmountRequest
from roadmap.catalog import TIMELINE_COMMIT_OPTIONS

router = APIRouter()


@router.get("/api/progress")
async def get_progress(request: Request):
    """Snapshot, roadmap and state projection, recomputed on every call."""
    return progress_view(get_sync(request))


@router.put("/api/savings")
async def set_saved_amount(request: Request, body: SavedAmountRequest):
    sync = get_sync(request)
    sync.gateway.set_saved_amount(body.amount)
    return progress_view(sync)


@router.get("/api/timeline/options")
async def get_timeline_options(request: Request):
    return {"options": TIMELINE_COMMIT_OPTIONS}


@router.put("/api/timeline")
async def commit_timeline(request: Request, body: CommittedTimelineRequest):
    """Commit to a buying timeline; this also marks the survey completed."""
    sync = get_sync(request)
    sync.gateway.set_committed_timeline(body.timeline)
    sync.gateway.set_survey_completed(True)
    return progress_view(sync)
