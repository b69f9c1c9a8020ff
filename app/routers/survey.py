"""Survey routes: questions and answer submission."""

from fastapi import APIRouter, Request

from app.dependencies import get_sync, progress_view
from app.models.requests import SurveyAnswersRequest
from roadmap.catalog import SURVEY_QUESTIONS

router = APIRouter()


@router.get("/api/survey/questions")
async def get_questions(request: Request):
    """Return the survey questions with their option sets."""
    return {"questions": SURVEY_QUESTIONS}


@router.put("/api/survey/answers")
async def submit_answers(request: Request, body: SurveyAnswersRequest):
    """Commit answers locally and submit them to the remote store.

    Remote failures propagate to the exception handlers so the UI can offer
    a retry; the answers stay committed locally either way.
    """
    sync = get_sync(request)
    result = await sync.gateway.submit_answers(body.model_dump())
    view = progress_view(sync)
    view["result"] = result.status.value
    return view
