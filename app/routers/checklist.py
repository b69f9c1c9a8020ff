"""Checklist routes: step detail and todo toggling."""

from fastapi import APIRouter, BackgroundTasks, Request

from app.dependencies import get_sync, progress_view
from roadmap.derived_state import step_completion_percent
from roadmap.progress_machine import require_navigable, step_statuses

router = APIRouter()


@router.get("/api/steps/{step_id}")
async def get_step(request: Request, step_id: int):
    """Return one step with tips and todos. Locked steps answer 409."""
    sync = get_sync(request)
    step = require_navigable(sync.state.steps, step_id)
    return {
        "id": step.id,
        "title": step.title,
        "description": step.description,
        "tips": list(step.tips),
        "todos": [
            {"id": t.frontend_id, "text": t.text, "completed": t.completed}
            for t in step.todos
        ],
        "status": step_statuses(sync.state.steps)[step.id],
        "percent": step_completion_percent(step),
    }


@router.post("/api/steps/{step_id}/todos/{frontend_id}/toggle")
async def toggle_todo(request: Request, step_id: int, frontend_id: str,
                      background_tasks: BackgroundTasks):
    """Flip a todo and answer immediately; the remote write runs afterwards."""
    sync = get_sync(request)
    pending = sync.gateway.apply_toggle(step_id, frontend_id)
    background_tasks.add_task(sync.gateway.push_toggle, pending)
    view = progress_view(sync)
    view["todo"] = {"id": frontend_id, "step_id": step_id, "completed": pending.completed}
    return view
