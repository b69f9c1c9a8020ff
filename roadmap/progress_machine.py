"""Roadmap step statuses and the step-unlock policy.

No per-step state is stored: every status is derived from the todos and the
active step pointer each time it is asked for.
"""

from roadmap.derived_state import active_step_id, step_completion_percent
from roadmap.errors import StepLocked

STATUS_COMPLETE = "complete"
STATUS_ACTIVE = "active"
STATUS_LOCKED = "locked"

NAVIGABLE_STATUSES = {STATUS_COMPLETE, STATUS_ACTIVE}


def step_status(step, current_step_id: int) -> str:
    """Return 'complete', 'active' or 'locked' for one step."""
    if all(todo.completed for todo in step.todos):
        return STATUS_COMPLETE
    if step.id <= current_step_id:
        return STATUS_ACTIVE
    return STATUS_LOCKED


def step_statuses(steps) -> dict[int, str]:
    current = active_step_id(steps)
    return {step.id: step_status(step, current) for step in steps}


def roadmap(steps) -> list[dict]:
    """Return the roadmap view: one entry per step, in order.

    Each entry carries the step id and title, its status, whether it can be
    opened, and its own completion percentage.
    """
    current = active_step_id(steps)
    entries = []
    for step in steps:
        status = step_status(step, current)
        entries.append({
            "id": step.id,
            "title": step.title,
            "status": status,
            "navigable": status in NAVIGABLE_STATUSES,
            "completed_count": sum(1 for t in step.todos if t.completed),
            "total_count": len(step.todos),
            "percent": step_completion_percent(step),
        })
    return entries


def _find(steps, step_id: int):
    for step in steps:
        if step.id == step_id:
            return step
    return None


def can_navigate(steps, step_id: int) -> bool:
    """True if step_id exists and is active or complete."""
    step = _find(steps, step_id)
    if step is None:
        return False
    return step_status(step, active_step_id(steps)) in NAVIGABLE_STATUSES


def require_navigable(steps, step_id: int):
    """Return the step if it may be opened.

    Raises:
        LookupError: If no step has this id.
        StepLocked: If the step is locked.
    """
    step = _find(steps, step_id)
    if step is None:
        raise LookupError(f"Step {step_id} not found")
    if step_status(step, active_step_id(steps)) not in NAVIGABLE_STATUSES:
        raise StepLocked(step_id)
    return step
