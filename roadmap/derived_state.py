"""Derived view-level aggregates computed from the session state.

Pure functions, no I/O. Everything here is recomputed on every read; the
snapshot is never persisted.
"""

from dataclasses import asdict, dataclass

ARCHETYPE_EXPLORER = "Explorer"
ARCHETYPE_READY_BUYER = "Ready Buyer"
ARCHETYPE_SEARCHER = "Searcher"
ARCHETYPE_PLANNER = "Planner"

ARCHETYPE_BY_TIMELINE = {
    "Within the next 3 months": ARCHETYPE_READY_BUYER,
    "3-6 months": ARCHETYPE_SEARCHER,
    "6-12 months": ARCHETYPE_PLANNER,
}

SAVINGS_GOAL_BY_INCOME = {
    "Under $50,000": 50000,
    "$50,000 - $100,000": 80000,
    "$100,000 - $150,000": 100000,
}
DEFAULT_SAVINGS_GOAL = 120000


@dataclass(frozen=True)
class ProgressSnapshot:
    buyer_archetype: str
    savings_goal: int
    completion_percent: int
    active_step_id: int

    def to_dict(self) -> dict:
        return asdict(self)


def buyer_archetype(answers) -> str:
    """Classify the buyer from the timeline answer alone."""
    return ARCHETYPE_BY_TIMELINE.get(answers.timeline, ARCHETYPE_EXPLORER)


def savings_goal(income: str) -> int:
    """Map an income bucket to a down-payment savings goal."""
    return SAVINGS_GOAL_BY_INCOME.get(income, DEFAULT_SAVINGS_GOAL)


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; percentages round .5 up
    return int(value + 0.5)


def completion_percent(steps) -> int:
    """Percentage of completed todos across all steps, 0 when there are none."""
    todos = [todo for step in steps for todo in step.todos]
    if not todos:
        return 0
    done = sum(1 for todo in todos if todo.completed)
    return _round_half_up(100 * done / len(todos))


def step_completion_percent(step) -> int:
    if not step.todos:
        return 0
    done = sum(1 for todo in step.todos if todo.completed)
    return _round_half_up(100 * done / len(step.todos))


def active_step_id(steps) -> int:
    """Id of the first step with an incomplete todo.

    When every step is complete the last step stays active; use
    is_roadmap_complete() to detect that terminal state. Returns 0 for an
    empty step list.
    """
    if not steps:
        return 0
    for step in steps:
        if any(not todo.completed for todo in step.todos):
            return step.id
    return steps[-1].id


def is_roadmap_complete(steps) -> bool:
    return all(todo.completed for step in steps for todo in step.todos)


def snapshot(state) -> ProgressSnapshot:
    """Compute the full progress snapshot for a SessionState."""
    return ProgressSnapshot(
        buyer_archetype=buyer_archetype(state.answers),
        savings_goal=savings_goal(state.answers.income),
        completion_percent=completion_percent(state.steps),
        active_step_id=active_step_id(state.steps),
    )
