"""In-memory data model owned by the sync layer.

SurveyAnswers, ChecklistItem and Step mirror the records the UI renders.
SessionState bundles them with the session fields (token, user, saved
amount, committed timeline) and an epoch counter that identifies the
current session so late remote responses can be recognised and dropped.
"""

from dataclasses import asdict, dataclass, field, fields

from roadmap.catalog import ANSWER_FIELDS, ANSWER_OPTIONS, DEFAULT_STEPS
from roadmap.errors import ValidationFailure


@dataclass
class SurveyAnswers:
    """The five survey fields. Empty string means unanswered."""

    income: str = ""
    savings: str = ""
    location: str = ""
    timeline: str = ""
    housing: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    def answered(self) -> dict:
        """Return only the non-empty fields, in survey order."""
        return {k: v for k, v in self.to_dict().items() if v and v.strip()}

    def is_empty(self) -> bool:
        return not self.answered()


@dataclass
class ChecklistItem:
    frontend_id: str
    text: str
    completed: bool = False


@dataclass
class Step:
    id: int
    title: str
    description: str
    tips: list[str] = field(default_factory=list)
    todos: list[ChecklistItem] = field(default_factory=list)

    def find_todo(self, frontend_id: str) -> ChecklistItem | None:
        for todo in self.todos:
            if todo.frontend_id == frontend_id:
                return todo
        return None


@dataclass
class SessionState:
    """Authoritative in-memory state. The UI only ever reads a projection."""

    answers: SurveyAnswers = field(default_factory=SurveyAnswers)
    steps: list[Step] = field(default_factory=lambda: default_steps())
    saved_amount: float = 0
    committed_timeline: str = ""
    survey_completed: bool = False
    token: str | None = None
    user: dict | None = None
    epoch: int = 0

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def find_step(self, step_id: int) -> Step | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def reset_progress(self) -> None:
        """Reset answers, steps, saved amount and timeline to defaults."""
        self.answers = SurveyAnswers()
        self.steps = default_steps()
        self.saved_amount = 0
        self.committed_timeline = ""

    def reset(self) -> None:
        """Reset everything, end the session and advance the epoch."""
        self.reset_progress()
        self.survey_completed = False
        self.token = None
        self.user = None
        self.epoch += 1

    def projection(self) -> dict:
        """Return a read-only, JSON-ready view of the state."""
        return {
            "authenticated": self.authenticated,
            "user": dict(self.user) if self.user else None,
            "answers": self.answers.to_dict(),
            "steps": steps_to_list(self.steps),
            "saved_amount": self.saved_amount,
            "committed_timeline": self.committed_timeline,
            "survey_completed": self.survey_completed,
        }


def default_steps() -> list[Step]:
    """Build a fresh copy of the four default steps, all todos incomplete."""
    return [
        Step(
            id=s["id"],
            title=s["title"],
            description=s["description"],
            tips=list(s["tips"]),
            todos=[ChecklistItem(frontend_id=t["id"], text=t["text"]) for t in s["todos"]],
        )
        for s in DEFAULT_STEPS
    ]


def answers_from_dict(data: dict) -> SurveyAnswers:
    """Build SurveyAnswers from a mapping, validating keys and option values.

    Missing fields default to empty. Empty strings are always accepted.

    Raises:
        ValidationFailure: On an unknown key, a non-string value, or a value
            outside the field's option set.
    """
    if not isinstance(data, dict):
        raise ValidationFailure(f"Survey answers must be an object, got {type(data).__name__}")
    unknown = sorted(set(data) - set(ANSWER_FIELDS))
    if unknown:
        raise ValidationFailure(f"Unknown survey answer keys: {unknown}")

    values = {}
    for key in (f.name for f in fields(SurveyAnswers)):
        value = data.get(key, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValidationFailure(f"Survey answer '{key}' must be a string")
        if value and value not in ANSWER_OPTIONS[key]:
            raise ValidationFailure(f"Invalid option for '{key}': {value}")
        values[key] = value
    return SurveyAnswers(**values)


def steps_to_list(steps: list[Step]) -> list[dict]:
    """Serialize steps to the cached JSON shape (todos keyed by 'id')."""
    return [
        {
            "id": step.id,
            "title": step.title,
            "description": step.description,
            "tips": list(step.tips),
            "todos": [
                {"id": t.frontend_id, "text": t.text, "completed": t.completed}
                for t in step.todos
            ],
        }
        for step in steps
    ]


def steps_from_list(data: list[dict]) -> list[Step]:
    """Rebuild steps from the cached JSON shape.

    The caller is expected to have validated data against the cached-steps
    schema.
    """
    return [
        Step(
            id=s["id"],
            title=s["title"],
            description=s["description"],
            tips=list(s["tips"]),
            todos=[
                ChecklistItem(frontend_id=t["id"], text=t["text"], completed=t["completed"])
                for t in s["todos"]
            ],
        )
        for s in data
    ]
