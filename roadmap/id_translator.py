"""Mapping between frontend identifiers and the backend's numeric ids.

Checklist items are named by short codes ("1a".."4e") in the UI, while the
remote store keys them by numeric todo_id. Survey answers are keyed by field
name locally and by question_id remotely. Both mappings are fixed
bijections.
"""

import logging

from roadmap.errors import ValidationFailure

logger = logging.getLogger(__name__)

UNMAPPED_ID = 0

# Backend todo_id values follow the seed order of the remote todo_items table,
# not the roadmap order.
TODO_ID_MAP = {
    "1a": 3,   # Check your credit score
    "1b": 6,   # Create a savings plan
    "1c": 7,   # Pay down high-interest debt
    "1d": 8,   # Set up a dedicated home savings account
    "2a": 9,   # Research mortgage lenders
    "2b": 10,  # Gather financial documents
    "2c": 4,   # Get pre-approved for a mortgage
    "2d": 11,  # Compare loan offers
    "3a": 1,   # Find a good realtor
    "3b": 12,  # Identify your needs vs. nice-to-haves
    "3c": 13,  # Research areas you might like to live
    "3d": 14,  # Tour at least 5 homes
    "3e": 5,   # Make an offer on a home
    "4a": 15,  # Schedule home inspection
    "4b": 16,  # Review and understand closing costs
    "4c": 17,  # Set up homeowner's insurance
    "4d": 18,  # Final walk-through
    "4e": 19,  # Sign closing documents
}

QUESTION_ID_MAP = {
    "income": 1,
    "savings": 2,
    "location": 3,
    "timeline": 4,
    "housing": 5,
}

_FRONTEND_BY_BACKEND = {v: k for k, v in TODO_ID_MAP.items()}
_ANSWER_KEY_BY_QUESTION = {v: k for k, v in QUESTION_ID_MAP.items()}


def to_backend_id(frontend_id: str) -> int:
    """Return the backend todo_id for a checklist item, or UNMAPPED_ID (0)."""
    return TODO_ID_MAP.get(frontend_id, UNMAPPED_ID)


def to_frontend_id(backend_id: int) -> str | None:
    """Return the frontend code for a backend todo_id, or None if unknown."""
    return _FRONTEND_BY_BACKEND.get(backend_id)


def require_backend_id(frontend_id: str) -> int:
    """Return the backend todo_id, raising if the item has no mapping.

    Raises:
        ValidationFailure: If frontend_id is not in the mapping.
    """
    backend_id = to_backend_id(frontend_id)
    if backend_id == UNMAPPED_ID:
        raise ValidationFailure(f"No backend mapping for checklist item '{frontend_id}'")
    return backend_id


def to_question_id(answer_key: str) -> int:
    """Return the backend question_id for a survey answer field.

    Raises:
        ValidationFailure: If answer_key is not one of the survey fields.
    """
    try:
        return QUESTION_ID_MAP[answer_key]
    except KeyError:
        raise ValidationFailure(f"Unknown survey answer key: {answer_key}") from None


def to_answer_key(question_id: int) -> str | None:
    """Return the survey field for a backend question_id, or None if unknown."""
    return _ANSWER_KEY_BY_QUESTION.get(question_id)


def verify_catalog_mapping(steps) -> list[str]:
    """Return the frontend ids in steps that have no backend mapping.

    Every id returned is logged as an error; an empty list means the mapping
    is total for the given steps.
    """
    missing = [
        todo.frontend_id
        for step in steps
        for todo in step.todos
        if to_backend_id(todo.frontend_id) == UNMAPPED_ID
    ]
    for frontend_id in missing:
        logger.error("Checklist item %s has no backend todo mapping", frontend_id)
    return missing
