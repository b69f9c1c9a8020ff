"""Schema validation for remote payloads and cached state.

Every response from the remote store is checked against its JSON Schema
before any field is read, and the cached step tree is checked before it is
trusted. Failures are raised as ValidationFailure.
"""

import json
from functools import lru_cache
from pathlib import Path

from jsonschema import Draft202012Validator

from config.settings import (
    AUTH_RESPONSE_SCHEMA,
    CACHED_STEPS_SCHEMA,
    SURVEY_RESPONSES_SCHEMA,
    TODO_RECORD_SCHEMA,
    USER_TODOS_SCHEMA,
)
from roadmap.errors import ValidationFailure


@lru_cache(maxsize=None)
def load_schema(schema_path: str | Path) -> dict:
    """Load a JSON Schema file.

    Args:
        schema_path: Path to the schema file.

    Returns:
        The schema dictionary.

    Raises:
        FileNotFoundError: If the schema file does not exist.
    """
    path = Path(schema_path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_validation_errors(data, schema_path: str | Path) -> list[str]:
    """Return all validation errors for a payload.

    Args:
        data: The decoded JSON payload.
        schema_path: Path to the JSON Schema file.

    Returns:
        List of human-readable error messages. Empty if valid.
    """
    validator = Draft202012Validator(load_schema(schema_path))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    return [
        f"{'.'.join(str(p) for p in error.absolute_path) or 'root'}: {error.message}"
        for error in errors
    ]


def validate_payload(data, schema_path: str | Path, what: str):
    """Validate a payload and return it unchanged.

    Raises:
        ValidationFailure: If the payload does not match the schema.
    """
    errors = get_validation_errors(data, schema_path)
    if errors:
        raise ValidationFailure(f"Malformed {what}: {'; '.join(errors[:3])}")
    return data


def validate_survey_responses(data) -> list[dict]:
    return validate_payload(data, SURVEY_RESPONSES_SCHEMA, "survey responses")


def validate_user_todos(data) -> list[dict]:
    return validate_payload(data, USER_TODOS_SCHEMA, "user todos")


def validate_todo_record(data) -> dict:
    return validate_payload(data, TODO_RECORD_SCHEMA, "todo record")


def validate_auth_response(data) -> dict:
    return validate_payload(data, AUTH_RESPONSE_SCHEMA, "auth response")


def validate_cached_steps(data) -> list[dict]:
    return validate_payload(data, CACHED_STEPS_SCHEMA, "cached steps")
