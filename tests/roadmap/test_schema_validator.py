"""Unit tests for roadmap/schema_validator.py."""

import pytest

from roadmap.errors import ValidationFailure
from roadmap.schema_validator import (
    validate_auth_response,
    validate_cached_steps,
    validate_survey_responses,
    validate_todo_record,
    validate_user_todos,
)
from roadmap.session_state import default_steps, steps_to_list


class TestSurveyResponses:
    def test_valid(self):
        data = [{"questionId": 1, "response": "Under $50,000", "questionText": "Income?"}]
        assert validate_survey_responses(data) is data

    def test_missing_field(self):
        with pytest.raises(ValidationFailure, match="survey responses"):
            validate_survey_responses([{"questionId": 1}])

    def test_wrong_type(self):
        with pytest.raises(ValidationFailure):
            validate_survey_responses([{"questionId": "1", "response": "x"}])

    def test_not_a_list(self):
        with pytest.raises(ValidationFailure):
            validate_survey_responses({"questionId": 1, "response": "x"})


class TestTodos:
    def test_user_todos_valid(self):
        validate_user_todos([{"todoId": 3, "stepId": 1, "status": "Completed"}])

    def test_user_todos_missing_status(self):
        with pytest.raises(ValidationFailure, match="user todos"):
            validate_user_todos([{"todoId": 3}])

    def test_todo_record(self):
        validate_todo_record({"message": "ok", "todo": {"todoId": 3, "status": "Pending"}})

    def test_todo_record_without_todo(self):
        with pytest.raises(ValidationFailure):
            validate_todo_record({"message": "ok"})


class TestAuthResponse:
    def test_valid(self):
        validate_auth_response({
            "token": "abc",
            "user": {"id": 1, "email": "a@b.c", "username": "a", "archetype": None},
        })

    def test_empty_token(self):
        with pytest.raises(ValidationFailure):
            validate_auth_response({"token": "", "user": {"id": 1, "email": "a", "username": "a"}})


class TestCachedSteps:
    def test_serialized_defaults_are_valid(self):
        validate_cached_steps(steps_to_list(default_steps()))

    def test_todo_missing_completed(self):
        data = steps_to_list(default_steps())
        del data[0]["todos"][0]["completed"]
        with pytest.raises(ValidationFailure, match="cached steps"):
            validate_cached_steps(data)
