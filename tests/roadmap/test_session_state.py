"""Unit tests for roadmap/session_state.py."""

import pytest

from roadmap.errors import ValidationFailure
from roadmap.session_state import (
    SessionState,
    SurveyAnswers,
    answers_from_dict,
    default_steps,
    steps_from_list,
    steps_to_list,
)


class TestDefaults:
    def test_four_steps_eighteen_todos(self):
        steps = default_steps()
        assert [s.id for s in steps] == [1, 2, 3, 4]
        assert [len(s.todos) for s in steps] == [4, 4, 5, 5]
        assert not any(t.completed for s in steps for t in s.todos)

    def test_default_steps_are_fresh_copies(self):
        a = default_steps()
        a[0].todos[0].completed = True
        assert default_steps()[0].todos[0].completed is False

    def test_new_state_is_anonymous(self):
        state = SessionState()
        assert state.authenticated is False
        assert state.answers.is_empty()
        assert state.saved_amount == 0


class TestAnswersFromDict:
    def test_valid_answers(self):
        answers = answers_from_dict({"income": "Under $50,000", "timeline": "3-6 months"})
        assert answers.income == "Under $50,000"
        assert answers.timeline == "3-6 months"
        assert answers.housing == ""

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationFailure, match="Unknown survey answer keys"):
            answers_from_dict({"income": "", "pets": "dog"})

    def test_invalid_option_rejected(self):
        with pytest.raises(ValidationFailure, match="Invalid option for 'income'"):
            answers_from_dict({"income": "a million"})

    def test_non_string_rejected(self):
        with pytest.raises(ValidationFailure, match="must be a string"):
            answers_from_dict({"income": 50000})

    def test_none_treated_as_empty(self):
        assert answers_from_dict({"savings": None}).savings == ""

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationFailure):
            answers_from_dict(["income"])

    def test_answered_skips_empty(self):
        answers = SurveyAnswers(income="$150,000+", savings="  ")
        assert answers.answered() == {"income": "$150,000+"}


class TestStepsSerialization:
    def test_round_trip_preserves_completion(self):
        steps = default_steps()
        steps[1].todos[2].completed = True
        restored = steps_from_list(steps_to_list(steps))
        assert restored == steps

    def test_todos_keyed_by_id(self):
        data = steps_to_list(default_steps())
        assert data[0]["todos"][0] == {"id": "1a", "text": "Check your credit score", "completed": False}


class TestReset:
    def test_reset_clears_session_and_bumps_epoch(self):
        state = SessionState(token="t", user={"id": 1}, saved_amount=10, committed_timeline="I'm flexible")
        state.survey_completed = True
        state.steps[0].todos[0].completed = True
        state.reset()
        assert state.authenticated is False
        assert state.user is None
        assert state.saved_amount == 0
        assert state.committed_timeline == ""
        assert state.survey_completed is False
        assert state.steps == default_steps()
        assert state.epoch == 1

    def test_reset_progress_keeps_session(self):
        state = SessionState(token="t")
        state.answers = SurveyAnswers(income="$150,000+")
        state.reset_progress()
        assert state.authenticated is True
        assert state.answers.is_empty()
        assert state.epoch == 0

    def test_projection_is_plain_data(self):
        projection = SessionState().projection()
        assert projection["authenticated"] is False
        assert projection["answers"]["income"] == ""
        assert len(projection["steps"]) == 4
