"""Unit tests for roadmap/id_translator.py."""

import pytest

from roadmap.errors import ValidationFailure
from roadmap.id_translator import (
    QUESTION_ID_MAP,
    TODO_ID_MAP,
    UNMAPPED_ID,
    require_backend_id,
    to_answer_key,
    to_backend_id,
    to_frontend_id,
    to_question_id,
    verify_catalog_mapping,
)
from roadmap.session_state import ChecklistItem, Step, default_steps


class TestTodoMapping:
    def test_known_ids(self):
        assert to_backend_id("1a") == 3
        assert to_backend_id("2c") == 4
        assert to_backend_id("4e") == 19

    def test_unmapped_returns_sentinel(self):
        assert to_backend_id("9z") == UNMAPPED_ID == 0

    def test_inverse_round_trips_every_item(self):
        for frontend_id, backend_id in TODO_ID_MAP.items():
            assert to_frontend_id(backend_id) == frontend_id

    def test_mapping_is_a_bijection(self):
        assert len(TODO_ID_MAP) == 18
        assert len(set(TODO_ID_MAP.values())) == 18

    def test_unknown_backend_id(self):
        assert to_frontend_id(2) is None

    def test_require_backend_id_raises_on_unmapped(self):
        with pytest.raises(ValidationFailure, match="9z"):
            require_backend_id("9z")

    def test_require_backend_id_returns_mapping(self):
        assert require_backend_id("3a") == 1


class TestQuestionMapping:
    def test_all_fields(self):
        assert [to_question_id(k) for k in ["income", "savings", "location", "timeline", "housing"]] == [1, 2, 3, 4, 5]

    def test_inverse(self):
        for key, qid in QUESTION_ID_MAP.items():
            assert to_answer_key(qid) == key

    def test_unknown_key_raises(self):
        with pytest.raises(ValidationFailure, match="Unknown survey answer key"):
            to_question_id("pets")

    def test_unknown_question_id(self):
        assert to_answer_key(99) is None


class TestVerifyCatalogMapping:
    def test_default_steps_fully_mapped(self):
        assert verify_catalog_mapping(default_steps()) == []

    def test_reports_missing(self, caplog):
        steps = [Step(id=1, title="t", description="d", todos=[
            ChecklistItem("1a", "mapped"), ChecklistItem("zz", "unmapped"),
        ])]
        assert verify_catalog_mapping(steps) == ["zz"]
        assert "zz" in caplog.text
