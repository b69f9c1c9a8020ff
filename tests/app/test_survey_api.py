"""Tests for the survey endpoints."""

from roadmap.errors import NetworkFailure
from roadmap.local_cache import ANSWERS_KEY


class TestQuestions:
    def test_five_questions(self, client):
        questions = client.get("/api/survey/questions").json()["questions"]
        assert [q["key"] for q in questions] == ["income", "savings", "location", "timeline", "housing"]


class TestSubmitAnswers:
    """Test PUT /api/survey/answers."""

    def test_anonymous_submit_is_local(self, client, fake_remote, cache):
        response = client.put(
            "/api/survey/answers",
            json={"income": "$50,000 - $100,000", "timeline": "3-6 months"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"] == "local_only"
        assert data["snapshot"]["savings_goal"] == 80000
        assert data["snapshot"]["buyer_archetype"] == "Searcher"
        assert fake_remote.calls == []
        assert cache.load_json(ANSWERS_KEY)["timeline"] == "3-6 months"

    def test_logged_in_submit_reaches_remote(self, logged_in, fake_remote):
        response = logged_in.put("/api/survey/answers", json={"income": "Under $50,000"})
        assert response.status_code == 200
        assert response.json()["result"] == "settled"
        assert fake_remote.responses == {1: "Under $50,000"}

    def test_remote_failure_returns_502_and_keeps_answers(self, logged_in, fake_remote, cache):
        fake_remote.fail_with["submit_survey_responses_batch"] = NetworkFailure("down")
        response = logged_in.put("/api/survey/answers", json={"housing": "Renting"})
        assert response.status_code == 502
        assert response.json()["retry"] is True
        assert cache.load_json(ANSWERS_KEY)["housing"] == "Renting"

    def test_unknown_key_returns_422(self, client):
        response = client.put("/api/survey/answers", json={"pets": "cat"})
        assert response.status_code == 422

    def test_invalid_option_returns_422(self, client):
        response = client.put("/api/survey/answers", json={"income": "a lot"})
        assert response.status_code == 422
        assert "Invalid option" in response.json()["error"]
