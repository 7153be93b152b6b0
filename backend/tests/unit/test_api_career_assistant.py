"""Tests for the career assistant API.

Covers POST /api/v1/career-assistant/turn and
GET /api/v1/career-assistant/questions/{question_id}.
"""

import pytest

from career_pathway.providers.llm.base import TaskType

_TURN_URL = "/api/v1/career-assistant/turn"


def _merge(state: dict, data: dict) -> dict:
    """Apply state_updates the way the chat widget does."""
    return {**state, **data["state_updates"]}


class TestTakeTurn:
    """Tests for POST /turn."""

    @pytest.mark.asyncio
    async def test_first_turn(self, client):
        """An empty body starts the interview."""
        response = await client.post(_TURN_URL, json={})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phase"] == "CLASSIFY"
        assert data["question"]["id"] == "edu"
        assert data["done"] is False
        assert data["status"]["chips"] == ["Quick triage"]

    @pytest.mark.asyncio
    async def test_answer_advances(self, client):
        """Answering edu moves on to exp."""
        first = (await client.post(_TURN_URL, json={})).json()["data"]
        state = _merge({}, first)

        response = await client.post(
            _TURN_URL, json={"state": state, "user_input": "Yes"}
        )

        data = response.json()["data"]
        assert data["question"]["id"] == "exp"
        assert data["state_updates"]["answers"] == {"edu": "yes"}

    @pytest.mark.asyncio
    async def test_path_turn_uses_advisor_fallback(self, client, mock_llm):
        """With an empty model reply the PATH turn keeps the engine's message."""
        state: dict = {}
        for answer in ("", "no", "no"):
            body = {"state": state, "user_input": answer}
            data = (await client.post(_TURN_URL, json=body)).json()["data"]
            state = _merge(state, data)

        response = await client.post(
            _TURN_URL, json={"state": state, "user_input": "side_income"}
        )

        data = response.json()["data"]
        assert data["path"] == "PATH_1"
        assert data["question"]["id"] == "priorities"
        assert data["assistant_message"].startswith("Next: ")
        mock_llm.assert_called_with_task(TaskType.CAREER_ADVISORY)

    @pytest.mark.asyncio
    async def test_deterministic_mode_makes_no_calls(
        self, deterministic_client, mock_llm
    ):
        """With advisory disabled the model is never called."""
        state: dict = {}
        for answer in ("", "no", "no", "main_job"):
            data = (
                await deterministic_client.post(
                    _TURN_URL,
                    json={"state": state, "user_input": answer, "free_text": "I drive"},
                )
            ).json()["data"]
            state = _merge(state, data)

        assert data["question"]["id"] == "priorities"
        mock_llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_question_is_400(self, client):
        """Answering an unknown question id is a validation error."""
        response = await client.post(
            _TURN_URL,
            json={"user_input": "yes", "current_question_id": "shoe_size"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_option_is_400(self, client):
        """An answer outside the options is a validation error."""
        response = await client.post(
            _TURN_URL,
            json={"user_input": "bicycle", "current_question_id": "transport"},
        )
        error = response.json()["error"]
        assert response.status_code == 400
        assert error["details"][0]["question_id"] == "transport"

    @pytest.mark.asyncio
    async def test_path_phase_without_path_is_400(self, client):
        """A state claiming PATH without a path is rejected."""
        response = await client.post(_TURN_URL, json={"state": {"phase": "PATH"}})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unearned_result_state_is_400(self, client):
        """A RESULT state whose answers do not pass the result gate is rejected."""
        state = {
            "phase": "RESULT",
            "path": "PATH_2",
            "answers": {"edu": "no", "exp": "yes"},
        }

        response = await client.post(_TURN_URL, json={"state": state})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "state.phase"

    @pytest.mark.asyncio
    async def test_free_text_too_long_is_400(self, client):
        """Free text is capped at 2000 characters."""
        response = await client.post(_TURN_URL, json={"free_text": "x" * 2001})
        assert response.status_code == 400


class TestReadQuestion:
    """Tests for GET /questions/{question_id}."""

    @pytest.mark.asyncio
    async def test_returns_definition(self, client):
        """Known questions are returned in the data envelope."""
        response = await client.get("/api/v1/career-assistant/questions/move_away")

        assert response.status_code == 200
        question = response.json()["data"]
        assert question["type"] == "multi"
        assert question["max_select"] == 2

    @pytest.mark.asyncio
    async def test_unknown_question_is_404(self, client):
        """Unknown question ids return NOT_FOUND."""
        response = await client.get("/api/v1/career-assistant/questions/shoe_size")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
