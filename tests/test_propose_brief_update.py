"""Tests for the brief refinement collaborator chain (mocked OpenAI)."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError, BadRequestError

from brief_engine.chains.propose_brief_update import (
    generate_opening_question,
    parse_proposal,
    propose_brief_update,
)
from brief_engine.core.errors import NetworkError, ParseError, ValidationError
from brief_engine.core.schemas_refinement import BriefUpdateRequest, ConversationMessage

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _mock_client(*results):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(results))
    return client


def _request(**overrides):
    data = {
        "document": {"title": "AB"},
        "transcript": [ConversationMessage(role="assistant", content="Who is it for?", kind="question")],
        "answer": "Young professionals",
    }
    data.update(overrides)
    return BriefUpdateRequest(**data)


VALID = json.dumps({"nextQuestion": "What is your budget?", "updatedDocument": {"title": "AB"}})


# =============================================================================
# Response parsing
# =============================================================================


class TestParseProposal:
    def test_valid(self):
        proposal = parse_proposal(VALID)
        assert proposal.next_question == "What is your budget?"
        assert proposal.updated_document == {"title": "AB"}

    def test_fenced_json(self):
        proposal = parse_proposal(f"```json\n{VALID}\n```")
        assert proposal.updated_document == {"title": "AB"}

    def test_null_question(self):
        raw = json.dumps({"nextQuestion": None, "updatedDocument": {}})
        assert parse_proposal(raw).next_question is None

    def test_blank_question_means_done(self):
        raw = json.dumps({"nextQuestion": "   ", "updatedDocument": {}})
        assert parse_proposal(raw).next_question is None

    def test_question_is_stripped(self):
        raw = json.dumps({"nextQuestion": "  What is your budget?\n", "updatedDocument": {}})
        assert parse_proposal(raw).next_question == "What is your budget?"

    def test_not_json(self):
        with pytest.raises(ParseError):
            parse_proposal("Sure! Here is your brief")

    def test_json_array_is_parse_error(self):
        with pytest.raises(ParseError):
            parse_proposal("[1, 2, 3]")

    @pytest.mark.parametrize(
        "payload",
        [
            {"nextQuestion": "Q?", "updatedDocument": {}, "notes": "extra"},
            {"nextQuestion": "Q?"},
            {"nextQuestion": 5, "updatedDocument": {}},
            {"nextQuestion": "Q?", "updatedDocument": ["not", "a", "record"]},
        ],
    )
    def test_wrong_shape(self, payload):
        with pytest.raises(ValidationError):
            parse_proposal(json.dumps(payload))


# =============================================================================
# Collaborator calls
# =============================================================================


class TestProposeBriefUpdate:
    @pytest.mark.asyncio
    async def test_success(self):
        client = _mock_client(_completion(VALID))

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            proposal = await propose_brief_update(_request(source_transcript="call notes"))

        assert proposal.next_question == "What is your budget?"
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["model"] == "gpt-4o-mini"
        user_prompt = kwargs["messages"][1]["content"]
        assert "Young professionals" in user_prompt
        assert "targetAudience" in user_prompt
        assert "call notes" in user_prompt

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        client = _mock_client(APIConnectionError(request=_REQUEST), _completion(VALID))

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            proposal = await propose_brief_update(_request())

        assert proposal.updated_document == {"title": "AB"}
        assert client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_network_error_after_retries(self):
        client = _mock_client(*[APIConnectionError(request=_REQUEST)] * 3)

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            with pytest.raises(NetworkError):
                await propose_brief_update(_request())

        assert client.chat.completions.create.await_count == 3

    @pytest.mark.asyncio
    async def test_rejected_request_not_retried(self):
        error = BadRequestError(
            "bad request", response=httpx.Response(400, request=_REQUEST), body=None
        )
        client = _mock_client(error)

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            with pytest.raises(NetworkError):
                await propose_brief_update(_request())

        assert client.chat.completions.create.await_count == 1

    @pytest.mark.asyncio
    async def test_empty_content_is_parse_error(self):
        client = _mock_client(_completion(None))

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            with pytest.raises(ParseError):
                await propose_brief_update(_request())


class TestGenerateOpeningQuestion:
    @pytest.mark.asyncio
    async def test_success(self):
        client = _mock_client(_completion('{"question": "  Who is the campaign for?  "}'))

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            question = await generate_opening_question({"title": "AB"})

        assert question == "Who is the campaign for?"

    @pytest.mark.asyncio
    async def test_missing_question(self):
        client = _mock_client(_completion('{"question": ""}'))

        with patch("brief_engine.core.llm.get_async_client", return_value=client):
            with pytest.raises(ValidationError):
                await generate_opening_question({}, "transcript")
