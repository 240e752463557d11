"""
Tests for follow-up questions and chat sessions.
"""

from unittest.mock import patch

import pytest
import requests

from ytsummary.core.qa import ChatSession, QuestionAnswerer, RemoteQuestionAnswerer
from ytsummary.models.schemas import ChatRole, ChatTurn, RetryConfig
from ytsummary.utils.error_handling import ContextNotFoundError, UpstreamError
from tests.conftest import BACKEND_URL, make_response


@pytest.fixture
def answerer(store):
    return QuestionAnswerer(store)


def test_main_points_question(answerer, stored_analysis):
    answer = answerer.answer(stored_analysis.context_id, "What are the main points?")

    assert answer.startswith('Based on the analysis of "Containers 101":')
    assert "1. Isolation" in answer
    assert "4. Registries" in answer
    assert "Orchestration" not in answer


def test_summary_question(answerer, stored_analysis):
    answer = answerer.answer(stored_analysis.context_id, "Can you summarize this?")

    assert '"Containers 101" by DevCh' in answer
    assert stored_analysis.overview in answer
    assert "beginner-level" in answer
    assert "full transcript analysis" in answer


def test_takeaways_question(answerer, stored_analysis):
    answer = answerer.answer(stored_analysis.context_id, "What should I remember?")

    assert answer.startswith('Key takeaways from "Containers 101":')
    assert "1. Use containers for reproducibility." in answer
    assert "2. Pin your base images." in answer


def test_download_question(answerer, stored_analysis):
    answer = answerer.answer(stored_analysis.context_id, "How do I save this?")

    assert "download the complete analysis" in answer


def test_formatting_question(answerer, store, make_analysis):
    analysis = make_analysis(formatting_cleaned=True)
    store.put(analysis)

    answer = answerer.answer(analysis.context_id, "Why is the formatting so clean?")

    assert "automatically cleaned" in answer


def test_default_answer_mentions_reach_and_model(answerer, stored_analysis):
    answer = answerer.answer(stored_analysis.context_id, "Who made this?")

    assert '"Containers 101" (1,000 views)' in answer
    assert "generated with gemini-1.5-flash" in answer
    assert "includes full transcript analysis" in answer


def test_default_answer_without_views(answerer, store, make_analysis):
    analysis = make_analysis(view_count=None, has_transcript=False)
    store.put(analysis)

    answer = answerer.answer(analysis.context_id, "Tell me more")

    assert "(by DevCh)" in answer
    assert "is based on video metadata" in answer


def test_unknown_context(answerer):
    with pytest.raises(ContextNotFoundError) as exc_info:
        answerer.answer("ctx_missing_1", "What are the main points?")

    assert str(exc_info.value) == "Video analysis not found. Please analyze a video first."


def test_chat_session_records_turns(answerer, stored_analysis):
    session = ChatSession(stored_analysis.context_id, answerer)

    reply = session.ask("What are the main points?")
    session.ask("Summarize it")

    assert reply.role == ChatRole.ASSISTANT
    assert [turn.role for turn in session.turns] == [ChatRole.USER, ChatRole.ASSISTANT] * 2
    assert session.get_memory_messages()[0]["role"] == "user"

    session.reset()
    assert session.turns == []


def test_chat_session_error_turn(answerer):
    session = ChatSession("ctx_missing_1", answerer)

    reply = session.ask("What are the main points?")

    assert reply.role == ChatRole.ERROR
    assert reply.content.startswith("Sorry, I couldn't process your question:")
    assert len(session.turns) == 2


class TestRemoteQuestionAnswerer:
    """Questions forwarded to the backend."""

    @pytest.fixture
    def mock_post(self):
        with patch("ytsummary.core.qa.requests.post") as mock:
            yield mock

    @pytest.fixture
    def waits(self):
        return []

    @pytest.fixture
    def remote(self, store, waits):
        return RemoteQuestionAnswerer(store, BACKEND_URL, retry_config=RetryConfig(max_retries=2), wait=waits.append)

    def test_forwards_question_and_history(self, remote, stored_analysis, mock_post):
        mock_post.return_value = make_response(200, {"answer": "It covers containers."})
        history = [ChatTurn(role=ChatRole.USER, content="Hi")]

        answer = remote.answer(stored_analysis.context_id, "What is it about?", history)

        assert answer == "It covers containers."
        url = mock_post.call_args.args[0]
        body = mock_post.call_args.kwargs["json"]
        assert url == f"{BACKEND_URL}/api/ask-question"
        assert body["context_id"] == stored_analysis.context_id
        assert body["question"] == "What is it about?"
        assert body["chat_history"][0]["content"] == "Hi"
        assert body["context"]["title"] == "Containers 101"
        assert body["context"]["main_points"][0] == "Isolation"

    def test_retries_overloaded_backend(self, remote, stored_analysis, mock_post, waits):
        mock_post.side_effect = [
            make_response(503, {"error": "Model overloaded"}),
            make_response(200, {"answer": "Done"}),
        ]

        assert remote.answer(stored_analysis.context_id, "Anything?") == "Done"
        assert waits == [2.0]

    def test_missing_answer(self, remote, stored_analysis, mock_post):
        mock_post.return_value = make_response(200, {"status": "ok"})

        with pytest.raises(UpstreamError):
            remote.answer(stored_analysis.context_id, "Anything?")

        assert mock_post.call_count == 1

    def test_unknown_context_is_not_sent(self, remote, mock_post):
        with pytest.raises(ContextNotFoundError):
            remote.answer("ctx_missing_1", "Anything?")

        mock_post.assert_not_called()

    def test_request_error_becomes_error_turn(self, remote, stored_analysis, mock_post):
        mock_post.side_effect = requests.TooManyRedirects("Exceeded 30 redirects.")
        session = ChatSession(stored_analysis.context_id, remote)

        reply = session.ask("Anything?")

        assert reply.role == ChatRole.ERROR
        assert "Exceeded 30 redirects." in reply.content
        assert mock_post.call_count == 1
