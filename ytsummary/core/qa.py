"""
Follow-up questions about an analyzed video.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from ytsummary.config import config
from ytsummary.core.analysis_client import error_detail_from_response
from ytsummary.core.retry import NETWORK_ERRORS, RetryScheduler, is_transient_error
from ytsummary.core.store import ResultStore
from ytsummary.models.schemas import ChatRole, ChatTurn, NormalizedAnalysis, RetryConfig
from ytsummary.utils.error_handling import ContextNotFoundError, UpstreamError, YTSummaryError
from ytsummary.utils.helpers import format_count
from ytsummary.utils.logger import logging


def _numbered(items: Sequence[str], separator: str = "\n\n") -> str:
    return separator.join(f"{i}. {item}" for i, item in enumerate(items, 1))


def _transcript_note(analysis: NormalizedAnalysis) -> str:
    return "full transcript analysis" if analysis.has_transcript else "metadata-based analysis"


class QuestionAnswerer:
    """
    Answers questions from a cached analysis by keyword matching.

    Subclasses replace ``compose_answer`` to forward the question to a
    language model instead; ``history`` is threaded through for them.
    """

    def __init__(self, store: ResultStore):
        self.store = store

    def answer(self, context_id: str, question: str, history: Sequence[ChatTurn] = ()) -> str:
        """
        Answer a question about a previously analyzed video.

        Args:
            context_id: Context id of the cached analysis
            question: The user's question
            history: Earlier turns of the conversation

        Returns:
            Answer text

        Raises:
            ContextNotFoundError: No analysis is cached under context_id
        """
        analysis = self.store.get(context_id)
        if analysis is None:
            raise ContextNotFoundError(context_id)

        logging.info(f"Processing question for {context_id}: {question}")
        return self.compose_answer(analysis, question, history)

    def compose_answer(self, analysis: NormalizedAnalysis, question: str, history: Sequence[ChatTurn]) -> str:
        q = question.lower()

        if "main" in q and "point" in q:
            return f'Based on the analysis of "{analysis.title}":\n\n' + _numbered(analysis.main_points[:4])

        if "summary" in q or "summarize" in q:
            return (
                f'Here\'s what the video "{analysis.title}" by {analysis.channel} covers:\n\n{analysis.overview}\n\n'
                f"This {analysis.difficulty_level.value}-level content has {_transcript_note(analysis)}."
            )

        if "takeaway" in q or "remember" in q:
            return f'Key takeaways from "{analysis.title}":\n\n' + _numbered(analysis.key_takeaways)

        if "download" in q or "save" in q:
            return (
                "You can download the complete analysis as a text file. The file will include:\n\n"
                "• Complete video analysis\n"
                "• Video metadata (title, channel, views, etc.)\n"
                "• All key points and takeaways\n"
                "• Analysis quality information\n"
                "• Timestamp of analysis"
            )

        if "formatting" in q or "clean" in q:
            note = (
                "Formatting has been automatically cleaned by the backend."
                if analysis.formatting_cleaned
                else "This analysis uses the standard formatting approach."
            )
            return (
                f'The analysis for "{analysis.title}" is shown without asterisks or markdown, '
                f"structured into clear sections of readable text. {note}"
            )

        reach = f"{format_count(analysis.view_count)} views" if analysis.view_count else f"by {analysis.channel}"
        source = "includes full transcript analysis" if analysis.has_transcript else "is based on video metadata"
        return (
            f'Regarding "{analysis.title}" ({reach}):\n\n{analysis.overview}\n\n'
            f"This analysis was generated with {analysis.model_used} and {source}."
        )


class RemoteQuestionAnswerer(QuestionAnswerer):
    """Forwards questions, chat history and the cached analysis to the backend."""

    def __init__(
        self,
        store: ResultStore,
        base_url: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = config.ANALYSIS_TIMEOUT,
        cancel_event: Optional[threading.Event] = None,
        wait: Optional[Callable[[float], bool]] = None,
    ):
        super().__init__(store)
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self.cancel_event = cancel_event
        self._wait = wait

    @property
    def ask_url(self) -> str:
        return f"{self.base_url}/api/ask-question"

    def compose_answer(self, analysis: NormalizedAnalysis, question: str, history: Sequence[ChatTurn]) -> str:
        body = {
            "context_id": analysis.context_id,
            "question": question,
            "chat_history": [turn.model_dump(mode="json") for turn in history],
            "context": analysis.model_dump(
                mode="json",
                include={"video_id", "title", "channel", "overview", "main_points", "key_takeaways", "target_audience"},
            ),
        }
        scheduler = RetryScheduler(self.retry_config, cancel_event=self.cancel_event, wait=self._wait)
        data = scheduler.run_with_retry(lambda: self._post(body), is_transient_error)
        return str(data["answer"])

    def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = requests.post(self.ask_url, json=body, timeout=self.timeout)
        except NETWORK_ERRORS:
            raise
        except requests.RequestException as e:
            raise UpstreamError(None, str(e)) from e
        if not response.ok:
            raise UpstreamError(response.status_code, error_detail_from_response(response))
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("answer"):
            raise UpstreamError(response.status_code, "The backend returned no answer")
        return data


class ChatSession:
    """Conversation about one analyzed video."""

    def __init__(self, context_id: str, answerer: QuestionAnswerer):
        """Initialize a chat session for a cached analysis."""
        self.context_id = context_id
        self.answerer = answerer
        self.turns: List[ChatTurn] = []

    def ask(self, question: str) -> ChatTurn:
        """
        Ask a question and record both sides of the exchange.

        Failures are recorded as an error turn instead of being raised.

        Returns:
            The assistant or error turn that was appended
        """
        history = list(self.turns)
        self.turns.append(ChatTurn(role=ChatRole.USER, content=question))

        try:
            reply = ChatTurn(role=ChatRole.ASSISTANT, content=self.answerer.answer(self.context_id, question, history))
        except YTSummaryError as e:
            logging.error(f"Question processing failed: {e}")
            reply = ChatTurn(role=ChatRole.ERROR, content=f"Sorry, I couldn't process your question: {e}")

        self.turns.append(reply)
        return reply

    def reset(self):
        """Forget the conversation."""
        self.turns = []

    def get_memory_messages(self) -> List[Dict[str, Any]]:
        """Get the turns in serializable format."""
        return [turn.model_dump(mode="json") for turn in self.turns]
