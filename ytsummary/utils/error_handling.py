"""
Centralized error handling for the application.

All domain errors inherit from ``YTSummaryError`` so callers can catch the
whole family with a single ``except`` clause. Messages are written to be
shown to the user as they are.
"""

import json
from typing import Optional, Dict, Any

from ytsummary.config import config
from ytsummary.utils.logger import logging


class YTSummaryError(Exception):
    """Base exception for all client errors."""


class InvalidUrlError(YTSummaryError):
    """Raised when a link does not contain a YouTube video id."""

    def __init__(self, url: str = ""):
        self.url = url
        super().__init__("Invalid YouTube URL. Please enter a valid YouTube link.")


class BackendUnavailableError(YTSummaryError):
    """Raised when the health probe reports the backend as unreachable."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = "Backend server is not available"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UpstreamError(YTSummaryError):
    """Raised when the backend answers with a definitive failure."""

    def __init__(self, status: Optional[int], detail: Optional[str] = None):
        self.status = status
        self.detail = detail
        self.attempts = 1
        super().__init__(detail or f"HTTP {status}")


class ExhaustedRetriesError(YTSummaryError):
    """Raised when transient failures outlast the retry budget."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Request failed after {attempts} attempts: {last_error}")


class OperationCancelledError(YTSummaryError):
    """Raised when a retried operation is cancelled between attempts."""

    def __init__(self, attempts: int = 0):
        self.attempts = attempts
        super().__init__("The request was cancelled before it could complete.")


class ContextNotFoundError(YTSummaryError):
    """Raised when no cached analysis exists for a context id."""

    def __init__(self, context_id: str):
        self.context_id = context_id
        super().__init__("Video analysis not found. Please analyze a video first.")


def describe_error(error: Exception) -> str:
    """
    Build the user-facing message for a failed analysis.

    Args:
        error: The exception raised while analyzing a video

    Returns:
        Message suitable for direct display
    """
    message = str(error)
    lowered = message.lower()

    if isinstance(error, BackendUnavailableError):
        detail = "Cannot connect to analysis server. Please make sure the backend server is running"
        return f"Analysis failed: {detail} on {config.BACKEND_URL}"
    if "quota" in lowered:
        return "Analysis failed: API quota exceeded. The service has reached its daily limits. Please try again tomorrow."
    if "api key" in lowered:
        return "Analysis failed: API configuration issue. Please check your API keys in the backend server."
    if (isinstance(error, UpstreamError) and error.status == 429) or "429" in message or "rate limit" in lowered:
        return "Analysis failed: Rate limit exceeded. Please wait a moment before trying again."
    if isinstance(error, InvalidUrlError):
        return "Analysis failed: Please enter a valid YouTube URL."
    return f"Analysis failed: {message or 'Please check your internet connection and try again.'}"


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.debug(f"Diagnostic info: {json.dumps(context, default=str)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")
