"""
API client for requesting video analyses from the summarization backend.
"""

import threading
from typing import Any, Callable, Dict, Optional

import requests

from ytsummary.config import config
from ytsummary.core.health import BackendHealthProbe
from ytsummary.core.retry import NETWORK_ERRORS, RetryScheduler, is_transient_error
from ytsummary.core.url_extractor import extract_video_id
from ytsummary.models.schemas import RawAnalysisPayload, RetryConfig
from ytsummary.utils.error_handling import (
    BackendUnavailableError,
    ExhaustedRetriesError,
    InvalidUrlError,
    UpstreamError,
)
from ytsummary.utils.logger import logging


def error_detail_from_response(response: requests.Response) -> str:
    """Pull the server-supplied error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("details") or body.get("error")
        if detail:
            return str(detail)
    return f"HTTP {response.status_code}"


class AnalysisClient:
    """Client for the backend's summarize endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        probe: Optional[BackendHealthProbe] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = config.ANALYSIS_TIMEOUT,
        model: str = config.DEFAULT_MODEL,
        wait: Optional[Callable[[float], bool]] = None,
    ):
        """
        Initialize the analysis client.

        Args:
            base_url: Base URL of the backend
            probe: Health probe (defaults to one for the same backend)
            retry_config: Backoff settings for the summarize call
            timeout: Seconds to wait for a single summarize attempt
            model: Model identifier sent with every request
            wait: Backoff wait function handed to the retry scheduler
        """
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.probe = probe or BackendHealthProbe(self.base_url)
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self.model = model
        self._wait = wait

    @property
    def summarize_url(self) -> str:
        return f"{self.base_url}/api/summarize"

    def analyze(
        self,
        url: str,
        additional_prompt: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RawAnalysisPayload:
        """
        Request an analysis of a YouTube video.

        Args:
            url: YouTube video URL
            additional_prompt: Free-text hint for the model
            cancel_event: Event that stops further retries once set

        Returns:
            The backend payload, with degraded-mode warnings attached

        Raises:
            InvalidUrlError: The URL has no video id
            BackendUnavailableError: The health probe failed
            UpstreamError: The backend answered with a failure
            ExhaustedRetriesError: Network faults outlasted the retry budget
        """
        video_ref = extract_video_id(url)
        if video_ref is None:
            raise InvalidUrlError(url)

        logging.info(f"Starting video analysis for {video_ref.video_id} via {self.base_url}")

        capability = self.probe.check_health()
        if not capability.available:
            raise BackendUnavailableError(capability.error_detail)

        warnings = []
        if not capability.transcript_ready:
            warnings.append("YouTube API is not configured on the backend; video data may be incomplete.")
        if not capability.summarization_ready:
            warnings.append("AI summarization is not configured on the backend; the analysis may be limited.")
        for warning in warnings:
            logging.warning(warning)

        body = {
            "youtube_link": video_ref.source_url,
            "model": self.model,
            "additional_prompt": config.DEFAULT_PROMPT if additional_prompt is None else additional_prompt,
        }

        scheduler = RetryScheduler(self.retry_config, cancel_event=cancel_event, wait=self._wait)
        try:
            data = scheduler.run_with_retry(lambda: self._submit(body), is_transient_error)
        except ExhaustedRetriesError as e:
            if isinstance(e.last_error, UpstreamError):
                e.last_error.attempts = e.attempts
                raise e.last_error from None
            raise

        payload = RawAnalysisPayload.from_backend(data)
        payload.warnings.extend(warnings)
        logging.info(f"Backend analysis completed with model {payload.model_used}")
        return payload

    def _submit(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Perform one summarize attempt."""
        logging.info("Calling backend for YouTube analysis...")
        try:
            response = requests.post(self.summarize_url, json=body, timeout=self.timeout)
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
        if not isinstance(data, dict):
            raise UpstreamError(response.status_code, "Malformed response from the analysis backend")
        return data
