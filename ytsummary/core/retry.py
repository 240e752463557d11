"""
Exponential backoff for backend calls that may fail transiently.
"""

import threading
from typing import Callable, List, Optional, TypeVar

import requests
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_when_event_set,
)

from ytsummary.models.schemas import RetryConfig
from ytsummary.utils.error_handling import (
    ExhaustedRetriesError,
    OperationCancelledError,
    UpstreamError,
)
from ytsummary.utils.logger import logging

T = TypeVar("T")

TRANSIENT_STATUS_CODES = {429, 502, 503, 504}
TRANSIENT_MARKERS = (
    "overloaded",
    "rate limit",
    "temporarily unavailable",
    "timeout",
    "timed out",
    "network",
    "429",
    "503",
)

# Transport faults where the connection broke mid-flight
NETWORK_ERRORS = (
    requests.Timeout,
    requests.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


def is_transient_error(error: BaseException) -> bool:
    """
    Decide whether a failed call is worth repeating.

    Rate limiting, overload, timeouts and network faults are transient;
    everything else is treated as a definitive failure.
    """
    if isinstance(error, NETWORK_ERRORS):
        return True
    if isinstance(error, UpstreamError) and error.status in TRANSIENT_STATUS_CODES:
        return True
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def backoff_delay(attempt: int, retry_config: RetryConfig) -> float:
    """Delay in seconds before the retry that follows failed attempt ``attempt`` (0-based)."""
    delay = retry_config.base_delay * (retry_config.backoff_multiplier ** attempt)
    return min(retry_config.max_delay, delay)


def backoff_delays(retry_config: RetryConfig) -> List[float]:
    """The full deterministic delay schedule for a retry budget."""
    return [backoff_delay(attempt, retry_config) for attempt in range(retry_config.max_retries)]


class RetryScheduler:
    """Runs an operation in a tenacity retry loop with exponential backoff."""

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        cancel_event: Optional[threading.Event] = None,
        wait: Optional[Callable[[float], bool]] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            retry_config: Backoff settings (defaults from configuration)
            cancel_event: Event that stops further attempts once set
            wait: Function sleeping for the given seconds; the default
                returns early when the cancel event is set
        """
        self.retry_config = retry_config or RetryConfig()
        self.cancel_event = cancel_event or threading.Event()
        self._wait = wait or self.cancel_event.wait

    def cancel(self):
        """Stop issuing attempts; a pending backoff wait returns immediately."""
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def _backoff(self, retry_state: RetryCallState) -> float:
        return backoff_delay(retry_state.attempt_number - 1, self.retry_config)

    def _sleep(self, seconds: float):
        self._wait(seconds)

    def _log_retry(self, retry_state: RetryCallState):
        max_attempts = self.retry_config.max_retries + 1
        logging.warning(
            f"Attempt {retry_state.attempt_number}/{max_attempts} failed: {retry_state.outcome.exception()}"
        )
        logging.info(
            f"Retrying in {retry_state.next_action.sleep:g} seconds "
            f"(attempt {retry_state.attempt_number + 1}/{max_attempts})"
        )

    def run_with_retry(
        self,
        operation: Callable[[], T],
        classify: Callable[[BaseException], bool] = is_transient_error,
    ) -> T:
        """
        Run ``operation`` until it succeeds, fails definitively or the budget runs out.

        Args:
            operation: Zero-argument callable performing one attempt
            classify: Returns True for errors that should be retried

        Returns:
            The operation's result

        Raises:
            ExhaustedRetriesError: Transient failures outlasted the budget
            OperationCancelledError: Cancelled before or between attempts
        """
        retrying = Retrying(
            retry=retry_if_exception(classify),
            stop=stop_after_attempt(self.retry_config.max_retries + 1) | stop_when_event_set(self.cancel_event),
            wait=self._backoff,
            sleep=self._sleep,
            before_sleep=self._log_retry,
        )

        try:
            for attempt in retrying:
                if self.cancelled:
                    raise OperationCancelledError(attempts=attempt.retry_state.attempt_number - 1)
                with attempt:
                    return operation()
        except RetryError as e:
            error = e.last_attempt.exception()
            attempts = e.last_attempt.attempt_number
            if self.cancelled:
                raise OperationCancelledError(attempts=attempts) from error
            logging.warning(f"Attempt {attempts}/{attempts} failed: {error}")
            raise ExhaustedRetriesError(attempts=attempts, last_error=error) from error
