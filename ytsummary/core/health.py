"""
Health probe for the summarization backend.
"""

from typing import Optional

import requests

from ytsummary.config import config
from ytsummary.models.schemas import BackendCapability
from ytsummary.utils.logger import logging


class BackendHealthProbe:
    """Asks the backend which of its features are ready."""

    def __init__(self, base_url: Optional[str] = None, timeout: float = config.HEALTH_TIMEOUT):
        """
        Initialize the probe.

        Args:
            base_url: Base URL of the backend
            timeout: Seconds to wait for the health endpoint
        """
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.timeout = timeout

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/api/health"

    def check_health(self) -> BackendCapability:
        """
        Query the health endpoint.

        Failures are reported in the returned capability, never raised.

        Returns:
            BackendCapability describing availability and feature flags
        """
        try:
            response = requests.get(self.health_url, timeout=self.timeout)
            if not response.ok:
                raise requests.HTTPError(f"Backend health check failed: {response.status_code}", response=response)
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("Backend health check returned an unexpected body")
        except (requests.RequestException, ValueError) as e:
            logging.error(f"Backend health check failed: {e}")
            return BackendCapability(available=False, error_detail=str(e))

        features = data.get("features") or []
        capability = BackendCapability(
            available=True,
            summarization_ready=bool(data.get("geminiApiKeyExists")),
            transcript_ready=bool(data.get("youtubeApiKeyExists")),
            features=[str(feature) for feature in features] if isinstance(features, list) else [],
            message=str(data["message"]) if data.get("message") is not None else None,
        )
        logging.info(f"Backend health check: {capability.model_dump()}")
        return capability
