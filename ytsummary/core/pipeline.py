"""
End-to-end analysis flow: request, normalize, cache, then reuse.
"""

import threading
from typing import Optional, Sequence

from ytsummary.config import config
from ytsummary.core.analysis_client import AnalysisClient
from ytsummary.core.exporter import ReportExporter
from ytsummary.core.health import BackendHealthProbe
from ytsummary.core.normalizer import ResponseNormalizer
from ytsummary.core.qa import QuestionAnswerer
from ytsummary.core.store import ResultStore
from ytsummary.core.url_extractor import extract_video_id
from ytsummary.models.schemas import ApiStatus, ChatTurn, ExportedReport, NormalizedAnalysis
from ytsummary.utils.error_handling import InvalidUrlError, log_diagnostic_info
from ytsummary.utils.logger import logging


class AnalysisPipeline:
    """Wires the analysis client, normalizer, store, answerer and exporter together."""

    def __init__(
        self,
        client: AnalysisClient,
        store: ResultStore,
        normalizer: Optional[ResponseNormalizer] = None,
        answerer: Optional[QuestionAnswerer] = None,
        exporter: Optional[ReportExporter] = None,
    ):
        self.client = client
        self.store = store
        self.normalizer = normalizer or ResponseNormalizer()
        self.answerer = answerer or QuestionAnswerer(store)
        self.exporter = exporter or ReportExporter(store)

    @classmethod
    def from_config(cls, base_url: Optional[str] = None, max_entries: Optional[int] = config.CACHE_MAX_ENTRIES):
        """Build a pipeline with default components for one backend."""
        base_url = base_url or config.BACKEND_URL
        client = AnalysisClient(base_url, probe=BackendHealthProbe(base_url))
        return cls(client, ResultStore(max_entries))

    @property
    def probe(self) -> BackendHealthProbe:
        return self.client.probe

    def analyze_video(
        self,
        url: str,
        additional_prompt: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> NormalizedAnalysis:
        """
        Analyze a video and cache the normalized result.

        Args:
            url: YouTube video URL
            additional_prompt: Free-text hint for the model
            cancel_event: Event that stops further retries once set

        Returns:
            The stored NormalizedAnalysis
        """
        video_ref = extract_video_id(url)
        if video_ref is None:
            raise InvalidUrlError(url)

        payload = self.client.analyze(video_ref.source_url, additional_prompt, cancel_event)
        analysis = self.normalizer.normalize(payload, video_ref)
        self.store.put(analysis)

        log_diagnostic_info({
            "context_id": analysis.context_id,
            "main_points": len(analysis.main_points),
            "key_takeaways": len(analysis.key_takeaways),
            "warnings": list(analysis.warnings),
        })
        return analysis

    def ask(self, context_id: str, question: str, history: Sequence[ChatTurn] = ()) -> str:
        return self.answerer.answer(context_id, question, history)

    def export_text(self, context_id: str) -> ExportedReport:
        return self.exporter.export_text(context_id)

    def get_cached(self, context_id: str) -> Optional[NormalizedAnalysis]:
        return self.store.get(context_id)

    def clear_cache(self):
        self.store.clear()

    def is_backend_available(self) -> bool:
        return self.probe.check_health().available

    def get_api_status(self) -> ApiStatus:
        """Backend availability plus local cache usage."""
        health = self.probe.check_health()
        status = ApiStatus(
            backend_available=health.available,
            backend_url=self.client.base_url,
            summarization_ready=health.summarization_ready,
            transcript_ready=health.transcript_ready,
            features=health.features,
            cached_analyses=self.store.size(),
            retry_config=self.client.retry_config,
            error_detail=health.error_detail,
        )
        logging.info(f"Backend API status: available={status.backend_available}, cached={status.cached_analyses}")
        return status
