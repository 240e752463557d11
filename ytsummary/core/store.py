"""
In-memory store for normalized analyses, keyed by context id.
"""

import threading
from collections import OrderedDict
from typing import List, Optional

from ytsummary.config import config
from ytsummary.models.schemas import NormalizedAnalysis
from ytsummary.utils.logger import logging


class ResultStore:
    """
    Bounded LRU mapping from context id to NormalizedAnalysis.

    Entries live until they are evicted, cleared or the process exits.
    All access goes through a lock so one store can back several
    Streamlit sessions.
    """

    def __init__(self, max_entries: Optional[int] = config.CACHE_MAX_ENTRIES):
        """
        Initialize the store.

        Args:
            max_entries: Maximum number of analyses kept (None for unbounded)
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, NormalizedAnalysis]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, analysis: NormalizedAnalysis) -> None:
        """Store an analysis under its context id (last writer wins)."""
        with self._lock:
            self._entries[analysis.context_id] = analysis
            self._entries.move_to_end(analysis.context_id)
            while self.max_entries is not None and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logging.info(f"Evicted analysis {evicted} from the store")
        logging.debug(f"Analysis cached for chat context: {analysis.context_id}")

    def get(self, context_id: str) -> Optional[NormalizedAnalysis]:
        """Look up an analysis, marking it as recently used."""
        with self._lock:
            analysis = self._entries.get(context_id)
            if analysis is not None:
                self._entries.move_to_end(context_id)
            return analysis

    def clear(self) -> None:
        """Drop every stored analysis."""
        with self._lock:
            self._entries.clear()
        logging.info("Analysis cache cleared")

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def context_ids(self) -> List[str]:
        """Context ids from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, context_id: object) -> bool:
        with self._lock:
            return context_id in self._entries
