"""
Configuration for pytest tests.
"""

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BACKEND_URL", "http://backend.test")

from ytsummary.core.store import ResultStore
from ytsummary.models.schemas import (
    BackendCapability,
    DifficultyLevel,
    NormalizedAnalysis,
    VideoReference,
)

BACKEND_URL = "http://backend.test"

CONTAINERS_SUMMARY = (
    "🎬 Video Overview\nThis video explains containers.\n"
    "🔑 Key Points\n- Isolation\n- Portability\n"
    "💡 Insights\nUse containers for reproducibility."
)


def make_response(status_code=200, json_data=None, json_error=False):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture(scope="session")
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://youtu.be/V3TUEeB0kW0?si=-InVol0JhtWji-6R"


@pytest.fixture
def video_ref():
    return VideoReference(video_id="abc12345678", source_url="https://www.youtube.com/watch?v=abc12345678")


@pytest.fixture
def containers_payload():
    """Raw backend payload without structured sections."""
    return {
        "summary": CONTAINERS_SUMMARY,
        "video_metadata": {
            "title": "Containers 101",
            "channel": "DevCh",
            "duration": "10:00",
            "published": "2024-01-01",
            "views": 1000,
        },
        "model_used": "gemini-1.5-flash",
        "analysis_quality": {"content_richness": "high", "has_transcript": True, "formatting_cleaned": True},
    }


@pytest.fixture
def ready_capability():
    return BackendCapability(
        available=True,
        summarization_ready=True,
        transcript_ready=True,
        features=["Real YouTube data", "AI analysis"],
        message="ok",
    )


@pytest.fixture
def make_analysis():
    """Factory for NormalizedAnalysis objects."""
    def factory(**overrides):
        fields = dict(
            context_id="ctx_abc12345678_1700000000000",
            video_id="abc12345678",
            title="Containers 101",
            channel="DevCh",
            duration="10:00",
            thumbnail_url="https://img.youtube.com/vi/abc12345678/maxresdefault.jpg",
            published_at="2024-01-01",
            view_count=1000,
            source_url="https://www.youtube.com/watch?v=abc12345678",
            overview="This video explains containers.",
            main_points=("Isolation", "Portability", "Layered images", "Registries", "Orchestration"),
            key_takeaways=("Use containers for reproducibility.", "Pin your base images."),
            topics_covered=("tutorial",),
            difficulty_level=DifficultyLevel.BEGINNER,
            target_audience="Developers new to Docker",
            has_transcript=True,
            model_used="gemini-1.5-flash",
            content_richness="high",
            raw_analysis_text="**Containers** are   great.\n\n\n\nUse *them*.",
            created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return NormalizedAnalysis(**fields)
    return factory


@pytest.fixture
def store():
    return ResultStore(max_entries=100)


@pytest.fixture
def stored_analysis(store, make_analysis):
    analysis = make_analysis()
    store.put(analysis)
    return analysis
