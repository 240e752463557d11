"""
Module for turning backend analysis payloads into the display model.

Structured sections are preferred when the backend sends them; otherwise
the free-text summary is segmented on the section glyphs the backend puts
in front of its headings.
"""

import re
import threading
from datetime import datetime, timezone
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple, Union

from ytsummary.models.schemas import (
    DifficultyLevel,
    NormalizedAnalysis,
    RawAnalysisPayload,
    TranscriptHighlight,
    VideoReference,
)
from ytsummary.utils.helpers import format_timestamp, strip_emphasis
from ytsummary.utils.logger import logging

SECTION_GLYPHS = "🎬🎯🔑💡👥📚⭐📋"
_GLYPH_CLASS = f"[{SECTION_GLYPHS}\ufe0f]"
_SECTION_SPLIT = re.compile(f"(?=[{SECTION_GLYPHS}])")
_GLYPHS = re.compile(_GLYPH_CLASS)
_BULLET = re.compile(r"^(?:[-*•▪●]|\d+[.)])\s+")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

OVERVIEW_SECTION = ("🎬📋", ("Video Overview", "Overview", "Summary"))
KEY_POINT_SECTION = ("🔑", ("Key Points", "Takeaways"))
INSIGHT_SECTION = ("💡", ("Insights", "Lessons"))
AUDIENCE_SECTION = ("👥", ("Target Audience", "Audience"))

MAX_MAIN_POINTS = 6
MAX_TAKEAWAYS = 4
MIN_OVERVIEW_LENGTH = 30

DEFAULT_OVERVIEW = "This video provides comprehensive coverage of the topic with detailed analysis and insights."
DEFAULT_AUDIENCE = "General audience interested in the topic"
TOPIC_VOCABULARY = ("education", "tutorial", "analysis", "guide", "tips", "review", "explanation")
DEFAULT_TOPICS = ("video content", "educational material")
BEGINNER_CUES = ("beginner", "basic", "introduction")
ADVANCED_CUES = ("advanced", "expert", "complex")

THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_context_lock = threading.Lock()
_last_context_millis = 0


def next_context_id(video_id: str, now_millis: int) -> str:
    """Build a context id; the millisecond suffix strictly increases per process."""
    global _last_context_millis
    with _context_lock:
        millis = max(now_millis, _last_context_millis + 1)
        _last_context_millis = millis
    return f"ctx_{video_id}_{millis}"


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _clean_line(line: str) -> str:
    """Strip glyphs, emphasis markup and extra spaces from one line."""
    return _collapse(strip_emphasis(_GLYPHS.sub("", line)))


def remove_headers(section: str, keywords: Tuple[str, ...]) -> str:
    """Remove a heading keyword (with its glyph and markup) from the start of each line."""
    for keyword in keywords:
        header = re.compile(
            rf"^[ \t]*{_GLYPH_CLASS}*[ \t#*_]*{re.escape(keyword)}\b[ \t*_:#-]*",
            re.IGNORECASE | re.MULTILINE,
        )
        section = header.sub("", section)
    return section


def sentences(text: str, min_length: int) -> List[str]:
    """Split text into cleaned sentences longer than ``min_length``."""
    result = []
    for sentence in _SENTENCE_SPLIT.split(text):
        cleaned = _clean_line(sentence)
        if len(cleaned) > min_length:
            result.append(cleaned)
    return result


def extract_list_items(content: str) -> List[str]:
    """
    Extract list entries from a section body.

    Lines with an explicit bullet or number are kept whatever their length;
    other lines must be longer than 15 characters. Without any such line
    the body is split into sentences instead.

    Args:
        content: Section text with its heading removed

    Returns:
        Cleaned list entries in order
    """
    items = []
    for line in content.split("\n"):
        stripped = _GLYPHS.sub("", line).strip()
        if not stripped:
            continue
        bullet = _BULLET.match(stripped)
        cleaned = _clean_line(stripped[bullet.end():] if bullet else stripped)
        if bullet and cleaned:
            items.append(cleaned)
        elif len(cleaned) > 15:
            items.append(cleaned)

    if not items:
        return sentences(content, 25)[:4]
    return items


def overview_from_text(text: str) -> str:
    """First reasonably long line of the text, else its first 300 characters."""
    for line in text.split("\n"):
        cleaned = _clean_line(line)
        if len(cleaned) > MIN_OVERVIEW_LENGTH:
            return cleaned
    cleaned = _collapse(strip_emphasis(_GLYPHS.sub("", text)))
    if len(cleaned) > 300:
        return cleaned[:300] + "..."
    return cleaned


class FreeTextSections(NamedTuple):
    """Sections recovered from a free-text summary."""
    overview: str
    main_points: List[str]
    key_takeaways: List[str]
    audience: Optional[str]


def parse_free_text(text: str) -> FreeTextSections:
    """
    Segment a free-text summary on its section glyphs.

    Args:
        text: Summary text as written by the model

    Returns:
        FreeTextSections with sentence-based fallbacks already applied
    """
    overview = ""
    main_points: List[str] = []
    key_takeaways: List[str] = []
    audience = None

    for section in _SECTION_SPLIT.split(text):
        if not section.strip():
            continue
        marker = section[0]
        if marker in OVERVIEW_SECTION[0]:
            content = remove_headers(section, OVERVIEW_SECTION[1])
            if not overview:
                lines = [_clean_line(line) for line in content.split("\n")]
                overview = next((line for line in lines if len(line) > MIN_OVERVIEW_LENGTH), "")
        elif marker in KEY_POINT_SECTION[0]:
            main_points.extend(extract_list_items(remove_headers(section, KEY_POINT_SECTION[1])))
        elif marker in INSIGHT_SECTION[0]:
            key_takeaways.extend(extract_list_items(remove_headers(section, INSIGHT_SECTION[1])))
        elif marker in AUDIENCE_SECTION[0] and audience is None:
            audience = _clean_line(remove_headers(section, AUDIENCE_SECTION[1])) or None

    if not overview:
        overview = overview_from_text(text)
    if not main_points:
        main_points = sentences(text, 30)
    if not key_takeaways:
        key_takeaways = sentences(text, 40)

    return FreeTextSections(
        overview=overview,
        main_points=main_points[:MAX_MAIN_POINTS],
        key_takeaways=key_takeaways[:MAX_TAKEAWAYS],
        audience=audience,
    )


def extract_topics(text: str) -> Tuple[str, ...]:
    """Topics from the fixed vocabulary mentioned in the text."""
    lowered = text.lower()
    found = tuple(topic for topic in TOPIC_VOCABULARY if topic in lowered)
    return found or DEFAULT_TOPICS


def extract_difficulty(text: str) -> DifficultyLevel:
    """Guess how demanding the content is from cue words."""
    lowered = text.lower()
    if any(cue in lowered for cue in BEGINNER_CUES):
        return DifficultyLevel.BEGINNER
    if any(cue in lowered for cue in ADVANCED_CUES):
        return DifficultyLevel.ADVANCED
    return DifficultyLevel.INTERMEDIATE


class ResponseNormalizer:
    """Builds NormalizedAnalysis objects from backend payloads."""

    def normalize(
        self,
        payload: Union[RawAnalysisPayload, Mapping[str, Any]],
        video_ref: VideoReference,
        now: Optional[datetime] = None,
    ) -> NormalizedAnalysis:
        """
        Normalize a backend payload for display.

        Never raises: malformed or missing structure falls back to text
        heuristics so an analysis is always produced.

        Args:
            payload: Backend payload or its raw JSON mapping
            video_ref: Video the payload describes
            now: Creation instant (defaults to the current UTC time)

        Returns:
            NormalizedAnalysis with a fresh context id
        """
        payload = RawAnalysisPayload.from_backend(payload)
        created_at = now or datetime.now(timezone.utc)
        summary_text = payload.summary
        free_text = parse_free_text(summary_text)

        overview = free_text.overview
        main_points = free_text.main_points
        key_takeaways = free_text.key_takeaways
        audience = free_text.audience

        sections = payload.structured_sections
        if sections is not None and not sections.is_empty():
            logging.debug("Using structured sections from backend")
            structured_overview = _collapse(strip_emphasis(sections.overview or sections.summary or ""))
            overview = structured_overview or overview
            if sections.key_points:
                main_points = [_collapse(point) for point in sections.key_points[:MAX_MAIN_POINTS]]
            if sections.insights and sections.insights.strip():
                key_takeaways = [_collapse(sections.insights)]
            if sections.audience and sections.audience.strip():
                audience = _collapse(sections.audience)
            summary_text = summary_text or " ".join(
                filter(None, [sections.overview, sections.summary, sections.insights, sections.audience] + sections.key_points)
            )

        metadata = payload.video_metadata
        quality = payload.analysis_quality
        analysis = NormalizedAnalysis(
            context_id=next_context_id(video_ref.video_id, int(created_at.timestamp() * 1000)),
            video_id=video_ref.video_id,
            title=metadata.title,
            channel=metadata.channel,
            duration=metadata.duration,
            thumbnail_url=THUMBNAIL_URL.format(video_id=video_ref.video_id),
            published_at=metadata.published,
            view_count=metadata.views,
            source_url=video_ref.source_url,
            overview=overview or DEFAULT_OVERVIEW,
            main_points=tuple(main_points),
            key_takeaways=tuple(key_takeaways),
            transcript_highlights=self._highlights(payload),
            topics_covered=extract_topics(summary_text),
            difficulty_level=extract_difficulty(summary_text),
            target_audience=audience or DEFAULT_AUDIENCE,
            has_transcript=quality.has_transcript,
            model_used=payload.model_used or "unknown",
            content_richness=quality.content_richness,
            formatting_cleaned=quality.formatting_cleaned,
            raw_analysis_text=payload.summary,
            warnings=tuple(payload.warnings),
            created_at=created_at,
        )
        logging.info(f"Normalized analysis {analysis.context_id} for video {video_ref.video_id}")
        return analysis

    @staticmethod
    def _highlights(payload: RawAnalysisPayload) -> Tuple[TranscriptHighlight, ...]:
        """Highlights from backend captions; empty when none were supplied."""
        return tuple(
            TranscriptHighlight(timestamp=format_timestamp(segment.start), text=_collapse(segment.text))
            for segment in payload.transcript_segments
            if segment.text.strip()
        )
