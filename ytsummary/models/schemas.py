"""
Data models for the YouTube video insights client.
"""
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, List, Tuple
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, ValidationError, field_validator
from ytsummary.config import config


class VideoReference(BaseModel):
    """A validated YouTube video identifier and the link it came from."""
    model_config = ConfigDict(frozen=True)

    video_id: str = Field(pattern=r"^[0-9A-Za-z_-]{11}$")
    source_url: str


class BackendCapability(BaseModel):
    """Capability flags reported by the backend health endpoint."""
    available: bool
    summarization_ready: bool = False
    transcript_ready: bool = False
    features: List[str] = Field(default_factory=list)
    message: Optional[str] = None
    error_detail: Optional[str] = None


class VideoMetadata(BaseModel):
    """Video metadata as returned by the backend."""
    model_config = ConfigDict(extra="ignore")

    title: str = "Untitled video"
    channel: str = "Unknown channel"
    duration: Optional[str] = None
    published: Optional[str] = None
    views: Optional[int] = None

    @field_validator("title", "channel", mode="before")
    @classmethod
    def default_blank_text(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return str(v)

    @field_validator("duration", "published", mode="before")
    @classmethod
    def stringify(cls, v):
        return None if v is None else str(v)

    @field_validator("views", mode="before")
    @classmethod
    def parse_views(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(str(v).replace(",", "").strip())
        except ValueError:
            return None


class StructuredSections(BaseModel):
    """Optional pre-parsed breakdown of the AI summary."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    overview: Optional[str] = None
    summary: Optional[str] = None
    key_points: List[str] = Field(default_factory=list, validation_alias=AliasChoices("keyPoints", "key_points"))
    insights: Optional[str] = None
    audience: Optional[str] = None

    @field_validator("key_points", mode="before")
    @classmethod
    def coerce_points(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(point) for point in v if point]

    def is_empty(self) -> bool:
        """Whether the backend sent the sections mapping without any keys."""
        return not self.model_fields_set


class AnalysisQuality(BaseModel):
    """Quality flags reported alongside the analysis."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    content_richness: Optional[str] = Field(default=None, validation_alias=AliasChoices("content_richness", "contentRichness"))
    has_transcript: bool = Field(default=False, validation_alias=AliasChoices("has_transcript", "hasTranscript"))
    formatting_cleaned: bool = Field(default=False, validation_alias=AliasChoices("formatting_cleaned", "formattingCleaned"))


class TranscriptSegment(BaseModel):
    """A single timed caption supplied by the backend."""
    model_config = ConfigDict(extra="ignore")

    start: float = Field(ge=0)
    text: str
    end: Optional[float] = None


class RawAnalysisPayload(BaseModel):
    """Response body of the backend's summarize endpoint."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: str = ""
    video_metadata: VideoMetadata = Field(default_factory=VideoMetadata, validation_alias=AliasChoices("video_metadata", "videoMetadata"))
    structured_sections: Optional[StructuredSections] = Field(default=None, validation_alias=AliasChoices("structured_sections", "structuredSections"))
    model_used: Optional[str] = Field(default=None, validation_alias=AliasChoices("model_used", "modelUsed"))
    analysis_quality: AnalysisQuality = Field(default_factory=AnalysisQuality, validation_alias=AliasChoices("analysis_quality", "analysisQuality"))
    transcript_segments: List[TranscriptSegment] = Field(
        default_factory=list,
        validation_alias=AliasChoices("transcript_segments", "transcriptSegments", "transcript"),
    )
    # Client-side degraded-mode notes, never sent by the backend
    warnings: List[str] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def default_summary(cls, v):
        return "" if v is None else str(v)

    @field_validator("video_metadata", "analysis_quality", mode="before")
    @classmethod
    def default_mapping(cls, v):
        return {} if v is None else v

    @field_validator("transcript_segments", mode="before")
    @classmethod
    def default_segments(cls, v):
        return [] if not isinstance(v, list) else v

    @classmethod
    def from_backend(cls, data: Any) -> "RawAnalysisPayload":
        """
        Parse a backend body, dropping the top-level keys that fail validation.

        Never raises; a body that cannot be salvaged yields its summary text only.
        """
        if isinstance(data, RawAnalysisPayload):
            return data
        if not isinstance(data, Mapping):
            return cls()

        remaining = dict(data)
        while True:
            try:
                return cls.model_validate(remaining)
            except ValidationError as e:
                bad_keys = {error["loc"][0] for error in e.errors() if error["loc"]} & remaining.keys()
                if not bad_keys:
                    break
                for key in bad_keys:
                    remaining.pop(key)

        summary = data.get("summary")
        return cls(summary=summary if isinstance(summary, str) else "")


class DifficultyLevel(str, Enum):
    """How demanding the video content is."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TranscriptHighlight(BaseModel):
    """A timestamp-anchored excerpt of the video."""
    model_config = ConfigDict(frozen=True)

    timestamp: str
    text: str


class NormalizedAnalysis(BaseModel):
    """Display-ready analysis of one video, keyed by its context id."""
    model_config = ConfigDict(frozen=True)

    context_id: str
    video_id: str
    title: str
    channel: str
    duration: Optional[str] = None
    thumbnail_url: str
    published_at: Optional[str] = None
    view_count: Optional[int] = None
    source_url: str
    overview: str
    main_points: Tuple[str, ...] = ()
    key_takeaways: Tuple[str, ...] = ()
    transcript_highlights: Tuple[TranscriptHighlight, ...] = ()
    topics_covered: Tuple[str, ...] = ()
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    target_audience: str
    has_transcript: bool = False
    model_used: str = "unknown"
    content_richness: Optional[str] = None
    formatting_cleaned: bool = False
    raw_analysis_text: str = ""
    warnings: Tuple[str, ...] = ()
    source: str = "real_backend_api"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChatRole(str, Enum):
    """Author of a chat turn."""
    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


class ChatTurn(BaseModel):
    """One message in a question-and-answer exchange about a video."""
    role: ChatRole
    content: str
    timestamp: str = Field(default_factory=lambda: time.strftime("%Y-%m-%d %H:%M:%S"))


class ExportedReport(BaseModel):
    """A rendered text report ready to be written to disk."""
    filename: str
    content: str


class RetryConfig(BaseModel):
    """Exponential backoff settings for retried backend calls."""
    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=config.RETRY_MAX_RETRIES, ge=0)
    base_delay: float = Field(default=config.RETRY_BASE_DELAY, ge=0)
    max_delay: float = Field(default=config.RETRY_MAX_DELAY, ge=0)
    backoff_multiplier: float = Field(default=config.RETRY_BACKOFF_MULTIPLIER, ge=1)


class ApiStatus(BaseModel):
    """Snapshot of backend availability and local cache usage."""
    backend_available: bool
    backend_url: str
    summarization_ready: bool = False
    transcript_ready: bool = False
    features: List[str] = Field(default_factory=list)
    cached_analyses: int = 0
    retry_config: RetryConfig = Field(default_factory=RetryConfig)
    error_detail: Optional[str] = None
    last_check: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
