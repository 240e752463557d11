"""
Plain-text report export for cached analyses.
"""

from datetime import datetime
from typing import Optional

from ytsummary.core.store import ResultStore
from ytsummary.models.schemas import ExportedReport, NormalizedAnalysis
from ytsummary.utils.error_handling import ContextNotFoundError
from ytsummary.utils.helpers import clean_markup, format_count, sanitize_filename
from ytsummary.utils.logger import logging

BANNER = "═" * 72
FILENAME_PREFIX = "YouTube_Analysis_"


def _published(analysis: NormalizedAnalysis) -> str:
    if not analysis.published_at:
        return "Unknown"
    try:
        return datetime.fromisoformat(analysis.published_at.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return analysis.published_at


def report_filename(title: str, now: datetime) -> str:
    """Filename for a report: prefix, sanitized title and ISO date."""
    return f"{FILENAME_PREFIX}{sanitize_filename(title, 50)}_{now.strftime('%Y-%m-%d')}.txt"


def render_report(analysis: NormalizedAnalysis, now: datetime) -> str:
    """
    Render an analysis as a human-readable text document.

    Args:
        analysis: The analysis to render
        now: Generation time printed in the header

    Returns:
        Report text
    """
    numbered_points = "\n".join(f"{i}. {point}" for i, point in enumerate(analysis.main_points, 1))
    numbered_takeaways = "\n".join(f"{i}. {item}" for i, item in enumerate(analysis.key_takeaways, 1))

    sections = [
        "YOUTUBE VIDEO ANALYSIS REPORT\n"
        f"Generated on: {now.strftime('%Y-%m-%d')} at {now.strftime('%H:%M:%S')}\n"
        "Analysis Source: YouTube API + AI Analysis",

        "📺 VIDEO INFORMATION:\n"
        f"Title: {analysis.title}\n"
        f"Channel: {analysis.channel}\n"
        f"Duration: {analysis.duration or 'Unknown'}\n"
        f"Published: {_published(analysis)}\n"
        f"Views: {format_count(analysis.view_count)}\n"
        f"URL: {analysis.source_url}",

        f"📊 ANALYSIS OVERVIEW:\n{analysis.overview}",

        f"🎯 MAIN POINTS:\n{numbered_points or 'None identified'}",

        f"💡 KEY TAKEAWAYS:\n{numbered_takeaways or 'None identified'}",

        "📋 METADATA:\n"
        f"• Topics Covered: {', '.join(analysis.topics_covered)}\n"
        f"• Difficulty Level: {analysis.difficulty_level.value}\n"
        f"• Target Audience: {analysis.target_audience}\n"
        f"• Content Quality: {analysis.content_richness or 'Unknown'}\n"
        f"• Has Transcript: {'Yes' if analysis.has_transcript else 'No'}\n"
        f"• AI Model Used: {analysis.model_used}\n"
        f"• Formatting Cleaned: {'Yes' if analysis.formatting_cleaned else 'No'}",

        f"🤖 COMPLETE AI ANALYSIS:\n{clean_markup(analysis.raw_analysis_text)}",

        "📊 TECHNICAL DETAILS:\n"
        f"Analysis ID: {analysis.context_id}\n"
        f"Video ID: {analysis.video_id}\n"
        f"Analysis Timestamp: {analysis.created_at.isoformat()}\n"
        f"Source: {analysis.source}",
    ]
    return f"\n\n{BANNER}\n\n".join(sections)


class ReportExporter:
    """Serializes cached analyses into downloadable text reports."""

    def __init__(self, store: ResultStore):
        self.store = store

    def export_text(self, context_id: str, now: Optional[datetime] = None) -> ExportedReport:
        """
        Export a cached analysis as a text report.

        Args:
            context_id: Context id of the cached analysis
            now: Generation time (defaults to the local current time)

        Returns:
            ExportedReport with filename and content

        Raises:
            ContextNotFoundError: No analysis is cached under context_id
        """
        analysis = self.store.get(context_id)
        if analysis is None:
            raise ContextNotFoundError(context_id)

        now = now or datetime.now()
        report = ExportedReport(filename=report_filename(analysis.title, now), content=render_report(analysis, now))
        logging.info(f"Analysis exported as {report.filename}")
        return report
