"""
Main entry point for the YouTube Video Insights client.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ytsummary.config import config
from ytsummary.core.pipeline import AnalysisPipeline
from ytsummary.core.qa import ChatSession
from ytsummary.models.schemas import ExportedReport, NormalizedAnalysis
from ytsummary.utils.error_handling import YTSummaryError, describe_error
from ytsummary.utils.helpers import format_count
from ytsummary.utils.logger import logging


def save_report(report: ExportedReport, directory: Optional[str] = None) -> Path:
    """Write an exported report to disk as UTF-8."""
    output_dir = Path(directory) if directory else config.REPORTS_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / report.filename
    output_file.write_text(report.content, encoding="utf-8")
    logging.info(f"Report saved to: {output_file}")
    return output_file


def analyze_youtube_video(
    url: str,
    pipeline: Optional[AnalysisPipeline] = None,
    additional_prompt: Optional[str] = None,
    export_dir: Optional[str] = None,
) -> NormalizedAnalysis:
    """
    Analyze a YouTube video and optionally save its text report.

    Args:
        url: YouTube video URL
        pipeline: Pipeline to use (defaults to one built from configuration)
        additional_prompt: Free-text hint for the model
        export_dir: Directory to save the report in, if any

    Returns:
        NormalizedAnalysis object
    """
    pipeline = pipeline or AnalysisPipeline.from_config()
    analysis = pipeline.analyze_video(url, additional_prompt)

    if export_dir:
        save_report(pipeline.export_text(analysis.context_id), export_dir)

    return analysis


def print_analysis(analysis: NormalizedAnalysis):
    """Print an analysis to the terminal."""
    print("\n" + "=" * 80)
    print(f"{analysis.title} by {analysis.channel} ({format_count(analysis.view_count)} views)")
    print("=" * 80)
    for warning in analysis.warnings:
        print(f"WARNING: {warning}")
    print(analysis.overview)
    print("\nMain points:")
    for i, point in enumerate(analysis.main_points, 1):
        print(f"  {i}. {point}")
    print("\nKey takeaways:")
    for i, takeaway in enumerate(analysis.key_takeaways, 1):
        print(f"  {i}. {takeaway}")
    print("=" * 80)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the client from the command line."""
    parser = argparse.ArgumentParser(description="YouTube Video Insights")
    parser.add_argument("url", nargs="?", help="YouTube video URL")
    parser.add_argument("--backend", default=config.BACKEND_URL, help="Base URL of the analysis backend")
    parser.add_argument("--prompt", help="Additional instructions for the model")
    parser.add_argument("--export", metavar="DIR", help="Save the text report in this directory")
    parser.add_argument("--ask", metavar="QUESTION", action="append", default=[],
                        help="Ask a follow-up question (repeatable)")
    parser.add_argument("--status", action="store_true", help="Show backend status and exit")
    args = parser.parse_args(argv)

    pipeline = AnalysisPipeline.from_config(args.backend)

    if args.status:
        print(pipeline.get_api_status().model_dump_json(indent=2))
        return 0

    if not args.url:
        parser.error("a YouTube URL is required unless --status is given")

    try:
        analysis = analyze_youtube_video(args.url, pipeline, args.prompt, args.export)
    except YTSummaryError as e:
        print(describe_error(e), file=sys.stderr)
        return 1

    print_analysis(analysis)

    session = ChatSession(analysis.context_id, pipeline.answerer)
    for question in args.ask:
        turn = session.ask(question)
        print(f"\nQ: {question}\nA: {turn.content}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
