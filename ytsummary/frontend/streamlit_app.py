"""
Main Streamlit application for YouTube Video Insights.
"""

import streamlit as st
from dotenv import load_dotenv

from ytsummary.core.pipeline import AnalysisPipeline
from ytsummary.core.qa import ChatSession
from ytsummary.frontend.components import (
    header, sidebar, display_status, youtube_input, display_analysis,
    download_button, loading_spinner, display_error, display_success,
    chat_interface, youtube_embed,
)
from ytsummary.utils.error_handling import YTSummaryError, describe_error


load_dotenv()


def init_session_state(api_url: str):
    """Initialize session state variables."""
    pipeline = st.session_state.get("pipeline")
    if pipeline is None or pipeline.client.base_url != api_url.rstrip("/"):
        st.session_state.pipeline = AnalysisPipeline.from_config(api_url)
        st.session_state.context_id = None
        st.session_state.chat_session = None

    if "context_id" not in st.session_state:
        st.session_state.context_id = None

    if "chat_session" not in st.session_state:
        st.session_state.chat_session = None


def process_youtube_url(url: str, prompt=None):
    """
    Analyze a YouTube URL and remember the result for this session.

    Args:
        url: YouTube URL
        prompt: Optional additional instructions

    Returns:
        The analysis, or None after displaying the error
    """
    pipeline = st.session_state.pipeline

    try:
        with loading_spinner("Analyzing video. This may take a minute..."):
            analysis = pipeline.analyze_video(url, prompt)
    except YTSummaryError as e:
        display_error(describe_error(e))
        return None

    st.session_state.context_id = analysis.context_id
    st.session_state.chat_session = ChatSession(analysis.context_id, pipeline.answerer)
    return analysis


def video_view():
    """Display the current analysis, report download and chat."""
    pipeline = st.session_state.pipeline
    analysis = pipeline.get_cached(st.session_state.context_id)

    if analysis is None:
        display_error("This analysis is no longer cached. Please analyze the video again.")
        st.session_state.context_id = None
        return

    if st.button("← New analysis"):
        st.session_state.context_id = None
        st.session_state.chat_session = None
        st.rerun()

    youtube_embed(analysis.video_id)
    display_analysis(analysis)

    try:
        download_button(pipeline.export_text(analysis.context_id))
    except YTSummaryError as e:
        display_error(str(e))

    chat_interface(st.session_state.chat_session)


def home_view():
    """Display the home view with YouTube URL input."""
    st.markdown("## Get Started")
    st.markdown("Enter a YouTube URL to generate a structured analysis.")

    url, prompt = youtube_input()

    if url:
        analysis = process_youtube_url(url, prompt)
        if analysis is not None:
            display_success("Video analyzed successfully!")
            st.rerun()


def main():
    """Main application entry point."""
    header()
    api_url, check_status = sidebar()
    init_session_state(api_url)

    if check_status:
        display_status(st.session_state.pipeline.get_api_status())

    if st.session_state.context_id:
        video_view()
    else:
        home_view()


if __name__ == "__main__":
    main()
