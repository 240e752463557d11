"""
Reusable UI components for the Streamlit app.
"""

import streamlit as st
from typing import Optional, Tuple

from ytsummary.config import config
from ytsummary.core.qa import ChatSession
from ytsummary.models.schemas import ApiStatus, ChatRole, ExportedReport, NormalizedAnalysis
from ytsummary.utils.helpers import format_count


def header():
    """Display the application header."""
    st.set_page_config(
        page_title=config.APP_NAME,
        page_icon="🎬",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.title(f"🎬 {config.APP_NAME}")
    st.markdown("""
    Get structured AI analyses of YouTube videos, ask follow-up questions and download a text report.
    """)
    st.divider()


def sidebar() -> Tuple[str, bool]:
    """
    Display the sidebar with backend settings.

    Returns:
        The backend URL and whether a status check was requested
    """
    with st.sidebar:
        st.title("Video Insights")

        st.markdown("## Settings")
        api_url = st.text_input("Backend URL", value=config.BACKEND_URL, key="api_url")
        check = st.button("Check backend status")

        st.divider()
        st.caption(f"Version {config.APP_VERSION}")

    return api_url, check


def display_status(status: ApiStatus):
    """Show backend availability in the sidebar."""
    with st.sidebar:
        if not status.backend_available:
            st.error(f"Backend unavailable: {status.error_detail or status.backend_url}")
            return
        st.success("Backend available")
        st.markdown(f"- AI summarization: {'ready' if status.summarization_ready else 'not configured'}")
        st.markdown(f"- YouTube data: {'ready' if status.transcript_ready else 'not configured'}")
        st.markdown(f"- Cached analyses: {status.cached_analyses}")
        if status.features:
            st.markdown("Features: " + ", ".join(status.features))


def youtube_input() -> Tuple[Optional[str], Optional[str]]:
    """
    Display a YouTube URL input form.

    Returns:
        The entered URL and optional prompt, or (None, None)
    """
    with st.form(key="youtube_form"):
        url = st.text_input(
            "Enter YouTube URL",
            placeholder="https://www.youtube.com/watch?v=VIDEO_ID",
        )
        prompt = st.text_input("Additional instructions (optional)")
        submit = st.form_submit_button("Analyze")

    if submit and url:
        return url, prompt or None

    return None, None


def display_analysis(analysis: NormalizedAnalysis):
    """
    Display a normalized analysis.

    Args:
        analysis: The analysis to show
    """
    for warning in analysis.warnings:
        st.warning(warning)

    col1, col2 = st.columns([1, 2])
    with col1:
        st.image(analysis.thumbnail_url)
    with col2:
        st.markdown(f"## {analysis.title}")
        st.markdown(f"**Channel:** {analysis.channel}")
        st.markdown(f"**Duration:** {analysis.duration or 'Unknown'} · **Views:** {format_count(analysis.view_count)}")
        st.markdown(f"**Difficulty:** {analysis.difficulty_level.value} · **Audience:** {analysis.target_audience}")

    st.markdown("### Overview")
    st.markdown(analysis.overview)

    st.markdown("### Main Points")
    for point in analysis.main_points:
        st.markdown(f"- {point}")

    st.markdown("### Key Takeaways")
    for takeaway in analysis.key_takeaways:
        st.markdown(f"- {takeaway}")

    if analysis.transcript_highlights:
        with st.expander("Transcript Highlights"):
            for highlight in analysis.transcript_highlights:
                st.markdown(f"**{highlight.timestamp}** {highlight.text}")

    with st.expander("Analysis details"):
        st.markdown(f"Topics: {', '.join(analysis.topics_covered)}")
        st.markdown(f"Model: {analysis.model_used} · Transcript: {'yes' if analysis.has_transcript else 'no'}")
        st.caption(analysis.context_id)


def download_button(report: ExportedReport):
    """Offer an exported report for download."""
    st.download_button(
        label="Download analysis (.txt)",
        data=report.content.encode("utf-8"),
        file_name=report.filename,
        mime="text/plain",
    )


def loading_spinner(message: str = "Processing..."):
    """
    Display a loading spinner with a message.

    Args:
        message: Message to display with the spinner
    """
    return st.spinner(message)


def display_error(message: str):
    st.error(message)


def display_success(message: str):
    st.success(message)


def chat_interface(session: ChatSession):
    """
    Display a chat interface for asking questions about the analyzed video.

    Args:
        session: Chat session bound to the current analysis
    """
    st.markdown("## Ask about this Video")

    for turn in session.turns:
        role = "assistant" if turn.role == ChatRole.ERROR else turn.role.value
        with st.chat_message(role):
            if turn.role == ChatRole.ERROR:
                st.error(turn.content)
            else:
                st.markdown(turn.content)

    user_input = st.chat_input("Ask a question about the video...")

    if user_input:
        with st.chat_message("user"):
            st.markdown(user_input)

        with st.chat_message("assistant"):
            with st.spinner("Thinking..."):
                reply = session.ask(user_input)
            if reply.role == ChatRole.ERROR:
                st.error(reply.content)
            else:
                st.markdown(reply.content)


def youtube_embed(video_id: str):
    """
    Embed a YouTube video.

    Args:
        video_id: YouTube video ID
    """
    st.video(f"https://www.youtube.com/watch?v={video_id}")
