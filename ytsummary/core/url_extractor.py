"""
Module for recognizing YouTube links and extracting their video ids.
"""

import re
from typing import Optional

from ytsummary.models.schemas import VideoReference

VIDEO_ID_PATTERN = r"[0-9A-Za-z_-]{11}"

# Watch, embed, shorts/live, legacy channel fragments and youtu.be links
_URL_PATTERN = re.compile(
    r"(?:youtube(?:-nocookie)?\.com/"
    r"(?:[^/\s]+/.+/|(?:v|e(?:mbed)?|shorts|live)/|.*[?&]v=)"
    r"|youtu\.be/)"
    rf"({VIDEO_ID_PATTERN})",
    re.IGNORECASE,
)
_BARE_ID_PATTERN = re.compile(rf"^({VIDEO_ID_PATTERN})$")


def extract_video_id(url: str) -> Optional[VideoReference]:
    """
    Extract the YouTube video id from a link or a bare id.

    Args:
        url: YouTube URL or 11-character video id

    Returns:
        VideoReference or None if no id can be found
    """
    if not isinstance(url, str):
        return None

    candidate = url.strip()
    if not candidate:
        return None

    match = _URL_PATTERN.search(candidate) or _BARE_ID_PATTERN.match(candidate)
    if not match:
        return None

    return VideoReference(video_id=match.group(1), source_url=candidate)


def is_valid_youtube_url(url: str) -> bool:
    """Check whether a link carries a YouTube video id."""
    return extract_video_id(url) is not None
