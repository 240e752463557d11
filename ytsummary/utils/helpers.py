"""
Helper utility functions for the YouTube video insights client.
"""

import re
from typing import Optional


def sanitize_filename(filename: str, max_length: int = 50) -> str:
    """
    Sanitize a string to be used as part of a filename.

    Every non-alphanumeric character becomes an underscore, runs of
    underscores are collapsed and the result is truncated.

    Args:
        filename: The text to sanitize
        max_length: Maximum length of the result

    Returns:
        Sanitized filename fragment
    """
    sanitized = re.sub(r"[^a-z0-9]", "_", filename, flags=re.IGNORECASE)
    sanitized = re.sub(r"_+", "_", sanitized)
    return sanitized[:max_length]


def strip_emphasis(text: str) -> str:
    """Remove markdown bold/italic markers, keeping the wrapped text."""
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    text = re.sub(r"__([^_]+)__", r"\1", text)
    return re.sub(r"\*+", "", text)


def clean_markup(text: str) -> str:
    """
    Strip emphasis markup and collapse whitespace, keeping paragraph breaks.

    Args:
        text: Raw markdown-ish text from the model

    Returns:
        Plain text with single spaces and at most one blank line in a row
    """
    text = strip_emphasis(text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def format_timestamp(seconds: float) -> str:
    """Format a caption offset as minutes:seconds with zero-padded seconds."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def format_count(value: Optional[int], default: str = "Unknown") -> str:
    """Format a counter with thousands separators."""
    if value is None:
        return default
    return f"{value:,}"
