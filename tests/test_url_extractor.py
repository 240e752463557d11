"""
Tests for YouTube link parsing.
"""

import pytest

from ytsummary.core.url_extractor import extract_video_id, is_valid_youtube_url


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
    "http://m.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://www.youtube.com/watch?list=PLx0sYbCqOb8TBPRdmBHs5Iftvv9TPboYG&v=dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1",
    "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/v/dQw4w9WgXcQ?version=3",
    "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    "https://www.youtube.com/live/dQw4w9WgXcQ?feature=share",
    "https://www.youtube.com/user/SomeChannel#p/u/1/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "youtu.be/dQw4w9WgXcQ?si=-InVol0JhtWji-6R",
    "dQw4w9WgXcQ",
    "  https://youtu.be/dQw4w9WgXcQ  ",
])
def test_supported_shapes(url):
    """Every supported link shape yields the embedded id."""
    ref = extract_video_id(url)

    assert ref is not None
    assert ref.video_id == "dQw4w9WgXcQ"
    assert ref.video_id in url
    assert ref.source_url == url.strip()


@pytest.mark.parametrize("url", [
    "not a url",
    "",
    "   ",
    None,
    12345678901,
    "https://vimeo.com/123456789",
    "https://www.youtube.com/watch?v=short",
    "https://example.com/dQw4w9WgXcQ",
    "https://www.youtube.com/",
])
def test_unsupported_input_returns_none(url):
    assert extract_video_id(url) is None


def test_shortened_link():
    assert extract_video_id("https://youtu.be/dQw4w9WgXcQ").video_id == "dQw4w9WgXcQ"


def test_takes_first_eleven_characters():
    ref = extract_video_id("https://youtu.be/dQw4w9WgXcQextra")
    assert ref.video_id == "dQw4w9WgXcQ"


def test_ids_with_dash_and_underscore(test_video_url):
    assert extract_video_id(test_video_url).video_id == "V3TUEeB0kW0"
    assert extract_video_id("https://youtu.be/a-b_c-d_e-f").video_id == "a-b_c-d_e-f"


def test_is_valid_youtube_url():
    assert is_valid_youtube_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert not is_valid_youtube_url("https://example.com/video")
