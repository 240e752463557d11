"""
Smoke tests for the Streamlit frontend.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
import requests
from streamlit.testing.v1 import AppTest

APP_PATH = Path(__file__).resolve().parent.parent / "ytsummary" / "frontend" / "streamlit_app.py"


@pytest.fixture
def app():
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.run()
    return at


def test_home_view_renders(app):
    assert not app.exception
    assert any("YouTube Video Insights" in title.value for title in app.title)
    assert app.text_input(key="api_url").value == "http://backend.test"


def test_invalid_url_shows_error(app):
    url_input = next(widget for widget in app.text_input if widget.label == "Enter YouTube URL")
    url_input.input("not a url")
    next(button for button in app.button if button.label == "Analyze").click()
    app.run()

    assert not app.exception
    assert any("valid YouTube URL" in error.value for error in app.error)


def test_status_check_reports_unreachable_backend(app):
    with patch("ytsummary.core.health.requests.get") as mock_get:
        mock_get.side_effect = requests.ConnectionError("Connection refused")
        next(button for button in app.sidebar.button if button.label == "Check backend status").click()
        app.run()

    assert not app.exception
    assert any("Backend unavailable" in error.value for error in app.sidebar.error)
