"""
Tests for the backend health probe.
"""

from unittest.mock import patch

import pytest
import requests

from ytsummary.core.health import BackendHealthProbe
from tests.conftest import BACKEND_URL, make_response


@pytest.fixture
def mock_get():
    with patch("ytsummary.core.health.requests.get") as mock:
        yield mock


def test_healthy_backend(mock_get):
    mock_get.return_value = make_response(200, {
        "geminiApiKeyExists": True,
        "youtubeApiKeyExists": False,
        "features": ["Clean formatting", "AI analysis"],
        "message": "Backend running",
    })

    capability = BackendHealthProbe(BACKEND_URL + "/").check_health()

    mock_get.assert_called_once_with(f"{BACKEND_URL}/api/health", timeout=5)
    assert capability.available is True
    assert capability.summarization_ready is True
    assert capability.transcript_ready is False
    assert capability.features == ["Clean formatting", "AI analysis"]
    assert capability.message == "Backend running"
    assert capability.error_detail is None


def test_error_status_reports_unavailable(mock_get):
    mock_get.return_value = make_response(500, {"error": "boom"})

    capability = BackendHealthProbe(BACKEND_URL).check_health()

    assert capability.available is False
    assert "500" in capability.error_detail


def test_connection_error_reports_unavailable(mock_get):
    mock_get.side_effect = requests.ConnectionError("Connection refused")

    capability = BackendHealthProbe(BACKEND_URL).check_health()

    assert capability.available is False
    assert capability.error_detail == "Connection refused"


def test_timeout_reports_unavailable(mock_get):
    mock_get.side_effect = requests.Timeout("timed out")

    assert BackendHealthProbe(BACKEND_URL, timeout=1).check_health().available is False
    assert mock_get.call_args.kwargs["timeout"] == 1


def test_invalid_json_reports_unavailable(mock_get):
    mock_get.return_value = make_response(200, json_error=True)

    capability = BackendHealthProbe(BACKEND_URL).check_health()

    assert capability.available is False
    assert capability.error_detail


def test_missing_flags_default_to_not_ready(mock_get):
    mock_get.return_value = make_response(200, {})

    capability = BackendHealthProbe(BACKEND_URL).check_health()

    assert capability.available is True
    assert capability.summarization_ready is False
    assert capability.transcript_ready is False
    assert capability.features == []


def test_every_check_hits_the_backend(mock_get):
    mock_get.return_value = make_response(200, {"geminiApiKeyExists": True})
    probe = BackendHealthProbe(BACKEND_URL)

    probe.check_health()
    probe.check_health()

    assert mock_get.call_count == 2
