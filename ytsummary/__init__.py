"""
YouTube Video Insights client.

This package validates YouTube links, asks an external summarization backend
for an analysis, normalizes the result for display and keeps it in memory
for follow-up questions and text-report export.
"""

from ytsummary.config import config

__version__ = config.APP_VERSION
