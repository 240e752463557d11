"""
Core functionality for the YouTube video insights client.

This package contains modules for validating YouTube links, talking to the
summarization backend, normalizing its responses and reusing the results
for chat answers and report export.
"""
