"""
Configuration settings for the YouTube video insights client.
"""

import os
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Video Insights"
    APP_VERSION = "2.0.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = BASE_DIR / "data"
    REPORTS_DIR = Path(os.getenv("REPORTS_DIR", str(DATA_DIR / "reports")))

    # Backend selection
    BACKEND_URL_FROM_ENV = os.getenv("BACKEND_URL")
    BACKEND_URL = (BACKEND_URL_FROM_ENV or "http://localhost:5000").rstrip("/")

    # Timeouts (seconds)
    HEALTH_TIMEOUT = 5
    ANALYSIS_TIMEOUT = int(os.getenv("API_TIMEOUT", "60"))

    # Default model and prompt sent with every analysis request
    DEFAULT_MODEL = "gemini-1.5-flash"
    DEFAULT_PROMPT = "Please provide a comprehensive analysis suitable for quick understanding and learning."

    # Retry policy
    RETRY_MAX_RETRIES = 3
    RETRY_BASE_DELAY = 2.0
    RETRY_MAX_DELAY = 10.0
    RETRY_BACKOFF_MULTIPLIER = 2.0

    # In-memory analysis store
    CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "100"))

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        from ytsummary.utils.logger import logging

        cls.REPORTS_DIR.mkdir(parents=True, exist_ok=True)

        if not cls.BACKEND_URL_FROM_ENV:
            logging.warning(f"BACKEND_URL environment variable not set, using {cls.BACKEND_URL}")


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
