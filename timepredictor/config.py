"""
Configuration settings for the processing-time predictor.
"""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "Processing Time Predictor"
    APP_VERSION = "0.1.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    LOGS_DIR = BASE_DIR / "logs"

    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/job_history.db")

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


class PredictorConfig:
    """Constants used by the statistics aggregator and the rate predictor."""

    # Only records from the trailing window feed the statistics
    HISTORY_WINDOW_DAYS = int(os.getenv("HISTORY_WINDOW_DAYS", "30"))
    MIN_GROUP_SAMPLES = 2
    RECENT_SAMPLE_LIMIT = 5

    # Outlier rejection
    OUTLIER_MIN_SAMPLES = 4
    OUTLIER_STD_DEVS = 2.0

    # Tier 1: global defaults
    DEFAULT_TRANSCRIPTION_SECONDS_PER_MINUTE = 6.0
    DEFAULT_SUMMARY_SECONDS_PER_MINUTE = 30.0
    DEFAULT_TRANSCRIPTION_SECONDS_PER_KCHAR = 1.5
    DEFAULT_SUMMARY_SECONDS_PER_KCHAR = 3.0
    FALLBACK_TRANSCRIPTION_SECONDS = 30.0
    FALLBACK_SUMMARY_SECONDS = 60.0

    # Tier 2: model defaults
    TRANSCRIPTION_MODEL_RATES = {
        "whisper-1": 6.0,
        "gpt-4o-transcribe": 8.0,
        "gpt-4o-mini-transcribe": 4.0,
    }
    SUMMARY_MODEL_COEFFICIENTS = {
        "gpt-4o-mini": 0.8,
        "gpt-4o": 1.2,
        "gpt-4-turbo": 1.5,
        "gpt-4": 2.0,
        "gpt-3.5-turbo": 0.6,
    }
    DEFAULT_SUMMARY_COEFFICIENT = 0.8

    # Tier 3: historical lookup
    TRANSCRIPTION_FALLBACK_KEYS = ("whisper", "whisper-1")
    HISTORICAL_SAMPLES_FOR_FULL_CONFIDENCE = 10

    # Confidence levels
    GLOBAL_DEFAULT_CONFIDENCE = 0.1
    MODEL_DEFAULT_CONFIDENCE = 0.3
    HISTORICAL_CONFIDENCE_CAP = 0.9
    MULTIPLIER_CONFIDENCE_BOOST = 0.1
    MULTIPLIER_CONFIDENCE_CAP = 0.95

    # Stage estimates are capped so their sum stays a finite float
    MAX_STAGE_SECONDS = sys.float_info.max / 4


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

predictor_config = PredictorConfig
