"""
Configuration for pytest tests.
"""

import os
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Configuration is read at import time, so point it at test locations first
TEST_DATA_DIR = Path("test_data")
os.environ["DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DATA_DIR}/test_job_history.db"
os.environ["ENVIRONMENT"] = "development"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timepredictor.db.database import Base
from timepredictor.models.schemas import ContentType, HistoricalRecord

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Create the test data directory and remove it afterwards."""
    TEST_DATA_DIR.mkdir(exist_ok=True)

    yield

    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture
def now():
    """Fixed reference time for windowed statistics."""
    return NOW


@pytest.fixture
def make_record():
    """Factory for historical records relative to the fixed reference time."""
    def _make_record(
        transcription_seconds=60.0,
        summary_seconds=120.0,
        duration=600.0,
        chars=10000,
        method="whisper-1",
        model="gpt-4o-mini",
        content_type=ContentType.YOUTUBE,
        source_url=None,
        days_ago=1,
    ):
        return HistoricalRecord(
            content_type=content_type,
            source_url=source_url,
            transcription_method=method,
            summary_model=model,
            media_duration_seconds=duration,
            text_length_chars=chars,
            measured_transcription_seconds=transcription_seconds,
            measured_summary_seconds=summary_seconds,
            timestamp=NOW - timedelta(days=days_ago),
        )

    return _make_record


@pytest.fixture
def db_session():
    """In-memory SQLite session with the job history schema."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    from timepredictor.db.models import JobRecord  # noqa: F401 registers the table

    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
