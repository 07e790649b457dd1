"""
SQLAlchemy models for the job history store.
"""

import datetime
from sqlalchemy import Column, String, Text, DateTime, Integer, Float, Boolean

from timepredictor.db.database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class JobRecord(Base):
    """Model representing one analysis job and its measured stage timings."""
    __tablename__ = "job_records"

    id = Column(String(40), primary_key=True)
    source_url = Column(String(1024), nullable=True)
    content_type = Column(String(10), nullable=True)
    transcription_method = Column(String(50), nullable=False)
    summary_model = Column(String(50), nullable=False)
    language = Column(String(10), nullable=True)

    # Content characteristics that affect processing time
    media_duration_seconds = Column(Float, nullable=True)
    text_length_chars = Column(Integer, nullable=True)

    transcription_started_at = Column(DateTime, nullable=True)
    transcription_finished_at = Column(DateTime, nullable=True)
    transcription_seconds = Column(Float, nullable=True)

    summary_started_at = Column(DateTime, nullable=True)
    summary_finished_at = Column(DateTime, nullable=True)
    summary_seconds = Column(Float, nullable=True)

    success = Column(Boolean, default=False, nullable=False)
    error = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<JobRecord(id='{self.id}', content_type='{self.content_type}', success={self.success})>"
