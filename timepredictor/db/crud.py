"""
CRUD operations for the job history store.
"""

import datetime
import math
import time
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from timepredictor.db.models import JobRecord
from timepredictor.models.schemas import HistoricalRecord
from timepredictor.utils.error_handling import coerce_historical_record
from timepredictor.utils.logger import logging


def _to_naive_utc(moment: datetime.datetime) -> datetime.datetime:
    if moment.tzinfo is not None:
        moment = moment.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return moment


def _elapsed_seconds(started_at: datetime.datetime, finished_at: datetime.datetime) -> int:
    """Stage duration in whole seconds, rounded up."""
    return math.ceil((finished_at - started_at).total_seconds())


def new_job_id() -> str:
    return f"analysis_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def create_job_record(
    db: Session,
    transcription_method: str,
    summary_model: str,
    content_type: Optional[str] = None,
    source_url: Optional[str] = None,
    media_duration_seconds: Optional[float] = None,
    text_length_chars: Optional[int] = None,
    language: Optional[str] = None,
) -> JobRecord:
    """Create a new job entry before processing starts."""
    job = JobRecord(
        id=new_job_id(),
        source_url=source_url,
        content_type=content_type,
        transcription_method=transcription_method,
        summary_model=summary_model,
        language=language,
        media_duration_seconds=media_duration_seconds,
        text_length_chars=text_length_chars,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    logging.info(f"Created job record {job.id}")
    return job


def get_job(db: Session, job_id: str) -> Optional[JobRecord]:
    """Get a job by ID."""
    return db.query(JobRecord).filter(JobRecord.id == job_id).first()


def update_transcription_progress(
    db: Session,
    job_id: str,
    started_at: datetime.datetime,
    finished_at: Optional[datetime.datetime] = None,
) -> Optional[JobRecord]:
    """Record when the transcription stage started and, once known, finished."""
    job = get_job(db, job_id)
    if not job:
        logging.error(f"Job with ID {job_id} not found in the database.")
        return None

    job.transcription_started_at = _to_naive_utc(started_at)
    if finished_at:
        job.transcription_finished_at = _to_naive_utc(finished_at)
        job.transcription_seconds = _elapsed_seconds(
            job.transcription_started_at, job.transcription_finished_at
        )

    db.commit()
    db.refresh(job)
    return job


def update_summary_progress(
    db: Session,
    job_id: str,
    started_at: datetime.datetime,
    finished_at: Optional[datetime.datetime] = None,
) -> Optional[JobRecord]:
    """Record when the summary stage started and, once known, finished."""
    job = get_job(db, job_id)
    if not job:
        logging.error(f"Job with ID {job_id} not found in the database.")
        return None

    job.summary_started_at = _to_naive_utc(started_at)
    if finished_at:
        job.summary_finished_at = _to_naive_utc(finished_at)
        job.summary_seconds = _elapsed_seconds(job.summary_started_at, job.summary_finished_at)

    db.commit()
    db.refresh(job)
    return job


def complete_job(
    db: Session, job_id: str, success: bool, error: Optional[str] = None
) -> Optional[JobRecord]:
    """Mark a job as finished."""
    job = get_job(db, job_id)
    if not job:
        logging.error(f"Job with ID {job_id} not found in the database.")
        return None

    job.success = success
    job.error = error
    job.completed_at = _to_naive_utc(datetime.datetime.now(datetime.timezone.utc))

    db.commit()
    db.refresh(job)
    return job


def get_recent_jobs(db: Session, limit: int = 10) -> List[JobRecord]:
    """Get the most recently created jobs, newest first."""
    return db.query(JobRecord).order_by(JobRecord.created_at.desc()).limit(limit).all()


def to_historical_record(job: JobRecord) -> Optional[HistoricalRecord]:
    """Convert a stored job into the record shape consumed by the predictor."""
    return coerce_historical_record({
        "id": job.id,
        "content_type": job.content_type,
        "source_url": job.source_url,
        "transcription_method": job.transcription_method,
        "summary_model": job.summary_model,
        "media_duration_seconds": job.media_duration_seconds,
        "text_length_chars": job.text_length_chars,
        "measured_transcription_seconds": job.transcription_seconds,
        "measured_summary_seconds": job.summary_seconds,
        "timestamp": job.completed_at or job.created_at,
    })


def load_historical_records(db: Session) -> List[HistoricalRecord]:
    """
    Load successful jobs as historical records, oldest first.

    Rows that cannot be converted are skipped.
    """
    jobs = (
        db.query(JobRecord)
        .filter(JobRecord.success.is_(True))
        .order_by(JobRecord.created_at.asc())
        .all()
    )

    records = []
    for job in jobs:
        record = to_historical_record(job)
        if record is not None:
            records.append(record)

    logging.debug(f"Loaded {len(records)} historical records from {len(jobs)} successful jobs")
    return records


def cleanup_old_records(db: Session, keep_successful: int = 100, keep_failed: int = 50) -> int:
    """
    Delete old jobs, keeping the newest successful and failed ones.

    Returns:
        Number of deleted jobs
    """
    deleted = 0
    for success, keep in ((True, keep_successful), (False, keep_failed)):
        stale = (
            db.query(JobRecord)
            .filter(JobRecord.success.is_(success))
            .order_by(JobRecord.created_at.desc())
            .offset(keep)
            .all()
        )
        for job in stale:
            db.delete(job)
        deleted += len(stale)

    db.commit()
    logging.info(f"Removed {deleted} old job records")
    return deleted
