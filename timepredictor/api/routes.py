"""
API routes for the processing-time predictor.
"""

from typing import List
from fastapi import APIRouter, HTTPException, Depends, Query, Path

from timepredictor.api.schemas import (
    JobCreateRequest,
    StageTimingRequest,
    JobCompleteRequest,
    JobResponse,
)
from timepredictor.core.predictor import create_time_predictor
from timepredictor.db.crud import (
    complete_job,
    create_job_record,
    get_recent_jobs,
    load_historical_records,
    update_summary_progress,
    update_transcription_progress,
)
from timepredictor.db.database import get_db, DBSession
from timepredictor.models.schemas import PredictionInput, PredictionResult, StatsSummary
from timepredictor.utils.error_handling import log_diagnostic_info
from timepredictor.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["prediction"])


@router.post("/predict", response_model=PredictionResult)
async def predict_processing_time(
    prediction_input: PredictionInput,
    db: DBSession = Depends(get_db),
):
    """
    Predict transcription and summary time for a new job.

    A fresh predictor is built from the stored history on every call.
    """
    predictor = create_time_predictor(load_historical_records(db))
    result = predictor.predict(prediction_input)
    log_diagnostic_info({
        "input": prediction_input.model_dump(mode="json"),
        "stats": predictor.stats_summary().model_dump(mode="json"),
    })
    logging.info(
        f"Predicted {result.formatted_total} for {prediction_input.content_type.value} "
        f"({result.based_on.value}, confidence {result.confidence:.2f})"
    )
    return result


@router.get("/stats", response_model=StatsSummary)
async def get_stats(db: DBSession = Depends(get_db)):
    """Summary of the history that currently backs predictions."""
    predictor = create_time_predictor(load_historical_records(db))
    return predictor.stats_summary()


@router.post("/jobs", response_model=JobResponse, status_code=201)
async def create_job(request: JobCreateRequest, db: DBSession = Depends(get_db)):
    """Register a job before processing starts."""
    job = create_job_record(
        db,
        transcription_method=request.transcription_method,
        summary_model=request.summary_model,
        content_type=request.content_type.value if request.content_type else None,
        source_url=request.source_url,
        media_duration_seconds=request.media_duration_seconds,
        text_length_chars=request.text_length_chars,
        language=request.language,
    )
    return job


@router.get("/jobs", response_model=List[JobResponse])
async def list_jobs(
    limit: int = Query(10, ge=1, le=200),
    db: DBSession = Depends(get_db),
):
    """List the most recent jobs."""
    return get_recent_jobs(db, limit=limit)


@router.post("/jobs/{job_id}/transcription", response_model=JobResponse)
async def report_transcription(
    timing: StageTimingRequest,
    job_id: str = Path(..., description="Job ID"),
    db: DBSession = Depends(get_db),
):
    """Report the transcription stage timing of a job."""
    job = update_transcription_progress(db, job_id, timing.started_at, timing.finished_at)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("/jobs/{job_id}/summary", response_model=JobResponse)
async def report_summary(
    timing: StageTimingRequest,
    job_id: str = Path(..., description="Job ID"),
    db: DBSession = Depends(get_db),
):
    """Report the summary stage timing of a job."""
    job = update_summary_progress(db, job_id, timing.started_at, timing.finished_at)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("/jobs/{job_id}/complete", response_model=JobResponse)
async def finish_job(
    request: JobCompleteRequest,
    job_id: str = Path(..., description="Job ID"),
    db: DBSession = Depends(get_db),
):
    """Mark a job as finished so it can feed future predictions."""
    job = complete_job(db, job_id, request.success, request.error)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job
