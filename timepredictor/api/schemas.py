from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from timepredictor.models.schemas import ContentType


class JobCreateRequest(BaseModel):
    """Model for registering a new analysis job."""
    transcription_method: str
    summary_model: str
    content_type: Optional[ContentType] = None
    source_url: Optional[str] = None
    media_duration_seconds: Optional[float] = None
    text_length_chars: Optional[int] = None
    language: Optional[str] = None


class StageTimingRequest(BaseModel):
    """Model for reporting a stage's start and end time."""
    started_at: datetime
    finished_at: Optional[datetime] = None


class JobCompleteRequest(BaseModel):
    """Model for marking a job as finished."""
    success: bool = True
    error: Optional[str] = None


class JobResponse(BaseModel):
    """Model for job responses."""
    id: str
    content_type: Optional[str] = None
    source_url: Optional[str] = None
    transcription_method: str
    summary_model: str
    media_duration_seconds: Optional[float] = None
    text_length_chars: Optional[int] = None
    transcription_seconds: Optional[float] = None
    summary_seconds: Optional[float] = None
    success: bool
    error: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
