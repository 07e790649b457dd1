"""
Data models for the processing-time predictor.
"""
import math
import sys
from datetime import datetime
from types import MappingProxyType
from enum import Enum
from typing import Optional, List, Dict, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Category of ingested material."""
    YOUTUBE = "youtube"
    PDF = "pdf"
    AUDIO = "audio"
    VIDEO = "video"


class BasedOn(str, Enum):
    """Which fallback tier produced an estimate."""
    HISTORICAL = "historical"
    MODEL_DEFAULT = "model_default"
    GLOBAL_DEFAULT = "global_default"


class HistoricalRecord(BaseModel):
    """One completed job with its measured stage timings."""
    content_type: Optional[ContentType] = None
    source_url: Optional[str] = None
    transcription_method: str = "whisper"
    summary_model: str = "gpt-4o-mini"
    media_duration_seconds: Optional[float] = None
    text_length_chars: Optional[int] = None
    measured_transcription_seconds: Optional[float] = None
    measured_summary_seconds: Optional[float] = None
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def has_timings(self) -> bool:
        """Both stage timings are present and non-negative."""
        return (
            self.measured_transcription_seconds is not None
            and self.measured_summary_seconds is not None
            and self.measured_transcription_seconds >= 0
            and self.measured_summary_seconds >= 0
        )

    @property
    def has_size(self) -> bool:
        """At least one rate divisor is positive."""
        return bool(
            (self.media_duration_seconds and self.media_duration_seconds > 0)
            or (self.text_length_chars and self.text_length_chars > 0)
        )


class RateStats(BaseModel):
    """Average processing rates for one model or transcription method."""
    average_seconds_per_minute: float
    average_seconds_per_kchar: Optional[float] = None
    sample_size: int
    recent_samples: Tuple[float, ...] = ()

    model_config = ConfigDict(frozen=True)


class ContentTypeMultiplier(BaseModel):
    """Stage time multipliers relative to the youtube baseline."""
    transcription_multiplier: float
    summary_multiplier: float
    sample_size: int

    model_config = ConfigDict(frozen=True)


class StatsSnapshot(BaseModel):
    """Statistics derived once from a window of historical records."""
    transcription_stats: Dict[str, RateStats] = Field(default_factory=dict)
    summary_stats: Dict[str, RateStats] = Field(default_factory=dict)
    content_type_multipliers: Dict[ContentType, ContentTypeMultiplier] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def model_post_init(self, __context):
        # Inner mappings are read-only views
        for name in ("transcription_stats", "summary_stats", "content_type_multipliers"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def is_empty(self) -> bool:
        return not (self.transcription_stats or self.summary_stats or self.content_type_multipliers)


class PredictionInput(BaseModel):
    """Characteristics of a job whose processing time is being predicted."""
    content_type: ContentType = ContentType.YOUTUBE
    duration_seconds: Optional[float] = None
    character_count: Optional[int] = None
    transcription_model: str = "whisper-1"
    summary_model: str = "gpt-4o-mini"
    language: str = "original"

    @field_validator("duration_seconds", "character_count")
    def ignore_unusable_sizes(cls, v):
        # Negative, non-finite or unrepresentable sizes carry no information; treat them as absent
        if v is None:
            return v
        if isinstance(v, float) and not math.isfinite(v):
            return None
        if v < 0 or v > sys.float_info.max:
            return None
        return v


class PredictionResult(BaseModel):
    """Predicted stage and total processing times."""
    transcription_seconds: Union[int, float]
    summary_seconds: Union[int, float]
    total_seconds: Union[int, float]
    confidence: float = Field(..., ge=0.0, le=1.0)
    based_on: BasedOn
    sample_size: int = 0
    formatted_total: str
    transcription_rate_display: str
    summary_rate_display: str


class ModelsWithStats(BaseModel):
    transcription: List[str] = []
    summary: List[str] = []


class StatsSummary(BaseModel):
    """Overview of the history a predictor was built from."""
    total_historical_entries: int
    recent_entries: int
    models_with_stats: ModelsWithStats
    content_types: List[ContentType] = []
