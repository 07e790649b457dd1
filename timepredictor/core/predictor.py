"""
Processing-time prediction from historical statistics.

Estimates are produced by three fallback tiers, each carrying a confidence
score: historical rates (confidence grows with sample size), model-specific
defaults and global defaults. A content-type multiplier learned from the
history is applied on top of whichever tier wins.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from timepredictor.config import predictor_config
from timepredictor.core.formatter import format_duration, format_rate, round_estimate, round_half_up
from timepredictor.core.stats import as_utc, compute_stats
from timepredictor.models.schemas import (
    BasedOn,
    ContentType,
    HistoricalRecord,
    ModelsWithStats,
    PredictionInput,
    PredictionResult,
    StatsSnapshot,
    StatsSummary,
)
from timepredictor.utils.logger import logging

V = TypeVar("V")


@dataclass(frozen=True)
class Estimate:
    """Raw stage estimates from one tier."""
    transcription: float
    summary: float
    confidence: float
    sample_size: int = 0


def lookup_with_fallback(mapping: Mapping[str, V], keys: Sequence[str]) -> Optional[V]:
    """Return the value of the first key present in the mapping."""
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def global_default_estimate(prediction_input: PredictionInput) -> Estimate:
    """Tier 1: size-proportional defaults, or a flat fallback without any size."""
    cfg = predictor_config
    duration = prediction_input.duration_seconds
    chars = prediction_input.character_count

    if duration:
        transcription = (duration / 60) * cfg.DEFAULT_TRANSCRIPTION_SECONDS_PER_MINUTE
        summary = (duration / 60) * cfg.DEFAULT_SUMMARY_SECONDS_PER_MINUTE
    elif chars:
        transcription = (chars / 1000) * cfg.DEFAULT_TRANSCRIPTION_SECONDS_PER_KCHAR
        summary = (chars / 1000) * cfg.DEFAULT_SUMMARY_SECONDS_PER_KCHAR
    else:
        transcription = cfg.FALLBACK_TRANSCRIPTION_SECONDS
        summary = cfg.FALLBACK_SUMMARY_SECONDS

    return Estimate(transcription, summary, cfg.GLOBAL_DEFAULT_CONFIDENCE)


def model_default_estimate(prediction_input: PredictionInput) -> Estimate:
    """Tier 2: per-model rate tables layered over the global defaults."""
    cfg = predictor_config
    duration = prediction_input.duration_seconds
    chars = prediction_input.character_count
    is_pdf = prediction_input.content_type == ContentType.PDF

    base = global_default_estimate(prediction_input)
    transcription = base.transcription
    summary = base.summary

    transcription_rate = cfg.TRANSCRIPTION_MODEL_RATES.get(prediction_input.transcription_model)
    if transcription_rate and duration:
        transcription = (duration / 60) * transcription_rate
    elif is_pdf and chars:
        transcription = (chars / 1000) * cfg.DEFAULT_TRANSCRIPTION_SECONDS_PER_KCHAR

    coefficient = cfg.SUMMARY_MODEL_COEFFICIENTS.get(prediction_input.summary_model)
    if coefficient and duration:
        summary = (duration / 60) * cfg.DEFAULT_SUMMARY_SECONDS_PER_MINUTE * coefficient
    elif is_pdf and chars:
        summary = (chars / 1000) * cfg.DEFAULT_SUMMARY_SECONDS_PER_KCHAR * (
            coefficient or cfg.DEFAULT_SUMMARY_COEFFICIENT
        )

    return Estimate(transcription, summary, cfg.MODEL_DEFAULT_CONFIDENCE)


def _historical_confidence(sample_size: int) -> float:
    cfg = predictor_config
    return min(cfg.HISTORICAL_CONFIDENCE_CAP, sample_size / cfg.HISTORICAL_SAMPLES_FOR_FULL_CONFIDENCE)


def historical_estimate(prediction_input: PredictionInput, snapshot: StatsSnapshot) -> Estimate:
    """
    Tier 3: scale the input size by the averaged historical rates.

    A stage without usable history contributes zero time and no samples.
    """
    minimum = predictor_config.MIN_GROUP_SAMPLES
    duration = prediction_input.duration_seconds
    chars = prediction_input.character_count

    transcription_stats = lookup_with_fallback(
        snapshot.transcription_stats,
        (prediction_input.transcription_model,) + tuple(predictor_config.TRANSCRIPTION_FALLBACK_KEYS),
    )
    summary_stats = snapshot.summary_stats.get(prediction_input.summary_model)

    transcription = 0.0
    summary = 0.0
    confidence = 0.0
    samples = 0

    if transcription_stats and transcription_stats.sample_size >= minimum:
        if (
            prediction_input.content_type == ContentType.PDF
            and chars
            and transcription_stats.average_seconds_per_kchar
        ):
            transcription = (chars / 1000) * transcription_stats.average_seconds_per_kchar
        elif duration and transcription_stats.average_seconds_per_minute:
            transcription = (duration / 60) * transcription_stats.average_seconds_per_minute

        if transcription > 0:
            confidence = _historical_confidence(transcription_stats.sample_size)
            samples += transcription_stats.sample_size

    if summary_stats and summary_stats.sample_size >= minimum:
        if chars and summary_stats.average_seconds_per_kchar:
            summary = (chars / 1000) * summary_stats.average_seconds_per_kchar
        elif duration and summary_stats.average_seconds_per_minute:
            summary = (duration / 60) * summary_stats.average_seconds_per_minute

        if summary > 0:
            confidence = max(confidence, _historical_confidence(summary_stats.sample_size))
            samples += summary_stats.sample_size

    # Averaged across both stages even when only one contributed
    return Estimate(transcription, summary, confidence, round_half_up(samples / 2))


def _bounded(seconds: float) -> float:
    limit = predictor_config.MAX_STAGE_SECONDS
    return seconds if seconds <= limit else limit


class ProcessingTimePredictor:
    """Predicts transcription and summary times for new jobs."""

    def __init__(
        self,
        records: Iterable[HistoricalRecord] = (),
        now: Optional[datetime] = None,
        window_days: Optional[int] = None,
    ):
        """
        Build the predictor and its statistics snapshot.

        Args:
            records: Completed job records supplied by the history store
            now: Reference time for the statistics window
            window_days: Window length in days (defaults to the configured window)
        """
        self.records = tuple(records)
        self.now = as_utc(now or datetime.now(timezone.utc))
        self.window_days = window_days if window_days is not None else predictor_config.HISTORY_WINDOW_DAYS
        self.stats = compute_stats(self.records, now=self.now, window_days=self.window_days)

    def predict(self, prediction_input: PredictionInput) -> PredictionResult:
        """
        Predict processing times for a job.

        Args:
            prediction_input: Content type, size and model choice of the job

        Returns:
            PredictionResult with rounded stage times, confidence and display strings
        """
        cfg = predictor_config
        chosen = global_default_estimate(prediction_input)
        based_on = BasedOn.GLOBAL_DEFAULT

        historical = historical_estimate(prediction_input, self.stats)
        if historical.confidence > cfg.MODEL_DEFAULT_CONFIDENCE:
            chosen = historical
            based_on = BasedOn.HISTORICAL
        else:
            model_defaults = model_default_estimate(prediction_input)
            if model_defaults.confidence > chosen.confidence:
                chosen = model_defaults
                based_on = BasedOn.MODEL_DEFAULT

        transcription = _bounded(chosen.transcription)
        summary = _bounded(chosen.summary)
        confidence = chosen.confidence

        multiplier = self.stats.content_type_multipliers.get(prediction_input.content_type)
        if multiplier and multiplier.sample_size >= cfg.MIN_GROUP_SAMPLES:
            transcription *= multiplier.transcription_multiplier
            summary *= multiplier.summary_multiplier
            confidence = min(cfg.MULTIPLIER_CONFIDENCE_CAP, confidence + cfg.MULTIPLIER_CONFIDENCE_BOOST)

        transcription = _bounded(transcription)
        summary = _bounded(summary)
        total = transcription + summary
        logging.debug(
            f"Prediction for {prediction_input.content_type.value} based on {based_on.value}: "
            f"transcription={transcription:.2f}s summary={summary:.2f}s confidence={confidence:.2f}"
        )

        return PredictionResult(
            transcription_seconds=round_estimate(transcription),
            summary_seconds=round_estimate(summary),
            total_seconds=round_estimate(total),
            confidence=confidence,
            based_on=based_on,
            sample_size=chosen.sample_size,
            formatted_total=format_duration(total),
            transcription_rate_display=format_rate(prediction_input, transcription, "transcription"),
            summary_rate_display=format_rate(prediction_input, summary, "summary"),
        )

    def stats_summary(self) -> StatsSummary:
        """Overview of the history this predictor was built from."""
        cutoff = self.now - timedelta(days=self.window_days)
        recent = [
            r for r in self.records
            if r.timestamp is not None and as_utc(r.timestamp) >= cutoff
        ]
        return StatsSummary(
            total_historical_entries=len(self.records),
            recent_entries=len(recent),
            models_with_stats=ModelsWithStats(
                transcription=list(self.stats.transcription_stats),
                summary=list(self.stats.summary_stats),
            ),
            content_types=list(self.stats.content_type_multipliers),
        )


def create_time_predictor(records: Iterable[HistoricalRecord]) -> ProcessingTimePredictor:
    """Create a predictor from the current job history."""
    return ProcessingTimePredictor(records)
