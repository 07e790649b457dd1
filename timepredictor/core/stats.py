"""
Aggregation of historical job records into processing-rate statistics.
"""

import math
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from timepredictor.config import predictor_config
from timepredictor.core.content_type import infer_content_type
from timepredictor.models.schemas import (
    ContentType,
    ContentTypeMultiplier,
    HistoricalRecord,
    RateStats,
    StatsSnapshot,
)
from timepredictor.utils.logger import logging


def remove_outliers(values: Sequence[float]) -> List[float]:
    """
    Drop values further than two standard deviations from the mean.

    Fewer than four values are returned unchanged.

    Args:
        values: Raw measurements

    Returns:
        Values within the accepted band, in their original order
    """
    values = list(values)
    if len(values) < predictor_config.OUTLIER_MIN_SAMPLES:
        return values

    mean = sum(values) / len(values)
    std_dev = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    limit = predictor_config.OUTLIER_STD_DEVS * std_dev

    return [v for v in values if abs(v - mean) <= limit]


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def filter_recent_records(
    records: Iterable[HistoricalRecord],
    now: Optional[datetime] = None,
    window_days: Optional[int] = None,
) -> List[HistoricalRecord]:
    """Records inside the trailing window that can feed rate statistics."""
    now = as_utc(now or datetime.now(timezone.utc))
    window = window_days if window_days is not None else predictor_config.HISTORY_WINDOW_DAYS
    cutoff = now - timedelta(days=window)

    recent = []
    for record in records:
        if record.timestamp is None or as_utc(record.timestamp) < cutoff:
            continue
        if not record.has_timings or not record.has_size:
            continue
        recent.append(record)
    return recent


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _per_minute(seconds: float, record: HistoricalRecord) -> Optional[float]:
    duration = record.media_duration_seconds
    if not duration or duration <= 0:
        return None
    return seconds / (duration / 60)


def _per_kchar(seconds: float, record: HistoricalRecord) -> Optional[float]:
    chars = record.text_length_chars
    if not chars or chars <= 0:
        return None
    return seconds / (chars / 1000)


def _clean_samples(samples: List[HistoricalRecord], timing: str) -> List[HistoricalRecord]:
    """Samples whose stage timing survives outlier rejection."""
    kept = set(remove_outliers([getattr(s, timing) for s in samples]))
    return [s for s in samples if getattr(s, timing) in kept]


def _transcription_stats(samples: List[HistoricalRecord]) -> Optional[RateStats]:
    timing = "measured_transcription_seconds"
    clean = _clean_samples(samples, timing)

    rates = [r for r in (_per_minute(getattr(s, timing), s) for s in clean) if r is not None]
    if len(rates) < predictor_config.MIN_GROUP_SAMPLES:
        return None

    char_rates = [r for r in (_per_kchar(getattr(s, timing), s) for s in clean) if r is not None]

    return RateStats(
        average_seconds_per_minute=_mean(rates),
        average_seconds_per_kchar=_mean(char_rates) if char_rates else None,
        sample_size=len(rates),
        recent_samples=tuple(rates[-predictor_config.RECENT_SAMPLE_LIMIT:]),
    )


def _summary_stats(samples: List[HistoricalRecord]) -> Optional[RateStats]:
    timing = "measured_summary_seconds"
    clean = _clean_samples(samples, timing)

    rates = [r for r in (_per_minute(getattr(s, timing), s) for s in clean) if r is not None]
    char_rates = [r for r in (_per_kchar(getattr(s, timing), s) for s in clean) if r is not None]

    # Summary rates are only trusted when both dimensions are measured
    sample_size = min(len(rates), len(char_rates))
    if sample_size < predictor_config.MIN_GROUP_SAMPLES:
        return None

    return RateStats(
        average_seconds_per_minute=_mean(rates),
        average_seconds_per_kchar=_mean(char_rates),
        sample_size=sample_size,
        recent_samples=tuple(rates[-predictor_config.RECENT_SAMPLE_LIMIT:]),
    )


def _content_type_multipliers(
    groups: Dict[ContentType, List[HistoricalRecord]]
) -> Dict[ContentType, ContentTypeMultiplier]:
    minimum = predictor_config.MIN_GROUP_SAMPLES
    baseline = groups.get(ContentType.YOUTUBE, [])
    if len(baseline) < minimum:
        return {}

    baseline_transcription = _mean([s.measured_transcription_seconds for s in baseline])
    baseline_summary = _mean([s.measured_summary_seconds for s in baseline])
    if baseline_transcription <= 0 or baseline_summary <= 0:
        logging.debug("Youtube baseline has zero average timing, skipping multipliers")
        return {}

    multipliers = {}
    for content_type, samples in groups.items():
        if len(samples) < minimum:
            continue
        multipliers[content_type] = ContentTypeMultiplier(
            transcription_multiplier=_mean([s.measured_transcription_seconds for s in samples]) / baseline_transcription,
            summary_multiplier=_mean([s.measured_summary_seconds for s in samples]) / baseline_summary,
            sample_size=len(samples),
        )
    return multipliers


def compute_stats(
    records: Iterable[HistoricalRecord],
    now: Optional[datetime] = None,
    window_days: Optional[int] = None,
) -> StatsSnapshot:
    """
    Compute a statistics snapshot from historical job records.

    Args:
        records: Completed job records, oldest first
        now: Reference time for the trailing window (defaults to the current UTC time)
        window_days: Window length in days (defaults to the configured window)

    Returns:
        StatsSnapshot with per-method, per-model and per-content-type statistics
    """
    recent = filter_recent_records(records, now=now, window_days=window_days)
    if not recent:
        return StatsSnapshot()

    transcription_groups: Dict[str, List[HistoricalRecord]] = defaultdict(list)
    summary_groups: Dict[str, List[HistoricalRecord]] = defaultdict(list)
    content_type_groups: Dict[ContentType, List[HistoricalRecord]] = defaultdict(list)

    for record in recent:
        transcription_groups[record.transcription_method].append(record)
        summary_groups[record.summary_model].append(record)
        content_type_groups[infer_content_type(record)].append(record)

    minimum = predictor_config.MIN_GROUP_SAMPLES

    transcription_stats = {}
    for method, samples in transcription_groups.items():
        if len(samples) < minimum:
            continue
        stats = _transcription_stats(samples)
        if stats is not None:
            transcription_stats[method] = stats

    summary_stats = {}
    for model, samples in summary_groups.items():
        if len(samples) < minimum:
            continue
        stats = _summary_stats(samples)
        if stats is not None:
            summary_stats[model] = stats

    snapshot = StatsSnapshot(
        transcription_stats=transcription_stats,
        summary_stats=summary_stats,
        content_type_multipliers=_content_type_multipliers(content_type_groups),
    )
    logging.debug(
        f"Computed stats from {len(recent)} records: "
        f"{len(transcription_stats)} transcription, {len(summary_stats)} summary, "
        f"{len(snapshot.content_type_multipliers)} content types"
    )
    return snapshot
