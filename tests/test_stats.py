"""
Tests for the statistics aggregator.
"""

import pytest

from timepredictor.core.stats import compute_stats, filter_recent_records, remove_outliers
from timepredictor.models.schemas import ContentType, HistoricalRecord


def test_empty_history_gives_empty_snapshot(now):
    snapshot = compute_stats([], now=now)

    assert snapshot.transcription_stats == {}
    assert snapshot.summary_stats == {}
    assert snapshot.content_type_multipliers == {}
    assert snapshot.is_empty()


def test_remove_outliers_keeps_small_samples():
    assert remove_outliers([1.0, 2.0, 1000.0]) == [1.0, 2.0, 1000.0]
    assert remove_outliers([]) == []


def test_remove_outliers_drops_extreme_value():
    values = [10.0, 10.0, 10.0, 10.0, 10.0, 100.0]
    assert remove_outliers(values) == [10.0] * 5


def test_remove_outliers_keeps_values_inside_band():
    values = [10.0, 11.0, 12.0, 13.0]
    assert remove_outliers(values) == values


def test_single_sample_group_has_no_entry(make_record, now):
    records = [
        make_record(method="whisper-1"),
        make_record(method="whisper-1"),
        make_record(method="subtitle"),
    ]
    snapshot = compute_stats(records, now=now)

    assert "whisper-1" in snapshot.transcription_stats
    assert "subtitle" not in snapshot.transcription_stats


def test_transcription_rates(make_record, now):
    records = [
        make_record(transcription_seconds=60.0),
        make_record(transcription_seconds=120.0),
    ]
    stats = compute_stats(records, now=now).transcription_stats["whisper-1"]

    # 600 s of media is 10 minutes and 10k characters
    assert stats.average_seconds_per_minute == pytest.approx(9.0)
    assert stats.average_seconds_per_kchar == pytest.approx(9.0)
    assert stats.sample_size == 2
    assert stats.recent_samples == pytest.approx((6.0, 12.0))


def test_outlier_excluded_from_average(make_record, now):
    records = [make_record(transcription_seconds=60.0) for _ in range(5)]
    records.append(make_record(transcription_seconds=600.0))
    stats = compute_stats(records, now=now).transcription_stats["whisper-1"]

    assert stats.average_seconds_per_minute == pytest.approx(6.0)
    assert stats.sample_size == 5


def test_recent_samples_keep_last_five(make_record, now):
    records = [make_record(transcription_seconds=60.0 + i) for i in range(7)]
    stats = compute_stats(records, now=now).transcription_stats["whisper-1"]

    assert stats.sample_size == 7
    assert stats.recent_samples == pytest.approx((6.2, 6.3, 6.4, 6.5, 6.6))


def test_records_outside_window_ignored(make_record, now):
    records = [make_record(days_ago=40), make_record(days_ago=31)]
    assert compute_stats(records, now=now).is_empty()


def test_window_length_is_configurable(make_record, now):
    records = [make_record(days_ago=40), make_record(days_ago=45)]
    snapshot = compute_stats(records, now=now, window_days=60)
    assert "whisper-1" in snapshot.transcription_stats


def test_malformed_records_filtered(make_record, now):
    valid = make_record()
    records = [
        valid,
        make_record(transcription_seconds=None),
        make_record(summary_seconds=-5.0),
        make_record(duration=None, chars=None),
        make_record(duration=0, chars=0),
        HistoricalRecord(
            transcription_method="whisper-1",
            media_duration_seconds=600,
            measured_transcription_seconds=60,
            measured_summary_seconds=120,
        ),
    ]

    assert filter_recent_records(records, now=now) == [valid]


def test_zero_duration_excluded_from_minute_rates(make_record, now):
    records = [
        make_record(transcription_seconds=60.0, duration=0, chars=10000),
        make_record(transcription_seconds=60.0, duration=600, chars=10000),
        make_record(transcription_seconds=60.0, duration=600, chars=10000),
    ]
    stats = compute_stats(records, now=now).transcription_stats["whisper-1"]

    assert stats.sample_size == 2
    assert stats.average_seconds_per_minute == pytest.approx(6.0)
    assert stats.average_seconds_per_kchar == pytest.approx(6.0)


def test_transcription_entry_needs_duration_rates(make_record, now):
    records = [
        make_record(duration=None, content_type=ContentType.PDF),
        make_record(duration=None, content_type=ContentType.PDF),
    ]
    assert compute_stats(records, now=now).transcription_stats == {}


def test_summary_entry_needs_both_dimensions(make_record, now):
    records = [make_record(chars=None), make_record(chars=None)]
    snapshot = compute_stats(records, now=now)

    assert "whisper-1" in snapshot.transcription_stats
    assert snapshot.summary_stats == {}


def test_summary_rates(make_record, now):
    records = [make_record(summary_seconds=120.0), make_record(summary_seconds=180.0)]
    stats = compute_stats(records, now=now).summary_stats["gpt-4o-mini"]

    assert stats.average_seconds_per_minute == pytest.approx(15.0)
    assert stats.average_seconds_per_kchar == pytest.approx(15.0)
    assert stats.sample_size == 2


def test_content_type_multipliers(make_record, now):
    records = [
        make_record(transcription_seconds=60.0, summary_seconds=120.0),
        make_record(transcription_seconds=60.0, summary_seconds=120.0),
        make_record(transcription_seconds=30.0, summary_seconds=240.0, content_type=ContentType.PDF),
        make_record(transcription_seconds=30.0, summary_seconds=240.0, content_type=ContentType.PDF),
        make_record(content_type=ContentType.AUDIO),
    ]
    multipliers = compute_stats(records, now=now).content_type_multipliers

    assert multipliers[ContentType.YOUTUBE].transcription_multiplier == pytest.approx(1.0)
    assert multipliers[ContentType.YOUTUBE].summary_multiplier == pytest.approx(1.0)
    assert multipliers[ContentType.PDF].transcription_multiplier == pytest.approx(0.5)
    assert multipliers[ContentType.PDF].summary_multiplier == pytest.approx(2.0)
    assert multipliers[ContentType.PDF].sample_size == 2
    assert ContentType.AUDIO not in multipliers


def test_multipliers_need_youtube_baseline(make_record, now):
    records = [
        make_record(content_type=ContentType.YOUTUBE),
        make_record(content_type=ContentType.PDF),
        make_record(content_type=ContentType.PDF),
        make_record(content_type=ContentType.PDF),
    ]
    assert compute_stats(records, now=now).content_type_multipliers == {}


def test_content_type_inferred_from_source(make_record, now):
    records = [
        make_record(content_type=None, source_url="https://youtu.be/abc"),
        make_record(content_type=None, source_url="https://youtu.be/def"),
        make_record(content_type=None, source_url="file:///a/talk.mp3", transcription_seconds=90.0),
        make_record(content_type=None, source_url="file:///a/talk2.mp3", transcription_seconds=90.0),
    ]
    multipliers = compute_stats(records, now=now).content_type_multipliers

    assert multipliers[ContentType.AUDIO].transcription_multiplier == pytest.approx(1.5)


def test_entry_needs_two_usable_rates(make_record, now):
    records = [
        make_record(duration=0, chars=10000),
        make_record(duration=0, chars=10000),
        make_record(duration=600, chars=10000),
    ]
    snapshot = compute_stats(records, now=now)

    assert "whisper-1" not in snapshot.transcription_stats


def test_summary_entry_needs_two_samples_in_both_dimensions(make_record, now):
    records = [make_record(chars=None), make_record(chars=10000)]
    assert compute_stats(records, now=now).summary_stats == {}
