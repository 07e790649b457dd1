"""
Tests for content-type classification of job sources.
"""

import pytest

from timepredictor.core.content_type import (
    ContentSource,
    SourceKind,
    classify_content_source,
    describe_source,
    infer_content_type,
)
from timepredictor.models.schemas import ContentType, HistoricalRecord


def test_describe_youtube_url():
    source = describe_source("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    assert source.kind == SourceKind.URL
    assert "youtube.com" in source.domain_hints
    assert source.pdf_marker is False


def test_describe_file_url():
    source = describe_source("file:///uploads/Interview.MP3")

    assert source.kind == SourceKind.FILE
    assert source.extension == "mp3"


@pytest.mark.parametrize("url, expected", [
    ("https://youtu.be/dQw4w9WgXcQ", ContentType.YOUTUBE),
    ("https://example.com/papers/report.pdf", ContentType.PDF),
    ("https://example.com/download?file=report.pdf&v=2", ContentType.PDF),
    ("https://arxiv.org/abs/2401.00001", ContentType.PDF),
    ("https://doi.org/10.1000/182", ContentType.PDF),
    ("file:///uploads/podcast.wav", ContentType.AUDIO),
    ("file:///uploads/lecture.mp4", ContentType.VIDEO),
    ("file:///uploads/recording", ContentType.VIDEO),
    ("https://example.com/something", ContentType.YOUTUBE),
    ("", ContentType.YOUTUBE),
])
def test_classify_urls(url, expected):
    assert classify_content_source(describe_source(url)) == expected


def test_pdf_marker_wins_over_file_scheme():
    source = ContentSource(kind=SourceKind.FILE, extension="pdf")
    assert classify_content_source(source) == ContentType.PDF


def test_explicit_content_type_wins():
    record = HistoricalRecord(
        content_type=ContentType.AUDIO,
        source_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    )
    assert infer_content_type(record) == ContentType.AUDIO


def test_infer_from_source_url():
    record = HistoricalRecord(source_url="file:///uploads/talk.mp3")
    assert infer_content_type(record) == ContentType.AUDIO


def test_infer_defaults_to_youtube():
    assert infer_content_type(HistoricalRecord()) == ContentType.YOUTUBE
