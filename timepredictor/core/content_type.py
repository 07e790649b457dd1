"""
Content-type classification for historical job sources.

A source URL is first described as a small tagged structure (scheme kind,
file extension, recognised domain hints) and the classification rules run
over that structure, so each rule can be exercised on its own.
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import FrozenSet, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

from timepredictor.models.schemas import ContentType, HistoricalRecord


YOUTUBE_HINTS = frozenset({"youtube.com", "youtu.be"})
ACADEMIC_HINTS = frozenset({"arxiv", "doi"})
PDF_MARKER = ".pdf"
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "m4a", "aac", "flac", "ogg", "opus"})


class SourceKind(str, Enum):
    URL = "url"
    FILE = "file"


class ContentSource(BaseModel):
    """Tagged description of where a job's content came from."""
    kind: SourceKind = SourceKind.URL
    extension: Optional[str] = None
    domain_hints: FrozenSet[str] = frozenset()
    pdf_marker: bool = False

    model_config = ConfigDict(frozen=True)


def describe_source(url: str) -> ContentSource:
    """
    Build a ContentSource descriptor from a raw source URL.

    Args:
        url: Source URL or file:// path of a job

    Returns:
        ContentSource descriptor
    """
    lowered = (url or "").strip().lower()
    parsed = urlparse(lowered)

    kind = SourceKind.FILE if parsed.scheme == "file" else SourceKind.URL
    suffix = PurePosixPath(parsed.path).suffix.lstrip(".")
    hints = frozenset(
        hint for hint in YOUTUBE_HINTS | ACADEMIC_HINTS if hint in lowered
    )

    return ContentSource(
        kind=kind,
        extension=suffix or None,
        domain_hints=hints,
        pdf_marker=PDF_MARKER in lowered,
    )


def classify_content_source(source: ContentSource) -> ContentType:
    """Map a source descriptor onto a content type."""
    if source.pdf_marker or source.extension == "pdf" or source.domain_hints & ACADEMIC_HINTS:
        return ContentType.PDF
    if source.domain_hints & YOUTUBE_HINTS:
        return ContentType.YOUTUBE
    if source.kind == SourceKind.FILE:
        if source.extension in AUDIO_EXTENSIONS:
            return ContentType.AUDIO
        return ContentType.VIDEO
    return ContentType.YOUTUBE


def infer_content_type(record: HistoricalRecord) -> ContentType:
    """Content type of a historical record, classifying its source when unset."""
    if record.content_type is not None:
        return record.content_type
    if record.source_url:
        return classify_content_source(describe_source(record.source_url))
    return ContentType.YOUTUBE
