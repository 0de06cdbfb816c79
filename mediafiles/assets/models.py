"""Data models for the asset relationship and timeline engine."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime

from mediafiles.conventions import MediaKind


@dataclass(frozen=True)
class ObjectEntry:
    """Raw record returned by the object store listing."""

    key: str
    size: int = 0
    last_modified: datetime | None = None


@dataclass
class CatalogItem:
    """UI-facing projection of one primary object.

    Only ``selected`` is meant to change after projection.
    """

    key: str
    name: str
    display_name: str
    is_redacted: bool
    kind: MediaKind
    viewable: bool
    icon: str
    view_icon: str | None
    signed_url: str
    size: str
    size_bytes: int = 0
    last_modified: datetime | None = None
    selected: bool = False


@dataclass(frozen=True)
class DerivedKeySet:
    """Keys of the artifacts the processing pipeline derives from one file."""

    transcript_json: str | None = None
    transcript_document: str | None = None
    image_metadata: str | None = None
    image_recognition: str | None = None
    video_labels: str | None = None

    def keys(self) -> Iterator[str]:
        for key in (
            self.transcript_json,
            self.transcript_document,
            self.image_metadata,
            self.image_recognition,
            self.video_labels,
        ):
            if key is not None:
                yield key


@dataclass
class TranscriptWord:
    """One pronunciation or punctuation item of a transcript."""

    text: str
    confidence_label: str
    is_redacted: bool = False
    is_punctuation: bool = False
    start_time: float | None = None
    end_time: float | None = None


@dataclass
class TranscriptBlock:
    """A run of words displayed together under one timestamp label."""

    id: str
    start_time: float
    end_time: float | None = None
    words: list[TranscriptWord] = field(default_factory=list)


@dataclass(frozen=True)
class ImageMetadataRecord:
    key: str
    value: str


@dataclass(frozen=True)
class RecognitionLabel:
    word: str
    confidence_percent: int


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float
