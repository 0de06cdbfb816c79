"""Naming conventions shared by every path that touches derived artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MediaKind(str, Enum):
    """Media kind of a stored file, decided by its extension."""

    AUDIO = "audio"
    VIDEO = "video"
    IMAGE = "image"
    OTHER = "other"

    @property
    def viewable(self) -> bool:
        return self is not MediaKind.OTHER


@dataclass(frozen=True)
class NamingConventions:
    """Immutable folder/suffix/prefix conventions for one deployment.

    The external processing pipeline writes transcripts, redacted variants,
    labels and EXIF metadata next to the primary media files using these
    names.  Defaults match the pipeline's stock configuration.
    """

    transcript_folder: str = "transcribed_files"
    transcript_suffix: str = "-transcribed.json"
    document_suffix: str = ".docx"
    redacted_media_prefix: str = "audio_redacted-"
    redacted_transcription_prefix: str = "redacted-"
    redaction_indicator: str = "[PII]"
    image_metadata_folder: str = "image_metadata"
    image_metadata_suffix: str = ".json"
    image_recognition_suffix: str = ".rekog.json"
    video_label_folder: str = "video_labels"
    video_label_suffix: str = ".rek.json"
    signed_url_expiry_seconds: int = 24 * 60 * 60
    block_seconds: float = 10.0
    max_file_name_length: int = 1024

    @property
    def derived_folders(self) -> tuple[str, str, str]:
        return (self.transcript_folder, self.image_metadata_folder, self.video_label_folder)
