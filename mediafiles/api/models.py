"""Pydantic request/response schemas for the Media Files API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from mediafiles.assets.notices import NoticeLevel
from mediafiles.conventions import MediaKind


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class NoticeModel(_FromAttributes):
    """A user-facing message; sticky ones stay until dismissed."""

    level: NoticeLevel
    message: str
    title: str | None = None
    sticky: bool = False


class CatalogItemModel(_FromAttributes):
    key: str
    name: str
    display_name: str
    is_redacted: bool
    kind: MediaKind
    viewable: bool
    icon: str
    view_icon: str | None = None
    signed_url: str
    size: str
    size_bytes: int = 0
    last_modified: datetime | None = None
    selected: bool = False


class CatalogResponse(BaseModel):
    """Response body for GET /api/files."""

    files: list[CatalogItemModel]
    notices: list[NoticeModel] = []


class DeleteRequest(BaseModel):
    """Keys of the catalog files selected for deletion."""

    keys: list[str]


class DeleteResponse(BaseModel):
    deleted_keys: list[str]
    files: list[CatalogItemModel]
    notices: list[NoticeModel] = []


class TranscriptWordModel(_FromAttributes):
    text: str
    confidence_label: str
    is_redacted: bool = False
    is_punctuation: bool = False
    start_time: float | None = None
    end_time: float | None = None


class TranscriptBlockModel(_FromAttributes):
    id: str
    start_time: float
    end_time: float | None = None
    words: list[TranscriptWordModel] = []


class MetadataRecordModel(_FromAttributes):
    key: str
    value: str


class RecognitionLabelModel(_FromAttributes):
    word: str
    confidence_percent: int


class CoordinatesModel(_FromAttributes):
    latitude: float
    longitude: float


class MediaPreviewModel(_FromAttributes):
    name: str
    url: str
    kind: MediaKind
    view_icon: str | None = None
    transcript_document_url: str | None = None
    has_transcription: bool = False
    blocks: list[TranscriptBlockModel] = []


class ImagePreviewModel(_FromAttributes):
    name: str
    url: str
    view_icon: str | None = None
    has_metadata: bool = False
    metadata: list[MetadataRecordModel] = []
    has_recognition: bool = False
    labels: list[RecognitionLabelModel] = []
    coordinates: CoordinatesModel | None = None
    has_lat_long: bool = False
    map_markers: list[dict[str, dict[str, float]]] = []


class PreviewResponse(BaseModel):
    """Exactly one of ``media`` / ``image`` is set."""

    media: MediaPreviewModel | None = None
    image: ImagePreviewModel | None = None


class UploadProgressModel(_FromAttributes):
    name: str
    key: str
    icon: str
    progress: int = 0
    loaded: str = ""
    total: str = ""
    finished: bool = False
    failed: bool = False
    error: str | None = None


class UploadResponse(BaseModel):
    """Response body for the upload endpoints."""

    uploads: list[UploadProgressModel]
    finished: bool
    notices: list[NoticeModel] = []


class DismissResponse(BaseModel):
    files: list[CatalogItemModel]
    notices: list[NoticeModel] = []
