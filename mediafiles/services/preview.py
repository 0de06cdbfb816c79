"""Preview loading: transcript blocks for media, metadata and labels for images.

Each derived artifact is fetched independently and concurrently.  A missing
artifact only clears its own availability flag; it never fails the preview.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from mediafiles.assets.image_metadata import (
    derive_coordinates,
    first_record,
    map_markers,
    project_labels,
    project_metadata,
)
from mediafiles.assets.models import (
    CatalogItem,
    Coordinates,
    ImageMetadataRecord,
    RecognitionLabel,
    TranscriptBlock,
)
from mediafiles.assets.naming import derive_keys
from mediafiles.assets.transcript import segment
from mediafiles.conventions import MediaKind, NamingConventions
from mediafiles.storage.base import ObjectNotFoundError, ObjectStore, StoreError

logger = logging.getLogger(__name__)


@dataclass
class MediaPreview:
    """Audio/video preview with its time-aligned transcript."""

    name: str
    url: str
    kind: MediaKind
    view_icon: str | None
    transcript_document_url: str | None = None
    has_transcription: bool = False
    blocks: list[TranscriptBlock] = field(default_factory=list)


@dataclass
class ImagePreview:
    """Image preview with EXIF metadata, recognition labels and position."""

    name: str
    url: str
    view_icon: str | None
    has_metadata: bool = False
    metadata: list[ImageMetadataRecord] = field(default_factory=list)
    has_recognition: bool = False
    labels: list[RecognitionLabel] = field(default_factory=list)
    coordinates: Coordinates | None = None
    map_markers: list[dict[str, dict[str, float]]] = field(default_factory=list)

    @property
    def has_lat_long(self) -> bool:
        return self.coordinates is not None


async def fetch_json(store: ObjectStore, key: str) -> Any | None:
    """Download and decode a JSON artifact, or None when it is unavailable."""
    try:
        raw = await asyncio.to_thread(store.get_object, key)
        return json.loads(raw)
    except ObjectNotFoundError:
        logger.debug("No artifact at %s", key)
        return None
    except (StoreError, ValueError):
        logger.exception("Could not load artifact %s", key)
        return None


async def load_media_preview(
    store: ObjectStore,
    item: CatalogItem,
    conventions: NamingConventions,
    prefix: str,
) -> MediaPreview:
    derived = derive_keys(item.name, item.kind, conventions, prefix)
    preview = MediaPreview(
        name=item.name,
        url=item.signed_url,
        kind=item.kind,
        view_icon=item.view_icon,
    )

    async def _document_url() -> str | None:
        if derived.transcript_document is None:
            return None
        try:
            return await asyncio.to_thread(
                store.signed_url, derived.transcript_document, conventions.signed_url_expiry_seconds
            )
        except StoreError:
            logger.exception("Could not sign %s", derived.transcript_document)
            return None

    async def _transcript() -> None:
        if derived.transcript_json is None:
            return
        payload = await fetch_json(store, derived.transcript_json)
        if payload is None:
            return
        try:
            preview.blocks = segment(payload, conventions)
        except (ValueError, TypeError, KeyError, AttributeError):
            logger.exception("Malformed transcription %s", derived.transcript_json)
            return
        preview.has_transcription = True

    document_url, _ = await asyncio.gather(_document_url(), _transcript())
    preview.transcript_document_url = document_url
    return preview


async def load_image_preview(
    store: ObjectStore,
    item: CatalogItem,
    conventions: NamingConventions,
    prefix: str,
) -> ImagePreview:
    derived = derive_keys(item.name, item.kind, conventions, prefix)
    preview = ImagePreview(name=item.name, url=item.signed_url, view_icon=item.view_icon)

    async def _metadata() -> None:
        if derived.image_metadata is None:
            return
        payload = await fetch_json(store, derived.image_metadata)
        if payload is None:
            return
        try:
            record = first_record(payload)
            preview.metadata = project_metadata(record)
        except (ValueError, TypeError):
            logger.exception("Malformed image metadata %s", derived.image_metadata)
            return
        preview.coordinates = derive_coordinates(record)
        preview.map_markers = map_markers(preview.coordinates)
        preview.has_metadata = True

    async def _labels() -> None:
        if derived.image_recognition is None:
            return
        payload = await fetch_json(store, derived.image_recognition)
        if payload is None:
            return
        try:
            preview.labels = project_labels(payload)
        except (ValueError, TypeError, AttributeError):
            logger.exception("Malformed recognition labels %s", derived.image_recognition)
            return
        preview.has_recognition = True

    await asyncio.gather(_metadata(), _labels())
    return preview


async def load_preview(
    store: ObjectStore,
    item: CatalogItem,
    conventions: NamingConventions,
    prefix: str,
) -> MediaPreview | ImagePreview:
    """Open *item* for preview.

    Raises:
        ValueError: If the item is not an audio, video or image file.
    """
    if item.kind in (MediaKind.AUDIO, MediaKind.VIDEO):
        return await load_media_preview(store, item, conventions, prefix)
    if item.kind is MediaKind.IMAGE:
        return await load_image_preview(store, item, conventions, prefix)
    msg = f"File {item.name!r} cannot be previewed"
    raise ValueError(msg)
