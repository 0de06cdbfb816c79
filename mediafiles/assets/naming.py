"""Naming convention resolver.

Maps a primary object name to the keys of the artifacts the processing
pipeline derives from it.  The preview and deletion paths both go through
:func:`derive_keys`, so they can never disagree about a derived key.

Names passed in are relative to the session prefix; the prefix is prepended
to every returned key.
"""

from __future__ import annotations

import re

from mediafiles.assets.models import DerivedKeySet
from mediafiles.conventions import MediaKind, NamingConventions

_WHITESPACE_RE = re.compile(r"\s+")
_PLUS_RE = re.compile(r"\++")


def _split(name: str) -> tuple[str, str]:
    folder, _, base = name.rpartition("/")
    return (f"{folder}/" if folder else ""), base


def is_redacted_name(name: str, conventions: NamingConventions) -> bool:
    """True when the file's base name carries the redacted-media prefix."""
    return _split(name)[1].startswith(conventions.redacted_media_prefix)


def strip_redacted_prefix(name: str, conventions: NamingConventions) -> str:
    if not is_redacted_name(name, conventions):
        return name
    folder, base = _split(name)
    return folder + base[len(conventions.redacted_media_prefix) :]


def transcript_base_name(name: str, conventions: NamingConventions) -> str:
    """Name the transcripts of *name* are stored under.

    Redacted media ``audio_redacted-x.mp3`` has its transcripts stored as
    ``redacted-x.mp3...``; the prefix is swapped once, never twice.
    """
    if not is_redacted_name(name, conventions):
        return name
    folder, base = _split(name)
    return (
        folder
        + conventions.redacted_transcription_prefix
        + base[len(conventions.redacted_media_prefix) :]
    )


def is_derived_artifact(name: str, conventions: NamingConventions) -> bool:
    """True when any folder segment of *name* is a derived-artifact folder."""
    folders = name.split("/")[:-1]
    return any(segment in conventions.derived_folders for segment in folders)


def derive_keys(
    name: str,
    kind: MediaKind,
    conventions: NamingConventions,
    prefix: str = "",
) -> DerivedKeySet:
    """Return every derived-artifact key for the primary object *name*."""
    if kind is MediaKind.OTHER:
        return DerivedKeySet()

    if kind is MediaKind.IMAGE:
        image_folder = f"{prefix}{conventions.image_metadata_folder}/{name}"
        return DerivedKeySet(
            image_metadata=image_folder + conventions.image_metadata_suffix,
            image_recognition=image_folder + conventions.image_recognition_suffix,
        )

    transcript = f"{prefix}{conventions.transcript_folder}/{transcript_base_name(name, conventions)}"
    if kind is MediaKind.AUDIO:
        return DerivedKeySet(
            transcript_json=transcript + conventions.transcript_suffix,
            transcript_document=transcript + conventions.document_suffix,
        )

    return DerivedKeySet(
        transcript_json=transcript + conventions.transcript_suffix,
        transcript_document=transcript + conventions.document_suffix,
        image_metadata=(
            f"{prefix}{conventions.image_metadata_folder}/{name}{conventions.image_metadata_suffix}"
        ),
        video_labels=(
            f"{prefix}{conventions.video_label_folder}/{name}{conventions.video_label_suffix}"
        ),
    )


def normalize_upload_name(name: str) -> str:
    """Replace whitespace runs and ``+`` runs with a single underscore each.

    The processing pipeline cannot handle either in object keys.
    """
    return _PLUS_RE.sub("_", _WHITESPACE_RE.sub("_", name))
