"""File classification: media kind, icons and size formatting."""

from __future__ import annotations

from dataclasses import dataclass

from mediafiles.conventions import MediaKind

AUDIO_EXTENSIONS = {"aac", "aiff", "amr", "flac", "m4a", "mp3", "oga", "ogg", "opus", "wav", "wma"}
VIDEO_EXTENSIONS = {"3gp", "avi", "m4v", "mkv", "mov", "mp4", "mpeg", "mpg", "ogv", "webm", "wmv"}
IMAGE_EXTENSIONS = {"bmp", "gif", "heic", "jpeg", "jpg", "png", "tif", "tiff", "webp"}

# Icons are independent of the media kind: svg and psd get their own doctype
# icons without being previewable images.
ICON_BY_EXTENSION: dict[str, str] = {
    **{ext: "doctype:audio" for ext in AUDIO_EXTENSIONS},
    **{ext: "doctype:video" for ext in VIDEO_EXTENSIONS},
    **{ext: "doctype:image" for ext in IMAGE_EXTENSIONS},
    "mp4": "doctype:mp4",
    "ai": "doctype:ai",
    "csv": "doctype:csv",
    "doc": "doctype:word",
    "docx": "doctype:word",
    "eps": "doctype:eps",
    "exe": "doctype:exe",
    "htm": "doctype:html",
    "html": "doctype:html",
    "key": "doctype:keynote",
    "numbers": "doctype:numbers",
    "pages": "doctype:pages",
    "pdf": "doctype:pdf",
    "ppt": "doctype:ppt",
    "pptx": "doctype:ppt",
    "psd": "doctype:psd",
    "rtf": "doctype:rtf",
    "svg": "doctype:image",
    "txt": "doctype:txt",
    "log": "doctype:txt",
    "xls": "doctype:excel",
    "xlsx": "doctype:excel",
    "xml": "doctype:xml",
    "7z": "doctype:zip",
    "gz": "doctype:zip",
    "rar": "doctype:zip",
    "tar": "doctype:zip",
    "zip": "doctype:zip",
}
DEFAULT_ICON = "doctype:unknown"

VIEW_ICONS: dict[MediaKind, str] = {
    MediaKind.VIDEO: "utility:video",
    MediaKind.AUDIO: "utility:volume_high",
    MediaKind.IMAGE: "utility:image",
}

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


@dataclass(frozen=True)
class Classification:
    kind: MediaKind
    icon: str
    view_icon: str | None

    @property
    def viewable(self) -> bool:
        return self.kind.viewable


def extension(name: str) -> str:
    """Return the lower-cased extension of *name* without the dot ("" if none)."""
    base = name.rsplit("/", 1)[-1]
    return base.rsplit(".", 1)[-1].lower() if "." in base else ""


def media_kind(name: str) -> MediaKind:
    ext = extension(name)
    if ext in AUDIO_EXTENSIONS:
        return MediaKind.AUDIO
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    return MediaKind.OTHER


def icon_name(name: str) -> str:
    return ICON_BY_EXTENSION.get(extension(name), DEFAULT_ICON)


def classify(name: str) -> Classification:
    """Classify *name* by extension.  Every name gets a kind and an icon."""
    kind = media_kind(name)
    return Classification(kind=kind, icon=icon_name(name), view_icon=VIEW_ICONS.get(kind))


def human_readable_size(num_bytes: int | float) -> str:
    """Format a byte count with 1024-based units, e.g. ``1536 -> "1.5 KB"``."""
    size = float(num_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    if unit == 0:
        return f"{int(size)} B"
    return f"{size:.1f} {_SIZE_UNITS[unit]}"
