"""Image metadata projector: EXIF records, recognition labels, GPS position."""

from __future__ import annotations

import json
import math
import re
from typing import Any

from mediafiles.assets.models import Coordinates, ImageMetadataRecord, RecognitionLabel

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_HEMISPHERE_RE = re.compile(r"([NSEW])\s*$", re.IGNORECASE)


def _load(payload: str | bytes | Any) -> Any:
    return json.loads(payload) if isinstance(payload, (str, bytes)) else payload


def stringify(value: Any) -> str:
    """Render a metadata value the way the metadata table displays it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def first_record(payload: str | bytes | Any) -> dict[str, Any]:
    """Return the metadata object of an exiftool-style payload (``[{...}]``)."""
    data = _load(payload)
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        msg = f"Unrecognized image metadata payload of type {type(data).__name__}"
        raise ValueError(msg)
    return data


def project_metadata(payload: str | bytes | Any) -> list[ImageMetadataRecord]:
    return [ImageMetadataRecord(key=k, value=stringify(v)) for k, v in first_record(payload).items()]


def project_labels(payload: str | bytes | Any) -> list[RecognitionLabel]:
    """One label per recognition entry, confidence rounded to a whole percent."""
    data = _load(payload)
    return [
        RecognitionLabel(
            word=str(label.get("Name", "")),
            confidence_percent=math.floor(float(label.get("Confidence", 0.0)) + 0.5),
        )
        for label in data.get("Labels", [])
    ]


def exif_to_decimal(value: Any) -> float | None:
    """Convert an EXIF degrees/minutes/seconds value to decimal degrees.

    Accepts exiftool strings such as ``37 deg 46' 29.64" N``, ``[d, m, s]``
    sequences and plain numbers.  Southern and western hemispheres are
    negative.  Returns None for anything that cannot be read.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    sign = 1.0
    if isinstance(value, (list, tuple)):
        try:
            parts = [float(p) for p in value[:3]]
        except (TypeError, ValueError):
            return None
    else:
        text = str(value).strip()
        if text.startswith("-"):
            sign = -1.0
        hemisphere = _HEMISPHERE_RE.search(text)
        if hemisphere and hemisphere.group(1).upper() in ("S", "W"):
            sign = -1.0
        parts = [float(n) for n in _NUMBER_RE.findall(text)[:3]]

    if not parts:
        return None
    degrees = parts[0] + (parts[1] / 60.0 if len(parts) > 1 else 0.0)
    degrees += parts[2] / 3600.0 if len(parts) > 2 else 0.0
    result = sign * degrees
    return result if math.isfinite(result) else None


def derive_coordinates(metadata: dict[str, Any]) -> Coordinates | None:
    """Decimal position of an image, or None unless both GPS fields are usable."""
    if "GPSLatitude" not in metadata or "GPSLongitude" not in metadata:
        return None
    latitude = exif_to_decimal(metadata["GPSLatitude"])
    longitude = exif_to_decimal(metadata["GPSLongitude"])
    if latitude is None or longitude is None:
        return None
    return Coordinates(latitude=latitude, longitude=longitude)


def map_markers(coordinates: Coordinates | None) -> list[dict[str, dict[str, float]]]:
    if coordinates is None:
        return []
    return [{"location": {"Latitude": coordinates.latitude, "Longitude": coordinates.longitude}}]
