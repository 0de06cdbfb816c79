"""Transcript block segmenter.

Turns a word-timed transcription (Amazon Transcribe output shape) into
fixed-duration display blocks so the transcript can be followed alongside
playback.

A new block starts at the first word whose start time lies more than
``block_seconds`` after the start of the current block.  Words without a
start time (punctuation) always stay in the current block.
"""

from __future__ import annotations

import json
import math
from typing import Any

from mediafiles.assets.models import TranscriptBlock, TranscriptWord
from mediafiles.conventions import NamingConventions

REDACTED_TEXT = "REDACTED"


def format_timestamp(seconds: float) -> str:
    """Label for a block start: ``mm:ss`` below one hour, ``hh:mm`` above."""
    total = int(round(seconds * 1000.0)) // 1000
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if seconds < 3600.0:
        return f"{minutes:02d}:{secs:02d}"
    return f"{hours % 24:02d}:{minutes:02d}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _seconds(item: dict[str, Any], field: str) -> float | None:
    raw = item.get(field)
    if raw is None or raw == "":
        return None
    return float(raw)


def parse_items(payload: str | bytes | dict[str, Any] | list[Any]) -> list[dict[str, Any]]:
    """Extract the item list from a transcription payload.

    Accepts the raw JSON text/bytes or already-decoded data in any of these
    shapes: ``{"results": {"items": [...]}}``, ``{"items": [...]}`` or a bare
    list of items.

    Raises:
        ValueError: If no item list can be found or an item is not an object.
    """
    data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload

    items: list[Any] | None = None
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        results = data.get("results")
        if isinstance(results, dict) and isinstance(results.get("items"), list):
            items = results["items"]
        elif isinstance(data.get("items"), list):
            items = data["items"]
    if items is None:
        msg = "Unrecognized transcription payload: no item list found"
        raise ValueError(msg)

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            msg = f"Transcription item {index} is {type(item).__name__}, expected an object"
            raise ValueError(msg)
    return items


def to_word(item: dict[str, Any], conventions: NamingConventions) -> TranscriptWord:
    """Build the display word for one transcription item (first alternative wins)."""
    alternatives = item.get("alternatives") or [{}]
    if not isinstance(alternatives, list) or not isinstance(alternatives[0], dict):
        msg = f"Transcription item has malformed alternatives: {alternatives!r}"
        raise ValueError(msg)
    alternative = alternatives[0]
    content = str(alternative.get("content", ""))
    is_punctuation = item.get("type") != "pronunciation"
    is_redacted = content == conventions.redaction_indicator

    if is_punctuation:
        label = f'"{content}"'
    elif is_redacted:
        label = "Redacted"
    else:
        confidence = float(alternative.get("confidence") or 0.0)
        label = f'"{content}" Confidence: {_round_half_up(confidence * 100)}%'

    return TranscriptWord(
        text=REDACTED_TEXT if is_redacted else content,
        confidence_label=label,
        is_redacted=is_redacted,
        is_punctuation=is_punctuation,
        start_time=_seconds(item, "start_time"),
        end_time=_seconds(item, "end_time"),
    )


def _close(start: float, words: list[TranscriptWord]) -> TranscriptBlock:
    end_times = [w.end_time for w in words if w.end_time is not None]
    return TranscriptBlock(
        id=format_timestamp(start),
        start_time=start,
        end_time=end_times[-1] if end_times else None,
        words=words,
    )


def segment(
    payload: str | bytes | dict[str, Any] | list[Any],
    conventions: NamingConventions | None = None,
) -> list[TranscriptBlock]:
    """Split a transcription into display blocks of ``block_seconds`` each.

    The trailing block is flushed at end of input, so every word lands in
    exactly one block and word order is preserved.  An empty transcription
    yields no blocks.
    """
    conventions = conventions or NamingConventions()
    blocks: list[TranscriptBlock] = []
    current: list[TranscriptWord] = []
    last_start = 0.0

    for item in parse_items(payload):
        word = to_word(item, conventions)
        start = word.start_time
        if start and start > last_start + conventions.block_seconds:
            if current:
                blocks.append(_close(last_start, current))
            current = []
            last_start = start
        current.append(word)

    if current:
        blocks.append(_close(last_start, current))
    return blocks
