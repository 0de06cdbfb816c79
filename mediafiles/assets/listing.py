"""Listing projector: raw store entries -> sorted, UI-ready catalog."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from mediafiles.assets.classify import classify, human_readable_size
from mediafiles.assets.models import CatalogItem, ObjectEntry
from mediafiles.assets.naming import is_derived_artifact, is_redacted_name, strip_redacted_prefix
from mediafiles.conventions import NamingConventions


def relative_name(key: str, prefix: str) -> str:
    return key[len(prefix) :] if prefix and key.startswith(prefix) else key


def sort_key(item: CatalogItem) -> tuple[str, str]:
    """Order files by display name, a redacted variant right after its original."""
    label = item.display_name + ("-redacted" if item.is_redacted else "")
    return label.casefold(), label


def project(
    entries: Iterable[ObjectEntry],
    prefix: str,
    conventions: NamingConventions,
    sign: Callable[[str], str],
) -> list[CatalogItem]:
    """Project a flat store listing into the file catalog.

    Derived artifacts (anything below a transcript, image-metadata or
    video-label folder) and folder placeholders are left out.  *sign* turns a
    key into a time-limited retrieval URL.
    """
    items: list[CatalogItem] = []
    for entry in entries:
        name = relative_name(entry.key, prefix)
        if not name or name.endswith("/"):
            continue
        if is_derived_artifact(name, conventions):
            continue

        classification = classify(name)
        items.append(
            CatalogItem(
                key=entry.key,
                name=name,
                display_name=strip_redacted_prefix(name, conventions),
                is_redacted=is_redacted_name(name, conventions),
                kind=classification.kind,
                viewable=classification.viewable,
                icon=classification.icon,
                view_icon=classification.view_icon,
                signed_url=sign(entry.key),
                size=human_readable_size(entry.size),
                size_bytes=entry.size,
                last_modified=entry.last_modified,
            )
        )

    items.sort(key=sort_key)
    return items
