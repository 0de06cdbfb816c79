"""Deletion set builder."""

from __future__ import annotations

from collections.abc import Iterable

from mediafiles.assets.models import CatalogItem
from mediafiles.assets.naming import derive_keys
from mediafiles.conventions import NamingConventions


def build_deletion_keys(
    selected: Iterable[CatalogItem],
    conventions: NamingConventions,
    prefix: str = "",
) -> list[str]:
    """Return the primary key and every derived-artifact key of *selected*.

    Duplicates are dropped, first occurrence wins.  Derived keys are included
    whether or not the artifact exists; stores treat deleting a missing key
    as a no-op.
    """
    keys: dict[str, None] = {}
    for item in selected:
        keys[item.key] = None
        for derived in derive_keys(item.name, item.kind, conventions, prefix).keys():
            keys[derived] = None
    return list(keys)
