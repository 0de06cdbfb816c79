"""Shared fixtures: an in-memory object store and a catalog session on top of it."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

import pytest

from mediafiles.assets.models import ObjectEntry
from mediafiles.conventions import NamingConventions
from mediafiles.services.catalog import CatalogSession
from mediafiles.storage.base import ObjectNotFoundError, ObjectStore, ProgressCallback, StoreError

PREFIX = "media/001/"


class InMemoryStore(ObjectStore):
    """Dict-backed ObjectStore that records calls for assertions."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.bucket = "test-bucket"
        self.objects: dict[str, bytes] = dict(objects or {})
        self.delete_calls: list[list[str]] = []
        self.fail_list = False
        self.fail_delete = False
        self.fail_put: set[str] = set()

    def list_objects(self, prefix: str) -> list[ObjectEntry]:
        if self.fail_list:
            raise StoreError("Access Denied")
        return [
            ObjectEntry(
                key=k,
                size=len(v),
                last_modified=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
            for k, v in self.objects.items()
            if k.startswith(prefix)
        ]

    def signed_url(self, key: str, expires_in: int) -> str:
        return f"https://signed.example/{key}?expires={expires_in}"

    def get_object(self, key: str) -> bytes:
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        return self.objects[key]

    def delete_objects(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        self.delete_calls.append(keys)
        if self.fail_delete:
            raise StoreError("Network failure")
        for key in keys:
            self.objects.pop(key, None)

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if key in self.fail_put:
            raise StoreError(f"Upload of {key} refused")
        half = len(data) // 2
        if on_progress is not None:
            on_progress(half, len(data))
            on_progress(len(data), len(data))
        self.objects[key] = data


@pytest.fixture
def conventions() -> NamingConventions:
    return NamingConventions()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def session(store: InMemoryStore, conventions: NamingConventions) -> CatalogSession:
    return CatalogSession(store, conventions, PREFIX)
