"""Supabase Storage implementation of the object-store boundary."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import httpx
from storage3.utils import StorageException
from supabase import Client, create_client

from mediafiles.assets.models import ObjectEntry
from mediafiles.storage.base import ObjectNotFoundError, ObjectStore, ProgressCallback, StoreError

logger = logging.getLogger(__name__)

# Supabase lists one folder level per call, at most this many entries a page.
PAGE_SIZE = 1000
# Paths per remove() request
REMOVE_BATCH_SIZE = 100


def get_supabase_client(url: str, key: str) -> Client:
    """Create a Supabase client from explicit credentials."""
    return create_client(url, key)


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _is_not_found(exc: Exception) -> bool:
    # Missing objects come back as 400 "Object not found" or a plain 404
    status = getattr(exc, "status", None)
    return str(status) == "404" or "not found" in str(exc).lower()


class SupabaseObjectStore(ObjectStore):
    """Object store backed by a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    @property
    def _bucket(self) -> Any:
        return self.client.storage.from_(self.bucket)

    def _list_folder(self, folder: str) -> list[dict[str, Any]]:
        entries: list[dict[str, Any]] = []
        offset = 0
        while True:
            page = self._bucket.list(
                folder,
                {"limit": PAGE_SIZE, "offset": offset, "sortBy": {"column": "name", "order": "asc"}},
            )
            entries.extend(page)
            if len(page) < PAGE_SIZE:
                return entries
            offset += PAGE_SIZE

    def list_objects(self, prefix: str) -> list[ObjectEntry]:
        """Walk the folder tree below *prefix* and return a flat key listing."""
        root = prefix.rstrip("/")
        results: list[ObjectEntry] = []
        pending = [root]
        try:
            while pending:
                folder = pending.pop()
                for entry in self._list_folder(folder):
                    key = f"{folder}/{entry['name']}" if folder else entry["name"]
                    # Folders come back without an id
                    if entry.get("id") is None:
                        pending.append(key)
                        continue
                    metadata = entry.get("metadata") or {}
                    results.append(
                        ObjectEntry(
                            key=key,
                            size=int(metadata.get("size") or 0),
                            last_modified=_parse_timestamp(
                                entry.get("updated_at") or metadata.get("lastModified")
                            ),
                        )
                    )
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError(f"Could not list {self.bucket}/{prefix}: {exc}") from exc
        return results

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            result = self._bucket.create_signed_url(key, expires_in)
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError(f"Could not sign {key}: {exc}") from exc
        return str(result.get("signedURL") or result.get("signedUrl") or "")

    def get_object(self, key: str) -> bytes:
        try:
            return self._bucket.download(key)  # type: ignore[no-any-return]
        except (StorageException, httpx.HTTPError) as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise StoreError(f"Could not download {key}: {exc}") from exc

    def delete_objects(self, keys: Iterable[str]) -> None:
        paths = list(keys)
        try:
            for i in range(0, len(paths), REMOVE_BATCH_SIZE):
                self._bucket.remove(paths[i : i + REMOVE_BATCH_SIZE])
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError(f"Could not delete objects: {exc}") from exc
        logger.info("Deleted %d keys from %s", len(paths), self.bucket)

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        # Supabase uploads in one request; progress jumps from 0 to done.
        if on_progress is not None:
            on_progress(0, len(data))
        options = {"upsert": "true"}
        if content_type:
            options["content-type"] = content_type
        try:
            self._bucket.upload(key, data, options)
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError(f"Could not upload {key}: {exc}") from exc
        if on_progress is not None:
            on_progress(len(data), len(data))
