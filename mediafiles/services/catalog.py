"""Catalog session: the file list, selection, deletion, preview and uploads.

One session owns one catalog.  The catalog is rebuilt wholesale on every
refresh and only mutated through this class.
"""

from __future__ import annotations

import asyncio
import logging

from mediafiles.assets import notices
from mediafiles.assets.deletion import build_deletion_keys
from mediafiles.assets.listing import project
from mediafiles.assets.models import CatalogItem
from mediafiles.assets.notices import Notice
from mediafiles.conventions import NamingConventions
from mediafiles.services.preview import ImagePreview, MediaPreview, load_preview
from mediafiles.services.upload import UploadManager
from mediafiles.storage.base import ObjectStore, StoreError

logger = logging.getLogger(__name__)


class CatalogSession:
    def __init__(self, store: ObjectStore, conventions: NamingConventions, prefix: str) -> None:
        self.store = store
        self.conventions = conventions
        self.prefix = prefix
        self.files: list[CatalogItem] = []
        self.uploads = UploadManager(store, conventions, prefix)

    # -- listing -------------------------------------------------------------

    def _sign(self, key: str) -> str:
        return self.store.signed_url(key, self.conventions.signed_url_expiry_seconds)

    def _build(self) -> list[CatalogItem]:
        entries = self.store.list_objects(self.prefix)
        return project(entries, self.prefix, self.conventions, self._sign)

    async def refresh(self) -> list[Notice]:
        """Rebuild the catalog from the store.

        On failure the catalog is left empty and a sticky error notice is
        returned; stale entries are never shown.
        """
        self.files = []
        try:
            self.files = await asyncio.to_thread(self._build)
        except StoreError as exc:
            logger.exception("Listing %s failed", self.prefix)
            return [notices.error(str(exc), title="Could not get file list")]
        logger.info("Catalog for %s has %d files", self.prefix, len(self.files))
        return []

    # -- selection -----------------------------------------------------------

    def find(self, key: str) -> CatalogItem | None:
        return next((f for f in self.files if f.key == key), None)

    def select(self, key: str, selected: bool = True) -> bool:
        item = self.find(key)
        if item is None:
            return False
        item.selected = selected
        return True

    def select_all(self, selected: bool = True) -> None:
        for item in self.files:
            item.selected = selected

    @property
    def all_selected(self) -> bool:
        return all(f.selected for f in self.files)

    @property
    def something_selected(self) -> bool:
        return any(f.selected for f in self.files)

    @property
    def selected_items(self) -> list[CatalogItem]:
        return [f for f in self.files if f.selected]

    # -- deletion ------------------------------------------------------------

    async def delete_selected(self) -> tuple[list[str], list[Notice]]:
        """Delete the selected files with all their derived artifacts.

        The catalog is refreshed afterwards whether or not the delete worked.
        """
        keys = build_deletion_keys(self.selected_items, self.conventions, self.prefix)
        if not keys:
            return [], []

        messages: list[Notice] = []
        try:
            await asyncio.to_thread(self.store.delete_objects, keys)
        except StoreError as exc:
            logger.exception("Deleting %d keys failed", len(keys))
            messages.append(notices.error(str(exc), title="Could not delete files"))
            keys = []
        else:
            messages.append(notices.success("Files deleted."))

        messages.extend(await self.refresh())
        return keys, messages

    # -- preview -------------------------------------------------------------

    async def preview(self, key: str) -> MediaPreview | ImagePreview:
        """Open the catalog file *key* for preview.

        Raises:
            KeyError: If *key* is not in the catalog.
            ValueError: If the file is not viewable.
        """
        item = self.find(key)
        if item is None:
            raise KeyError(key)
        return await load_preview(self.store, item, self.conventions, self.prefix)

    # -- uploads -------------------------------------------------------------

    def start_uploads(self, files: list[tuple[str, str | None, bytes]]) -> list[Notice]:
        _, messages = self.uploads.start(files)
        return messages

    async def dismiss_uploads(self) -> list[Notice]:
        """Close the upload dialog and refresh the catalog.

        Transfers still running keep going; they are not cancelled.
        """
        messages: list[Notice] = self.uploads.drain_notices()
        if self.uploads.in_progress:
            messages.append(notices.info("Uploads still in progress will finish in the background."))
        messages.extend(await self.refresh())
        return messages
