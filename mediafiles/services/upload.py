"""Concurrent uploads with per-file progress."""

from __future__ import annotations

import asyncio
import logging

from mediafiles.assets import notices
from mediafiles.assets.notices import Notice
from mediafiles.assets.uploads import UploadBatch, UploadProgress, plan_uploads
from mediafiles.conventions import NamingConventions
from mediafiles.storage.base import ObjectStore

logger = logging.getLogger(__name__)


class UploadManager:
    """Runs uploads as independent background tasks.

    Progress events from the store arrive on worker threads and are handed
    back to the event loop, so ``UploadProgress`` objects are only touched
    from the loop.  Dismissing the dialog does not cancel running transfers.
    """

    def __init__(self, store: ObjectStore, conventions: NamingConventions, prefix: str) -> None:
        self.store = store
        self.conventions = conventions
        self.prefix = prefix
        self.batch = UploadBatch()
        self.notices: list[Notice] = []
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_progress(self) -> bool:
        return not self.batch.finished

    def start(self, files: list[tuple[str, str | None, bytes]]) -> tuple[UploadBatch, list[Notice]]:
        """Validate *files* (name, content type, body) and start uploading them.

        Must be called from a running event loop.
        """
        batch, messages = plan_uploads(
            [(name, content_type) for name, content_type, _ in files],
            self.conventions,
            self.prefix,
        )
        bodies = {name: data for name, _, data in files}
        self.batch = batch
        self.notices = []

        for progress in batch.uploads:
            task = asyncio.create_task(self._upload(progress, bodies[progress.name]))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        return batch, messages

    async def _upload(self, progress: UploadProgress, data: bytes) -> None:
        loop = asyncio.get_running_loop()

        def _on_progress(loaded: int, total: int) -> None:
            loop.call_soon_threadsafe(progress.update, loaded, total)

        try:
            await asyncio.to_thread(
                self.store.put_object, progress.key, data, progress.content_type, _on_progress
            )
        except Exception as exc:
            # Any failure ends this file only; the batch must still finish.
            logger.exception("Upload of %s failed", progress.key)
            progress.fail(str(exc))
            self.notices.append(notices.error(str(exc), title=f'Error uploading file "{progress.name}"'))
            return
        progress.succeed()
        logger.info("Uploaded %s", progress.key)

    async def wait(self) -> None:
        """Wait for every running upload to settle."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def drain_notices(self) -> list[Notice]:
        drained, self.notices = self.notices, []
        return drained
