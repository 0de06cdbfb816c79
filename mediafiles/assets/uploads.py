"""Upload planning and per-file progress tracking."""

from __future__ import annotations

from dataclasses import dataclass, field

from mediafiles.assets import notices
from mediafiles.assets.classify import human_readable_size, icon_name
from mediafiles.assets.naming import normalize_upload_name
from mediafiles.assets.notices import Notice
from mediafiles.conventions import NamingConventions


@dataclass
class UploadProgress:
    """Progress of one file upload, keyed by its destination key."""

    name: str
    key: str
    icon: str
    content_type: str | None = None
    progress: int = 0
    loaded: str = ""
    total: str = ""
    finished: bool = False
    failed: bool = False
    error: str | None = None

    def update(self, loaded: int, total: int) -> None:
        # Byte counts only ever grow for one transfer; ignore stale events.
        percent = round(loaded * 100 / total) if total else 100
        if percent < self.progress:
            return
        self.progress = percent
        self.loaded = human_readable_size(loaded)
        self.total = human_readable_size(total)

    def succeed(self) -> None:
        self.progress = 100
        self.finished = True

    def fail(self, error: str) -> None:
        self.finished = True
        self.failed = True
        self.error = error


@dataclass
class UploadBatch:
    """All uploads started from one file selection."""

    uploads: list[UploadProgress] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return all(u.finished for u in self.uploads)

    def get(self, key: str) -> UploadProgress | None:
        return next((u for u in self.uploads if u.key == key), None)


def plan_uploads(
    files: list[tuple[str, str | None]],
    conventions: NamingConventions,
    prefix: str,
) -> tuple[UploadBatch, list[Notice]]:
    """Validate and name a selection of ``(file name, content type)`` pairs.

    Names longer than the configured maximum are rejected with one error
    notice each; the remaining files are still planned.  Whitespace and
    ``+`` are replaced by underscores, with an info notice naming the
    substitution.  A file that would land on the same key as an earlier one
    in the selection is skipped with an info notice.
    """
    batch = UploadBatch()
    messages: list[Notice] = []
    limit = conventions.max_file_name_length

    for name, content_type in files:
        if len(name) > limit:
            messages.append(
                notices.error(
                    f'File "{name}" name length ({len(name)}) exceeds the maximum length of '
                    f"{limit} characters and will not be uploaded."
                )
            )
            continue

        safe_name = normalize_upload_name(name)
        key = f"{prefix}{safe_name}"
        duplicate = batch.get(key)
        if duplicate is not None:
            messages.append(
                notices.info(
                    f'"{name}" would be stored as "{safe_name}", the same object as '
                    f'"{duplicate.name}", and will not be uploaded.',
                    sticky=True,
                )
            )
            continue

        if safe_name != name:
            messages.append(
                notices.info(
                    f'The file will be uploaded as "{safe_name}".',
                    title=f'File name "{name}" contains whitespace or "+" characters',
                    sticky=True,
                )
            )
        batch.uploads.append(
            UploadProgress(
                name=name,
                key=key,
                icon=icon_name(name),
                content_type=content_type,
            )
        )

    return batch, messages
