"""Abstract object-store boundary used by the services layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from mediafiles.assets.models import ObjectEntry

ProgressCallback = Callable[[int, int], None]


class StoreError(Exception):
    """Transport or authorization failure talking to the object store."""


class ObjectNotFoundError(StoreError):
    """The requested object does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object not found: {key}")
        self.key = key


class ObjectStore(ABC):
    """A key/value blob store bound to one bucket, with signed URLs."""

    bucket: str

    @abstractmethod
    def list_objects(self, prefix: str) -> list[ObjectEntry]:
        """Return every object whose key starts with *prefix*."""

    @abstractmethod
    def signed_url(self, key: str, expires_in: int) -> str:
        """Return a credential-free retrieval URL valid for *expires_in* seconds."""

    @abstractmethod
    def get_object(self, key: str) -> bytes:
        """Return the object body.

        Raises:
            ObjectNotFoundError: If *key* does not exist.
        """

    @abstractmethod
    def delete_objects(self, keys: Iterable[str]) -> None:
        """Delete *keys*.  Keys that do not exist are ignored."""

    @abstractmethod
    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Store *data* under *key*, reporting ``(loaded, total)`` byte progress."""
