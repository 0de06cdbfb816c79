"""FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from mediafiles.config import settings
from mediafiles.services.catalog import CatalogSession
from mediafiles.storage.factory import build_store


@lru_cache(maxsize=1)
def _session() -> CatalogSession:
    return CatalogSession(build_store(settings), settings.conventions(), settings.session_prefix())


def get_session() -> CatalogSession:
    """Return the process-wide catalog session.

    Raises HTTPException(503) while the storage prefix or credentials are
    still the unconfigured placeholders.
    """
    if not settings.is_configured():
        raise HTTPException(
            status_code=503,
            detail="Media storage is not configured. Set PREFIX and the storage credentials.",
        )
    return _session()
