"""Build the configured object store from settings."""

from __future__ import annotations

from mediafiles.config import Settings
from mediafiles.storage.base import ObjectStore


def build_store(settings: Settings) -> ObjectStore:
    """Return the object store selected by ``settings.storage_backend``.

    Raises:
        ValueError: If the backend name is not recognized.
    """
    if settings.storage_backend == "s3":
        from mediafiles.storage.s3_store import S3ObjectStore, get_s3_client

        client = get_s3_client(
            settings.aws_region,
            settings.aws_access_key_id,
            settings.aws_secret_access_key,
        )
        return S3ObjectStore(client, settings.bucket_name)

    if settings.storage_backend == "supabase":
        from mediafiles.storage.supabase_store import SupabaseObjectStore, get_supabase_client

        return SupabaseObjectStore(
            get_supabase_client(settings.supabase_url, settings.supabase_key),
            settings.bucket_name,
        )

    msg = f"Unknown storage backend: {settings.storage_backend!r}. Supported: ['s3', 'supabase']"
    raise ValueError(msg)
