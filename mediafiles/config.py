from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from mediafiles.conventions import NamingConventions

UNCONFIGURED_PREFIX = "Change_this_prefix"
UNCONFIGURED_ACCESS_KEY_ID = "XXXXXXXXXXXXXXXXXXXX"
UNCONFIGURED_SECRET_ACCESS_KEY = "YYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYYY"


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Storage backend: "supabase" or "s3"
    storage_backend: str = "supabase"
    bucket_name: str = "media"
    prefix: str = UNCONFIGURED_PREFIX
    record_id: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # AWS
    aws_region: str = "us-east-1"
    aws_access_key_id: str = UNCONFIGURED_ACCESS_KEY_ID
    aws_secret_access_key: str = UNCONFIGURED_SECRET_ACCESS_KEY

    # Naming conventions of the processing pipeline
    transcript_folder: str = "transcribed_files"
    transcript_suffix: str = "-transcribed.json"
    document_suffix: str = ".docx"
    redacted_media_prefix: str = "audio_redacted-"
    redacted_transcription_prefix: str = "redacted-"
    redaction_indicator: str = "[PII]"
    image_metadata_folder: str = "image_metadata"
    image_metadata_suffix: str = ".json"
    image_recognition_suffix: str = ".rekog.json"
    video_label_folder: str = "video_labels"
    video_label_suffix: str = ".rek.json"
    signed_url_expiry_seconds: int = 24 * 60 * 60
    block_seconds: float = 10.0
    max_file_name_length: int = 1024

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def conventions(self) -> NamingConventions:
        return NamingConventions(
            transcript_folder=self.transcript_folder,
            transcript_suffix=self.transcript_suffix,
            document_suffix=self.document_suffix,
            redacted_media_prefix=self.redacted_media_prefix,
            redacted_transcription_prefix=self.redacted_transcription_prefix,
            redaction_indicator=self.redaction_indicator,
            image_metadata_folder=self.image_metadata_folder,
            image_metadata_suffix=self.image_metadata_suffix,
            image_recognition_suffix=self.image_recognition_suffix,
            video_label_folder=self.video_label_folder,
            video_label_suffix=self.video_label_suffix,
            signed_url_expiry_seconds=self.signed_url_expiry_seconds,
            block_seconds=self.block_seconds,
            max_file_name_length=self.max_file_name_length,
        )

    def session_prefix(self) -> str:
        """Return the key prefix every object of this session lives under.

        ``"{prefix}/{record_id}/"``, with either part left out when empty.
        """
        return (f"{self.prefix}/" if self.prefix else "") + (
            f"{self.record_id}/" if self.record_id else ""
        )

    def is_configured(self) -> bool:
        if self.prefix == UNCONFIGURED_PREFIX:
            return False
        if self.storage_backend == "s3":
            return (
                self.aws_access_key_id != UNCONFIGURED_ACCESS_KEY_ID
                and self.aws_secret_access_key != UNCONFIGURED_SECRET_ACCESS_KEY
            )
        return bool(self.supabase_url and self.supabase_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
