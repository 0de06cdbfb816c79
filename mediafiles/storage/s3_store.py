"""Amazon S3 implementation of the object-store boundary."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from mediafiles.assets.models import ObjectEntry
from mediafiles.storage.base import ObjectNotFoundError, ObjectStore, ProgressCallback, StoreError

logger = logging.getLogger(__name__)

# delete_objects allows up to 1000 objects per call
DELETE_BATCH_SIZE = 1000
_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def get_s3_client(region: str, access_key_id: str, secret_access_key: str) -> Any:
    """Create an S3 client from explicit credentials (no process-wide config)."""
    return boto3.client(
        "s3",
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
    )


class S3ObjectStore(ObjectStore):
    """Object store backed by one S3 bucket."""

    def __init__(self, client: Any, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    def list_objects(self, prefix: str) -> list[ObjectEntry]:
        results: list[ObjectEntry] = []
        token: str | None = None
        try:
            while True:
                kwargs: dict[str, Any] = {"Bucket": self.bucket, "Prefix": prefix, "MaxKeys": 1000}
                if token:
                    kwargs["ContinuationToken"] = token
                resp = self.client.list_objects_v2(**kwargs)
                for obj in resp.get("Contents") or []:
                    results.append(
                        ObjectEntry(
                            key=obj["Key"],
                            size=int(obj.get("Size") or 0),
                            last_modified=obj.get("LastModified"),
                        )
                    )
                if not resp.get("IsTruncated"):
                    break
                token = resp.get("NextContinuationToken")
                if not token:
                    break
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"Could not list s3://{self.bucket}/{prefix}: {exc}") from exc
        return results

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(  # type: ignore[no-any-return]
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"Could not sign {key}: {exc}") from exc

    def get_object(self, key: str) -> bytes:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
            return resp["Body"].read()  # type: ignore[no-any-return]
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from exc
            raise StoreError(f"Could not get s3://{self.bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreError(f"Could not get s3://{self.bucket}/{key}: {exc}") from exc

    def delete_objects(self, keys: Iterable[str]) -> None:
        """Delete in batches.  S3 already treats missing keys as deleted."""
        all_keys = list(keys)
        try:
            for i in range(0, len(all_keys), DELETE_BATCH_SIZE):
                batch = all_keys[i : i + DELETE_BATCH_SIZE]
                resp = self.client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
                )
                errors = resp.get("Errors") or []
                if errors:
                    first = errors[0]
                    raise StoreError(
                        f"Could not delete {len(errors)} objects, "
                        f"first {first.get('Key')}: {first.get('Message')}"
                    )
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"Could not delete objects: {exc}") from exc
        logger.info("Deleted %d keys from s3://%s", len(all_keys), self.bucket)

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Upload with the managed transfer, reporting cumulative bytes sent."""
        total = len(data)
        loaded = 0

        def _callback(chunk: int) -> None:
            nonlocal loaded
            loaded += chunk
            if on_progress is not None:
                on_progress(loaded, total)

        extra_args = {"ContentType": content_type} if content_type else None
        try:
            self.client.upload_fileobj(
                io.BytesIO(data),
                self.bucket,
                key,
                ExtraArgs=extra_args,
                Callback=_callback,
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as exc:
            raise StoreError(f"Could not upload s3://{self.bucket}/{key}: {exc}") from exc
