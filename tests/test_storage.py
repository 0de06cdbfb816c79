"""Tests for the S3 and Supabase object-store adapters (SDK clients mocked)."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

import httpx
import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError
from storage3.utils import StorageException

from mediafiles.config import Settings
from mediafiles.storage.base import ObjectNotFoundError, StoreError
from mediafiles.storage.factory import build_store
from mediafiles.storage.s3_store import S3ObjectStore
from mediafiles.storage.supabase_store import SupabaseObjectStore


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestS3ObjectStore:
    def test_list_follows_continuation(self) -> None:
        client = MagicMock()
        client.list_objects_v2.side_effect = [
            {"Contents": [{"Key": "p/a.mp3", "Size": 10}], "IsTruncated": True, "NextContinuationToken": "t"},
            {"Contents": [{"Key": "p/b.mp3", "Size": 20}], "IsTruncated": False},
        ]
        entries = S3ObjectStore(client, "bucket").list_objects("p/")
        assert [(e.key, e.size) for e in entries] == [("p/a.mp3", 10), ("p/b.mp3", 20)]
        assert client.list_objects_v2.call_args_list[1].kwargs["ContinuationToken"] == "t"

    def test_list_failure_raises_store_error(self) -> None:
        client = MagicMock()
        client.list_objects_v2.side_effect = _client_error("AccessDenied", "ListObjectsV2")
        with pytest.raises(StoreError):
            S3ObjectStore(client, "bucket").list_objects("p/")

    def test_signed_url(self) -> None:
        client = MagicMock()
        client.generate_presigned_url.return_value = "https://s3/signed"
        assert S3ObjectStore(client, "bucket").signed_url("p/a.mp3", 86400) == "https://s3/signed"
        client.generate_presigned_url.assert_called_once_with(
            "get_object", Params={"Bucket": "bucket", "Key": "p/a.mp3"}, ExpiresIn=86400
        )

    def test_get_missing_raises_not_found(self) -> None:
        client = MagicMock()
        client.get_object.side_effect = _client_error("NoSuchKey")
        with pytest.raises(ObjectNotFoundError):
            S3ObjectStore(client, "bucket").get_object("p/missing.json")

    def test_get_other_error_is_store_error(self) -> None:
        client = MagicMock()
        client.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StoreError) as excinfo:
            S3ObjectStore(client, "bucket").get_object("p/a.json")
        assert not isinstance(excinfo.value, ObjectNotFoundError)

    def test_get_reads_body(self) -> None:
        client = MagicMock()
        client.get_object.return_value = {"Body": io.BytesIO(b"data")}
        assert S3ObjectStore(client, "bucket").get_object("p/a.json") == b"data"

    def test_delete_batches(self) -> None:
        client = MagicMock()
        client.delete_objects.return_value = {}
        keys = [f"k{i}" for i in range(1500)]
        S3ObjectStore(client, "bucket").delete_objects(keys)
        assert client.delete_objects.call_count == 2
        first = client.delete_objects.call_args_list[0].kwargs["Delete"]
        assert len(first["Objects"]) == 1000
        assert first["Quiet"] is True

    def test_delete_reported_errors(self) -> None:
        client = MagicMock()
        client.delete_objects.return_value = {"Errors": [{"Key": "k", "Message": "denied"}]}
        with pytest.raises(StoreError, match="denied"):
            S3ObjectStore(client, "bucket").delete_objects(["k"])

    def test_put_reports_cumulative_progress(self) -> None:
        client = MagicMock()

        def fake_upload(fileobj, bucket, key, ExtraArgs=None, Callback=None):  # noqa: N803
            Callback(4)
            Callback(6)

        client.upload_fileobj.side_effect = fake_upload
        events: list[tuple[int, int]] = []
        S3ObjectStore(client, "bucket").put_object(
            "p/a.mp3", b"x" * 10, "audio/mpeg", lambda loaded, total: events.append((loaded, total))
        )
        assert events == [(4, 10), (10, 10)]
        assert client.upload_fileobj.call_args.kwargs["ExtraArgs"] == {"ContentType": "audio/mpeg"}

    def test_put_transfer_failure_is_store_error(self) -> None:
        client = MagicMock()
        client.upload_fileobj.side_effect = S3UploadFailedError("Failed to upload: AccessDenied")
        with pytest.raises(StoreError, match="AccessDenied"):
            S3ObjectStore(client, "bucket").put_object("p/a.mp3", b"abc")


class TestSupabaseObjectStore:
    def _store(self) -> tuple[SupabaseObjectStore, MagicMock]:
        client = MagicMock()
        bucket = client.storage.from_.return_value
        return SupabaseObjectStore(client, "media"), bucket

    def test_list_walks_folders(self) -> None:
        store, bucket = self._store()
        listings = {
            "p": [
                {"name": "a.mp3", "id": "1", "updated_at": "2024-01-01T00:00:00Z", "metadata": {"size": 5}},
                {"name": "transcribed_files", "id": None},
            ],
            "p/transcribed_files": [
                {"name": "a.mp3.docx", "id": "2", "updated_at": None, "metadata": {"size": 7}},
            ],
        }
        bucket.list.side_effect = lambda folder, options: listings[folder]

        entries = store.list_objects("p/")

        assert sorted(e.key for e in entries) == ["p/a.mp3", "p/transcribed_files/a.mp3.docx"]
        first = next(e for e in entries if e.key == "p/a.mp3")
        assert first.size == 5
        assert first.last_modified is not None and first.last_modified.year == 2024

    def test_signed_url(self) -> None:
        store, bucket = self._store()
        bucket.create_signed_url.return_value = {"signedURL": "https://sb/signed"}
        assert store.signed_url("p/a.mp3", 60) == "https://sb/signed"
        bucket.create_signed_url.assert_called_once_with("p/a.mp3", 60)

    def test_download_missing(self) -> None:
        store, bucket = self._store()
        bucket.download.side_effect = StorageException({"statusCode": 400, "error": "not_found", "message": "Object not found"})
        with pytest.raises(ObjectNotFoundError):
            store.get_object("p/missing.json")

    def test_remove(self) -> None:
        store, bucket = self._store()
        store.delete_objects(["a", "b"])
        bucket.remove.assert_called_once_with(["a", "b"])

    def test_upload_progress(self) -> None:
        store, bucket = self._store()
        events: list[tuple[int, int]] = []
        store.put_object("p/a.mp3", b"abc", "audio/mpeg", lambda loaded, total: events.append((loaded, total)))
        assert events == [(0, 3), (3, 3)]
        bucket.upload.assert_called_once_with("p/a.mp3", b"abc", {"upsert": "true", "content-type": "audio/mpeg"})

    def test_upload_failure(self) -> None:
        store, bucket = self._store()
        bucket.upload.side_effect = StorageException({"statusCode": 403, "message": "denied"})
        with pytest.raises(StoreError):
            store.put_object("p/a.mp3", b"abc")

    def test_transport_failure_is_store_error(self) -> None:
        store, bucket = self._store()
        bucket.upload.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(StoreError):
            store.put_object("p/a.mp3", b"abc")
        bucket.download.side_effect = httpx.ReadTimeout("timed out")
        with pytest.raises(StoreError):
            store.get_object("p/a.json")


class TestFactory:
    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            build_store(Settings(_env_file=None, storage_backend="ftp"))  # type: ignore[call-arg]

    def test_s3_backend(self) -> None:
        store = build_store(
            Settings(_env_file=None, storage_backend="s3", bucket_name="b", aws_region="eu-west-1")  # type: ignore[call-arg]
        )
        assert isinstance(store, S3ObjectStore)
        assert store.bucket == "b"
