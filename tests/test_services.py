"""Tests for the catalog session: refresh, selection, deletion and preview."""

from __future__ import annotations

import asyncio
import json

import pytest

from mediafiles.assets.notices import NoticeLevel
from mediafiles.conventions import MediaKind
from mediafiles.services.catalog import CatalogSession
from mediafiles.services.preview import ImagePreview, MediaPreview
from mediafiles.storage.base import StoreError

PREFIX = "media/001/"

TRANSCRIPT = {
    "results": {
        "items": [
            {"type": "pronunciation", "start_time": "0.1", "end_time": "0.4",
             "alternatives": [{"confidence": "0.99", "content": "Hello"}]},
            {"type": "punctuation", "alternatives": [{"confidence": "0.0", "content": "."}]},
            {"type": "pronunciation", "start_time": "12.0", "end_time": "12.5",
             "alternatives": [{"confidence": "0.91", "content": "[PII]"}]},
        ]
    }
}


def _seed(store) -> None:
    store.objects.update(
        {
            PREFIX + "call.mp3": b"audio",
            PREFIX + "cat.jpg": b"image",
            PREFIX + "clip.mp4": b"video",
            PREFIX + "notes.pdf": b"pdf",
            PREFIX + "transcribed_files/call.mp3-transcribed.json": json.dumps(TRANSCRIPT).encode(),
            PREFIX + "transcribed_files/call.mp3.docx": b"docx",
            PREFIX + "image_metadata/cat.jpg.json": json.dumps(
                [{"Make": "Canon", "GPSLatitude": "10 deg 30' 0\" N", "GPSLongitude": "20 deg 0' 0\" E"}]
            ).encode(),
            "other/unrelated.mp3": b"not ours",
        }
    )


class TestRefresh:
    def test_lists_only_primary_files(self, session: CatalogSession, store) -> None:
        _seed(store)
        messages = asyncio.run(session.refresh())
        assert messages == []
        assert [f.name for f in session.files] == ["call.mp3", "cat.jpg", "clip.mp4", "notes.pdf"]

    def test_failure_empties_catalog(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        store.fail_list = True
        messages = asyncio.run(session.refresh())
        assert session.files == []
        assert len(messages) == 1
        assert messages[0].level is NoticeLevel.ERROR
        assert messages[0].sticky
        assert messages[0].title == "Could not get file list"


class TestSelection:
    def test_select_and_select_all(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        assert not session.something_selected
        assert session.select(PREFIX + "cat.jpg")
        assert not session.select(PREFIX + "missing.jpg")
        assert [f.name for f in session.selected_items] == ["cat.jpg"]
        session.select_all()
        assert session.all_selected
        session.select_all(False)
        assert not session.something_selected


class TestDelete:
    def test_audio_and_image_issue_one_call_with_six_keys(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        session.select(PREFIX + "call.mp3")
        session.select(PREFIX + "cat.jpg")

        deleted, messages = asyncio.run(session.delete_selected())

        assert len(store.delete_calls) == 1
        assert len(store.delete_calls[0]) == 6
        assert len(set(store.delete_calls[0])) == 6
        assert set(deleted) == set(store.delete_calls[0])
        assert messages[0].level is NoticeLevel.SUCCESS
        assert [f.name for f in session.files] == ["clip.mp4", "notes.pdf"]
        assert PREFIX + "image_metadata/cat.jpg.json" not in store.objects

    def test_failure_reports_and_refreshes(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        session.select(PREFIX + "notes.pdf")
        store.fail_delete = True

        deleted, messages = asyncio.run(session.delete_selected())

        assert deleted == []
        assert messages[0].level is NoticeLevel.ERROR
        assert messages[0].title == "Could not delete files"
        assert len(session.files) == 4

    def test_nothing_selected_is_a_no_op(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        assert asyncio.run(session.delete_selected()) == ([], [])
        assert store.delete_calls == []


class TestPreview:
    def test_media_preview_with_transcript(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        preview = asyncio.run(session.preview(PREFIX + "call.mp3"))
        assert isinstance(preview, MediaPreview)
        assert preview.kind is MediaKind.AUDIO
        assert preview.has_transcription
        assert [b.id for b in preview.blocks] == ["00:00", "00:12"]
        assert preview.blocks[1].words[0].text == "REDACTED"
        assert preview.transcript_document_url is not None
        assert preview.transcript_document_url.startswith(
            "https://signed.example/media/001/transcribed_files/call.mp3.docx"
        )

    def test_media_without_transcript(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        preview = asyncio.run(session.preview(PREFIX + "clip.mp4"))
        assert isinstance(preview, MediaPreview)
        assert not preview.has_transcription
        assert preview.blocks == []

    def test_image_partial_artifacts(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        preview = asyncio.run(session.preview(PREFIX + "cat.jpg"))
        assert isinstance(preview, ImagePreview)
        assert preview.has_metadata
        assert not preview.has_recognition
        assert preview.coordinates is not None
        assert preview.coordinates.latitude == pytest.approx(10.5)
        assert preview.has_lat_long
        assert len(preview.map_markers) == 1

    def test_malformed_artifact_only_clears_its_flag(self, session: CatalogSession, store) -> None:
        _seed(store)
        store.objects[PREFIX + "image_metadata/cat.jpg.rekog.json"] = b"{not json"
        asyncio.run(session.refresh())
        preview = asyncio.run(session.preview(PREFIX + "cat.jpg"))
        assert isinstance(preview, ImagePreview)
        assert preview.has_metadata
        assert not preview.has_recognition

    def test_non_object_transcript_item_only_clears_its_flag(self, session: CatalogSession, store) -> None:
        _seed(store)
        store.objects[PREFIX + "transcribed_files/call.mp3-transcribed.json"] = json.dumps(
            {"results": {"items": ["oops"]}}
        ).encode()
        asyncio.run(session.refresh())
        preview = asyncio.run(session.preview(PREFIX + "call.mp3"))
        assert isinstance(preview, MediaPreview)
        assert not preview.has_transcription
        assert preview.blocks == []
        assert preview.transcript_document_url is not None

    def test_store_error_on_artifact(self, session: CatalogSession, store, monkeypatch) -> None:
        _seed(store)
        asyncio.run(session.refresh())

        def boom(key: str) -> bytes:
            raise StoreError("timeout")

        monkeypatch.setattr(store, "get_object", boom)
        preview = asyncio.run(session.preview(PREFIX + "call.mp3"))
        assert not preview.has_transcription

    def test_not_viewable(self, session: CatalogSession, store) -> None:
        _seed(store)
        asyncio.run(session.refresh())
        with pytest.raises(ValueError, match="cannot be previewed"):
            asyncio.run(session.preview(PREFIX + "notes.pdf"))

    def test_unknown_key(self, session: CatalogSession) -> None:
        with pytest.raises(KeyError):
            asyncio.run(session.preview(PREFIX + "nope.mp3"))


class TestDismissUploads:
    def test_dismiss_refreshes_catalog(self, session: CatalogSession, store) -> None:
        _seed(store)

        async def run() -> list:
            session.start_uploads([("new.mp3", None, b"abc")])
            await session.uploads.wait()
            return await session.dismiss_uploads()

        messages = asyncio.run(run())
        assert messages == []
        assert "new.mp3" in [f.name for f in session.files]
