"""Upload endpoints: start uploads, poll progress, dismiss the dialog."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from mediafiles.api.deps import get_session
from mediafiles.api.models import (
    DismissResponse,
    NoticeModel,
    UploadProgressModel,
    UploadResponse,
)
from mediafiles.api.routes.files import catalog_models
from mediafiles.services.catalog import CatalogSession

router = APIRouter()

Session = Annotated[CatalogSession, Depends(get_session)]


def _upload_response(session: CatalogSession, messages: list[NoticeModel]) -> UploadResponse:
    batch = session.uploads.batch
    return UploadResponse(
        uploads=[UploadProgressModel.model_validate(u) for u in batch.uploads],
        finished=batch.finished,
        notices=messages,
    )


@router.post("/api/files/upload", response_model=UploadResponse)
async def upload_files(
    files: Annotated[list[UploadFile], File(...)],
    session: Session,
) -> UploadResponse:
    """Start uploading the given files.

    Returns immediately with one progress entry per accepted file; poll
    GET /api/files/uploads for progress.  Over-long names are rejected and
    names with whitespace or ``+`` are stored with underscores, each with a
    notice.
    """
    payload: list[tuple[str, str | None, bytes]] = []
    for upload in files:
        payload.append((upload.filename or "", upload.content_type, await upload.read()))

    messages = session.start_uploads(payload)
    return _upload_response(session, [NoticeModel.model_validate(n) for n in messages])


@router.get("/api/files/uploads", response_model=UploadResponse)
async def upload_progress(session: Session) -> UploadResponse:
    messages = session.uploads.drain_notices()
    return _upload_response(session, [NoticeModel.model_validate(n) for n in messages])


@router.post("/api/files/uploads/dismiss", response_model=DismissResponse)
async def dismiss_uploads(session: Session) -> DismissResponse:
    """Close the upload dialog and return the refreshed catalog."""
    messages = await session.dismiss_uploads()
    return DismissResponse(
        files=catalog_models(session),
        notices=[NoticeModel.model_validate(n) for n in messages],
    )
