"""File catalog endpoints: list, delete and preview."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from mediafiles.api.deps import get_session
from mediafiles.api.models import (
    CatalogItemModel,
    CatalogResponse,
    DeleteRequest,
    DeleteResponse,
    ImagePreviewModel,
    MediaPreviewModel,
    NoticeModel,
    PreviewResponse,
)
from mediafiles.services.catalog import CatalogSession
from mediafiles.services.preview import MediaPreview

router = APIRouter()

Session = Annotated[CatalogSession, Depends(get_session)]


def catalog_models(session: CatalogSession) -> list[CatalogItemModel]:
    return [CatalogItemModel.model_validate(f) for f in session.files]


@router.get("/api/files", response_model=CatalogResponse)
async def list_files(session: Session) -> CatalogResponse:
    """Rebuild and return the file catalog, derived artifacts excluded."""
    messages = await session.refresh()
    return CatalogResponse(
        files=catalog_models(session),
        notices=[NoticeModel.model_validate(n) for n in messages],
    )


@router.post("/api/files/delete", response_model=DeleteResponse)
async def delete_files(request: DeleteRequest, session: Session) -> DeleteResponse:
    """Delete the given catalog files together with all their derived artifacts.

    Keys are matched against the current catalog; the catalog is loaded
    first if it is empty.  Unknown keys are ignored.
    """
    if not session.files:
        await session.refresh()

    session.select_all(False)
    for key in request.keys:
        session.select(key)

    deleted, messages = await session.delete_selected()
    return DeleteResponse(
        deleted_keys=deleted,
        files=catalog_models(session),
        notices=[NoticeModel.model_validate(n) for n in messages],
    )


@router.get("/api/files/preview", response_model=PreviewResponse)
async def preview_file(key: Annotated[str, Query()], session: Session) -> PreviewResponse:
    """Open a file for preview: transcript for media, metadata and labels for images."""
    if session.find(key) is None:
        await session.refresh()

    try:
        preview = await session.preview(key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File {key} not found") from None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if isinstance(preview, MediaPreview):
        return PreviewResponse(media=MediaPreviewModel.model_validate(preview))
    return PreviewResponse(image=ImagePreviewModel.model_validate(preview))
