"""Deal and deal document JSON API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.deal import (
    DealCreate,
    DealDocumentResponse,
    DealDocumentUpdate,
    DealResponse,
    DealUpdate,
)
from ..services import deal_document_svc, deal_svc
from ..storage.filestore import FileStore, get_filestore, safe_filename

router = APIRouter(prefix="/api/deals", tags=["deals"])


async def _owned_deal(db: AsyncSession, deal_id: uuid.UUID, user: User):
    deal = await deal_svc.get_deal_by_id(db, deal_id, user.id)
    if not deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal


async def _owned_document(db: AsyncSession, deal_id: uuid.UUID, document_id: uuid.UUID, user: User):
    await _owned_deal(db, deal_id, user)
    doc = await deal_document_svc.get_document(db, document_id)
    if not doc or doc.deal_id != deal_id:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc


@router.get("", response_model=list[DealResponse])
async def list_deals(
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await deal_svc.get_deals(db, user.id, limit=limit, offset=offset)


@router.get("/search", response_model=list[DealResponse])
async def search_deals(
    q: str = "",
    status: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await deal_svc.search_deals(db, user.id, q, status)


@router.get("/status/{status}", response_model=list[DealResponse])
async def deals_by_status(
    status: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await deal_svc.get_deals_by_status(db, user.id, status)


@router.post("", response_model=DealResponse, status_code=201)
async def create_deal(
    data: DealCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await deal_svc.create_deal(db, user.id, **data.model_dump())


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _owned_deal(db, deal_id, user)


@router.patch("/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: uuid.UUID,
    data: DealUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deal = await deal_svc.update_deal(db, deal_id, user.id, **data.model_dump(exclude_unset=True))
    if not deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal


@router.delete("/{deal_id}")
async def delete_deal(
    deal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await deal_svc.delete_deal(db, deal_id, user.id):
        raise HTTPException(status_code=404, detail="Deal not found")
    return {"ok": True}


# -- Documents ----------------------------------------------------------------


@router.get("/{deal_id}/documents", response_model=list[DealDocumentResponse])
async def list_documents(
    deal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_deal(db, deal_id, user)
    return await deal_document_svc.get_documents_by_deal_id(db, deal_id)


@router.post("/{deal_id}/documents", response_model=DealDocumentResponse, status_code=201)
async def upload_document(
    deal_id: uuid.UUID,
    file: UploadFile = File(...),
    name: str | None = Form(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    await _owned_deal(db, deal_id, user)
    data = await file.read()
    return await deal_document_svc.upload_document(
        db,
        store,
        deal_id,
        filename=file.filename or "document",
        data=data,
        mime_type=file.content_type,
        name=name,
        uploaded_by=user.id,
    )


@router.patch("/{deal_id}/documents/{document_id}", response_model=DealDocumentResponse)
async def update_document(
    deal_id: uuid.UUID,
    document_id: uuid.UUID,
    data: DealDocumentUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_document(db, deal_id, document_id, user)
    return await deal_document_svc.update_document(
        db, document_id, **data.model_dump(exclude_unset=True)
    )


@router.get("/{deal_id}/documents/{document_id}/download")
async def download_document(
    deal_id: uuid.UUID,
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    doc = await _owned_document(db, deal_id, document_id, user)
    body = deal_document_svc.download_file(store, doc.file_path)
    return Response(
        content=body,
        media_type=doc.mime_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{safe_filename(doc.file_name)}"'},
    )


@router.get("/{deal_id}/documents/{document_id}/url")
async def document_url(
    deal_id: uuid.UUID,
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    doc = await _owned_document(db, deal_id, document_id, user)
    return {"url": deal_document_svc.get_file_url(store, doc.file_path)}


@router.delete("/{deal_id}/documents/{document_id}")
async def delete_document(
    deal_id: uuid.UUID,
    document_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    await _owned_document(db, deal_id, document_id, user)
    await deal_document_svc.delete_document(db, document_id, store)
    return {"ok": True}
