"""Deal document service - metadata rows plus the stored file bytes."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.deal import DealDocument
from ..storage.filestore import FileStore, build_key

logger = logging.getLogger(__name__)

BUCKET = "deal-documents"


async def get_documents_by_deal_id(db: AsyncSession, deal_id: uuid.UUID) -> list[DealDocument]:
    stmt = (
        select(DealDocument)
        .where(DealDocument.deal_id == deal_id)
        .order_by(DealDocument.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_document(db: AsyncSession, document_id: uuid.UUID) -> DealDocument | None:
    stmt = select(DealDocument).where(DealDocument.id == document_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def create_document(db: AsyncSession, deal_id: uuid.UUID, **kwargs) -> DealDocument:
    doc = DealDocument(deal_id=deal_id, **kwargs)
    db.add(doc)
    await db.commit()
    await db.refresh(doc)
    return doc


async def update_document(db: AsyncSession, document_id: uuid.UUID, **kwargs) -> DealDocument | None:
    doc = await get_document(db, document_id)
    if not doc:
        return None
    for key, value in kwargs.items():
        setattr(doc, key, value)
    await db.commit()
    await db.refresh(doc)
    return doc


async def delete_document(
    db: AsyncSession, document_id: uuid.UUID, store: FileStore | None = None
) -> bool:
    """Delete the row and, when a store is given, the stored file."""
    doc = await get_document(db, document_id)
    if not doc:
        return False
    file_path = doc.file_path
    await db.delete(doc)
    await db.commit()
    if store is not None:
        delete_file(store, file_path)
    return True


def upload_file(store: FileStore, deal_id: uuid.UUID, filename: str, data: bytes) -> str:
    """Store the bytes and return the storage key."""
    key = build_key(BUCKET, deal_id, filename)
    store.put_bytes(key, data)
    return key


def delete_file(store: FileStore, path: str) -> bool:
    removed = store.delete(path)
    if not removed:
        logger.warning("Deal document file already missing: %s", path)
    return removed


def get_file_url(store: FileStore, path: str) -> str:
    return store.url_for(path)


def download_file(store: FileStore, path: str) -> bytes:
    return store.read_bytes(path)


async def upload_document(
    db: AsyncSession,
    store: FileStore,
    deal_id: uuid.UUID,
    *,
    filename: str,
    data: bytes,
    mime_type: str | None = None,
    name: str | None = None,
    uploaded_by: uuid.UUID | None = None,
) -> DealDocument:
    """Upload a file and record its metadata in one step."""
    key = upload_file(store, deal_id, filename, data)
    return await create_document(
        db,
        deal_id,
        name=name or filename,
        file_name=filename,
        file_path=key,
        file_size=len(data or b""),
        mime_type=mime_type,
        uploaded_by=uploaded_by,
    )
