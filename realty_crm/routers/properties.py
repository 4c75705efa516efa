"""Property listing, image and property type JSON API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.property import (
    ImageReorder,
    PropertyCreate,
    PropertyFilters,
    PropertyImageResponse,
    PropertyImageUpdate,
    PropertyResponse,
    PropertyTypeResponse,
    PropertyUpdate,
)
from ..services import property_image_svc, property_svc, property_type_svc
from ..storage.filestore import FileStore, get_filestore

router = APIRouter(prefix="/api", tags=["properties"])


async def _owned_property(db: AsyncSession, property_id: uuid.UUID, user: User):
    prop = await property_svc.get_property(db, property_id, user.id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.get("/properties", response_model=list[PropertyResponse])
async def list_properties(
    filters: PropertyFilters = Depends(),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await property_svc.get_properties(db, user.id, filters)


@router.get("/properties/stats")
async def property_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await property_svc.get_property_stats(db, user.id)


@router.get("/properties/search", response_model=list[PropertyResponse])
async def search_properties(
    q: str = "",
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await property_svc.search_properties(db, user.id, q)


@router.post("/properties", response_model=PropertyResponse, status_code=201)
async def create_property(
    data: PropertyCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await property_svc.create_property(db, user.id, **data.model_dump())


@router.get("/properties/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _owned_property(db, property_id, user)


@router.patch("/properties/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: uuid.UUID,
    data: PropertyUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    prop = await property_svc.update_property(
        db, property_id, user.id, **data.model_dump(exclude_unset=True)
    )
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.delete("/properties/{property_id}")
async def delete_property(
    property_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    if not await property_svc.delete_property(db, property_id, user.id, store):
        raise HTTPException(status_code=404, detail="Property not found")
    return {"ok": True}


# -- Images -------------------------------------------------------------------


@router.get("/properties/{property_id}/images", response_model=list[PropertyImageResponse])
async def list_images(
    property_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_property(db, property_id, user)
    return await property_image_svc.get_property_images(db, property_id)


@router.post(
    "/properties/{property_id}/images",
    response_model=list[PropertyImageResponse],
    status_code=201,
)
async def upload_images(
    property_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    image_type: str = Form("other"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    """Single or bulk upload; on bulk the first file becomes primary."""
    await _owned_property(db, property_id, user)
    payload = [(f.filename or "image", await f.read()) for f in files]
    if len(payload) == 1:
        filename, data = payload[0]
        existing = await property_image_svc.get_property_images(db, property_id)
        image = await property_image_svc.upload_property_image(
            db,
            store,
            property_id,
            user.id,
            filename=filename,
            data=data,
            image_type=image_type,
            is_primary=not existing,
        )
        return [image]
    return await property_image_svc.bulk_upload_images(
        db, store, property_id, user.id, payload, image_type=image_type
    )


@router.patch("/properties/{property_id}/images/{image_id}", response_model=PropertyImageResponse)
async def update_image(
    property_id: uuid.UUID,
    image_id: uuid.UUID,
    data: PropertyImageUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_property(db, property_id, user)
    image = await property_image_svc.get_property_image(db, image_id)
    if not image or image.property_id != property_id:
        raise HTTPException(status_code=404, detail="Image not found")
    return await property_image_svc.update_property_image(
        db, image_id, **data.model_dump(exclude_unset=True)
    )


@router.post("/properties/{property_id}/images/{image_id}/primary", response_model=PropertyImageResponse)
async def set_primary_image(
    property_id: uuid.UUID,
    image_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_property(db, property_id, user)
    return await property_image_svc.set_primary_image(db, property_id, image_id)


@router.post("/properties/{property_id}/images/reorder", response_model=list[PropertyImageResponse])
async def reorder_images(
    property_id: uuid.UUID,
    data: ImageReorder,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_property(db, property_id, user)
    return await property_image_svc.reorder_images(db, property_id, data.image_ids)


@router.delete("/properties/{property_id}/images/{image_id}")
async def delete_image(
    property_id: uuid.UUID,
    image_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: FileStore = Depends(get_filestore),
):
    await _owned_property(db, property_id, user)
    image = await property_image_svc.get_property_image(db, image_id)
    if not image or image.property_id != property_id:
        raise HTTPException(status_code=404, detail="Image not found")
    await property_image_svc.delete_property_image(db, image_id, store)
    return {"ok": True}


# -- Types --------------------------------------------------------------------


@router.get("/property-types", response_model=list[PropertyTypeResponse])
async def list_property_types(
    category: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if category:
        return await property_type_svc.get_property_types_by_category(db, category)
    return await property_type_svc.get_property_types(db)
