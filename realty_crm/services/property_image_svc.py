"""Property image service - stored files plus ordered image rows."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.property import PropertyImage
from ..storage.filestore import FileStore, build_key

logger = logging.getLogger(__name__)

BUCKET = "property-images"


async def get_property_images(db: AsyncSession, property_id: uuid.UUID) -> list[PropertyImage]:
    stmt = (
        select(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .order_by(PropertyImage.sort_order.asc(), PropertyImage.created_at.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_property_image(db: AsyncSession, image_id: uuid.UUID) -> PropertyImage | None:
    stmt = select(PropertyImage).where(PropertyImage.id == image_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def _clear_primary(db: AsyncSession, property_id: uuid.UUID) -> None:
    await db.execute(
        update(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .values(is_primary=False)
        .execution_options(synchronize_session="fetch")
    )


async def upload_property_image(
    db: AsyncSession,
    store: FileStore,
    property_id: uuid.UUID,
    user_id: uuid.UUID,
    *,
    filename: str,
    data: bytes,
    image_type: str = "other",
    caption: str | None = None,
    alt_text: str | None = None,
    is_primary: bool = False,
    sort_order: int | None = None,
    width: int | None = None,
    height: int | None = None,
) -> PropertyImage:
    """Store the file and insert its image row.

    Without an explicit ``sort_order`` the image goes to the end. A primary
    upload clears the flag on the property's other images.
    """
    key = build_key(BUCKET, property_id, filename)
    store.put_bytes(key, data)

    if sort_order is None:
        stmt = select(func.max(PropertyImage.sort_order)).where(
            PropertyImage.property_id == property_id
        )
        current = (await db.execute(stmt)).scalar()
        sort_order = 0 if current is None else current + 1
    if is_primary:
        await _clear_primary(db, property_id)

    image = PropertyImage(
        property_id=property_id,
        user_id=user_id,
        image_url=store.url_for(key),
        image_name=filename,
        image_type=image_type or "other",
        caption=caption,
        alt_text=alt_text,
        file_size=len(data or b""),
        width=width,
        height=height,
        is_primary=is_primary,
        sort_order=sort_order,
        storage_key=key,
    )
    db.add(image)
    await db.commit()
    await db.refresh(image)
    return image


async def update_property_image(db: AsyncSession, image_id: uuid.UUID, **kwargs) -> PropertyImage | None:
    image = await get_property_image(db, image_id)
    if not image:
        return None
    for key, value in kwargs.items():
        setattr(image, key, value)
    await db.commit()
    await db.refresh(image)
    return image


async def delete_property_image(
    db: AsyncSession, image_id: uuid.UUID, store: FileStore | None = None
) -> bool:
    """Delete the image row and its stored file."""
    image = await get_property_image(db, image_id)
    if not image:
        return False
    key = image.storage_key
    await db.delete(image)
    await db.commit()
    if store is not None and key:
        if not store.delete(key):
            logger.warning("Property image file already missing: %s", key)
    return True


async def set_primary_image(db: AsyncSession, property_id: uuid.UUID, image_id: uuid.UUID) -> PropertyImage:
    """Make *image_id* the property's only primary image."""
    image = await get_property_image(db, image_id)
    if not image or image.property_id != property_id:
        raise NotFoundError(f"Image {image_id} not found for property {property_id}")
    await _clear_primary(db, property_id)
    image.is_primary = True
    await db.commit()
    await db.refresh(image)
    return image


async def reorder_images(
    db: AsyncSession, property_id: uuid.UUID, image_ids: list[uuid.UUID]
) -> list[PropertyImage]:
    images = {img.id: img for img in await get_property_images(db, property_id)}
    ordered = []
    for position, image_id in enumerate(image_ids):
        image = images.get(image_id)
        if image is None:
            continue
        image.sort_order = position
        ordered.append(image)
    await db.commit()
    return ordered


async def bulk_upload_images(
    db: AsyncSession,
    store: FileStore,
    property_id: uuid.UUID,
    user_id: uuid.UUID,
    files: list[tuple[str, bytes]],
    image_type: str = "other",
) -> list[PropertyImage]:
    """Upload several files in order; the first becomes the primary image."""
    uploaded = []
    for index, (filename, data) in enumerate(files):
        uploaded.append(
            await upload_property_image(
                db,
                store,
                property_id,
                user_id,
                filename=filename,
                data=data,
                image_type=image_type,
                is_primary=index == 0,
                sort_order=index,
            )
        )
    return uploaded
