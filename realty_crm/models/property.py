"""Property listing models."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin

LISTING_TYPES = ("my_listing", "client_interest")
PROPERTY_STATUSES = ("active", "pending", "sold", "withdrawn", "expired")
IMAGE_TYPES = ("exterior", "interior", "kitchen", "bathroom", "bedroom", "other")
PROPERTY_CATEGORIES = ("residential", "commercial", "land")


class Property(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "property"
    __table_args__ = (
        Index("ix_property_user_status", "user_id", "status"),
    )

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    address: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(50))
    zip_code: Mapped[str | None] = mapped_column(String(20), default=None)
    country: Mapped[str] = mapped_column(String(50), default="USA")
    property_type: Mapped[str] = mapped_column(String(100))
    listing_type: Mapped[str] = mapped_column(String(20), default="my_listing")
    status: Mapped[str] = mapped_column(String(20), default="active")

    bedrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    bathrooms: Mapped[float | None] = mapped_column(Float, default=None)
    square_feet: Mapped[int | None] = mapped_column(Integer, default=None)
    lot_size_sqft: Mapped[int | None] = mapped_column(Integer, default=None)
    year_built: Mapped[int | None] = mapped_column(Integer, default=None)
    garage_spaces: Mapped[int | None] = mapped_column(Integer, default=None)

    list_price: Mapped[float | None] = mapped_column(Float, default=None)
    sale_price: Mapped[float | None] = mapped_column(Float, default=None)
    estimated_value: Mapped[float | None] = mapped_column(Float, default=None)
    hoa_fees: Mapped[float | None] = mapped_column(Float, default=None)
    property_taxes: Mapped[float | None] = mapped_column(Float, default=None)

    mls_number: Mapped[str | None] = mapped_column(String(50), default=None)
    features: Mapped[list | None] = mapped_column(JSON, default=list)
    amenities: Mapped[list | None] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="SET NULL"), default=None, index=True
    )
    deal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("deal.id", ondelete="SET NULL"), default=None, index=True
    )
    assigned_agent_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, default=None)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )

    # Relationships
    contact: Mapped["Contact | None"] = relationship()  # noqa: F821
    deal: Mapped["Deal | None"] = relationship()  # noqa: F821
    images: Mapped[list["PropertyImage"]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.sort_order",
    )

    @property
    def primary_image(self) -> "PropertyImage | None":
        """First image flagged primary, else the first image, else None."""
        images = sorted(self.images or [], key=lambda img: img.sort_order)
        for image in images:
            if image.is_primary:
                return image
        return images[0] if images else None

    def __repr__(self) -> str:
        return f"<Property {self.title!r} ({self.status})>"


class PropertyImage(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "property_image"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("property.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)
    image_url: Mapped[str] = mapped_column(String(500))
    image_name: Mapped[str | None] = mapped_column(String(255), default=None)
    image_type: Mapped[str] = mapped_column(String(20), default="other")
    caption: Mapped[str | None] = mapped_column(Text, default=None)
    alt_text: Mapped[str | None] = mapped_column(String(255), default=None)
    file_size: Mapped[int | None] = mapped_column(Integer, default=None)
    width: Mapped[int | None] = mapped_column(Integer, default=None)
    height: Mapped[int | None] = mapped_column(Integer, default=None)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    # Blobstore key; image_url is derived from it.
    storage_key: Mapped[str | None] = mapped_column(String(500), default=None)

    property: Mapped["Property"] = relationship(back_populates="images")


class PropertyType(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "property_type"

    name: Mapped[str] = mapped_column(String(100), unique=True)
    category: Mapped[str] = mapped_column(String(20), default="residential")
    description: Mapped[str | None] = mapped_column(Text, default=None)
    is_default: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
