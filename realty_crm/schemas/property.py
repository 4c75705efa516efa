"""Property, image and filter schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ListingType = Literal["my_listing", "client_interest"]
PropertyStatus = Literal["active", "pending", "sold", "withdrawn", "expired"]
ImageType = Literal["exterior", "interior", "kitchen", "bathroom", "bedroom", "other"]


class PropertyFilters(BaseModel):
    """Typed list filter; every field is optional and combined with AND."""

    listing_type: ListingType | Literal["all"] | None = None
    status: PropertyStatus | None = None
    property_type: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_bedrooms: int | None = None
    max_bedrooms: int | None = None
    min_bathrooms: float | None = None
    max_bathrooms: float | None = None
    min_square_feet: int | None = None
    max_square_feet: int | None = None
    city: str | None = None
    state: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    search: str | None = None


class PropertyBase(BaseModel):
    description: str | None = None
    zip_code: str | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    square_feet: int | None = None
    lot_size_sqft: int | None = None
    year_built: int | None = None
    garage_spaces: int | None = None
    list_price: float | None = None
    sale_price: float | None = None
    estimated_value: float | None = None
    hoa_fees: float | None = None
    property_taxes: float | None = None
    mls_number: str | None = None
    notes: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    assigned_agent_id: uuid.UUID | None = None


class PropertyCreate(PropertyBase):
    title: str
    address: str
    city: str
    state: str
    country: str = "USA"
    property_type: str
    listing_type: ListingType = "my_listing"
    status: PropertyStatus = "active"
    features: list[str] = []
    amenities: list[str] = []


class PropertyUpdate(PropertyBase):
    title: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    property_type: str | None = None
    listing_type: ListingType | None = None
    status: PropertyStatus | None = None
    features: list[str] | None = None
    amenities: list[str] | None = None


class PropertyImageResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    image_url: str
    image_name: str | None = None
    image_type: str
    caption: str | None = None
    alt_text: str | None = None
    file_size: int | None = None
    width: int | None = None
    height: int | None = None
    is_primary: bool
    sort_order: int

    model_config = {"from_attributes": True}


class PropertyImageUpdate(BaseModel):
    image_type: ImageType | None = None
    caption: str | None = None
    alt_text: str | None = None
    sort_order: int | None = None


class PropertyResponse(PropertyBase):
    id: uuid.UUID
    title: str
    address: str
    city: str
    state: str
    country: str
    property_type: str
    listing_type: str
    status: str
    features: list[str] | None = None
    amenities: list[str] | None = None
    user_id: uuid.UUID
    primary_image: PropertyImageResponse | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PropertyTypeResponse(BaseModel):
    id: uuid.UUID
    name: str
    category: str
    description: str | None = None
    is_default: bool
    sort_order: int

    model_config = {"from_attributes": True}


class ImageReorder(BaseModel):
    image_ids: list[uuid.UUID]
