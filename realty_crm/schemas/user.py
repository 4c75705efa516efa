"""Account and profile schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    brokerage_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    profile_image: str | None = None


class ProfileResponse(ProfileUpdate):
    id: uuid.UUID
    email: str

    model_config = {"from_attributes": True}
