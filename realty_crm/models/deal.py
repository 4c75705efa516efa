"""Deal and DealDocument models."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin

DEAL_STATUSES = ("prospect", "qualified", "proposal", "negotiation", "closed_won", "closed_lost")
ACTIVE_DEAL_STATUSES = ("prospect", "qualified", "proposal", "negotiation")
DEAL_TYPES = ("buying", "selling", "renting", "investment")


class Deal(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "deal"

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    status: Mapped[str] = mapped_column(String(20), default="prospect", index=True)
    deal_type: Mapped[str] = mapped_column(String(20), default="buying")
    property_address: Mapped[str | None] = mapped_column(String(255), default=None)
    price: Mapped[float | None] = mapped_column(Float, default=None)
    commission: Mapped[float | None] = mapped_column(Float, default=None)
    probability: Mapped[int | None] = mapped_column(Integer, default=None)
    expected_close_date: Mapped[date | None] = mapped_column(Date, default=None)
    assigned_agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="SET NULL"), default=None, index=True
    )

    # Relationships
    contact: Mapped["Contact | None"] = relationship(back_populates="deals")  # noqa: F821
    documents: Mapped[list["DealDocument"]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Deal {self.title!r} ({self.status})>"


class DealDocument(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "deal_document"

    deal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("deal.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str] = mapped_column(String(255))
    file_path: Mapped[str] = mapped_column(String(500))
    file_size: Mapped[int | None] = mapped_column(Integer, default=None)
    mime_type: Mapped[str | None] = mapped_column(String(100), default=None)
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, default=None)

    deal: Mapped["Deal"] = relationship(back_populates="documents")

    def __repr__(self) -> str:
        return f"<DealDocument {self.name!r}>"
