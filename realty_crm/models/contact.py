"""Contact model."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin

CONTACT_TYPES = ("buyer", "seller", "investor", "past_client", "lead")
CONTACT_STATUSES = ("new", "qualified", "nurturing", "lost", "converted")


class Contact(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "contact"
    __table_args__ = (
        Index("ix_contact_agent_status", "assigned_agent_id", "status"),
    )

    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    address: Mapped[str | None] = mapped_column(String(255), default=None)
    city: Mapped[str | None] = mapped_column(String(100), default=None)
    state: Mapped[str | None] = mapped_column(String(50), default=None)
    zip_code: Mapped[str | None] = mapped_column(String(20), default=None)
    property_preferences: Mapped[dict | None] = mapped_column(JSON, default=None)
    budget_min: Mapped[float | None] = mapped_column(Float, default=None)
    budget_max: Mapped[float | None] = mapped_column(Float, default=None)
    timeline: Mapped[str | None] = mapped_column(String(100), default=None)
    contact_type: Mapped[str] = mapped_column(String(20), default="lead")
    lead_source: Mapped[str | None] = mapped_column(String(100), default=None)
    lead_score: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="new")
    assigned_agent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="SET NULL"), default=None, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    # Relationships
    communications: Mapped[list["Communication"]] = relationship(  # noqa: F821
        back_populates="contact", cascade="all, delete-orphan",
        order_by="Communication.created_at.desc()",
    )
    deals: Mapped[list["Deal"]] = relationship(back_populates="contact")  # noqa: F821
    tasks: Mapped[list["Task"]] = relationship(back_populates="contact")  # noqa: F821

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or "Unnamed"

    def __repr__(self) -> str:
        return f"<Contact {self.full_name!r}>"
