"""Appointment and AppointmentType models."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin

APPOINTMENT_STATUSES = ("scheduled", "confirmed", "in_progress", "completed", "cancelled", "no_show")
DEFAULT_APPOINTMENT_TYPES = (
    "Property Showing",
    "Listing Appointment",
    "Buyer Consultation",
    "Seller Consultation",
    "Home Inspection",
    "Appraisal Meeting",
    "Closing Meeting",
    "Open House",
    "Market Analysis Meeting",
    "Contract Review",
    "Photography Session",
    "Client Follow-up",
    "Networking Event",
    "Training/Education",
    "Administrative Meeting",
)


class Appointment(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "appointment"
    __table_args__ = (
        Index("ix_appointment_user_start", "assigned_user_id", "start_datetime"),
    )

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    start_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    location: Mapped[str | None] = mapped_column(String(255), default=None)
    appointment_type: Mapped[str | None] = mapped_column(String(100), default=None)
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    priority: Mapped[str | None] = mapped_column(String(20), default=None)
    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="SET NULL"), default=None
    )
    deal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("deal.id", ondelete="SET NULL"), default=None
    )
    assigned_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    reminder_minutes: Mapped[int | None] = mapped_column(Integer, default=None)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurring_pattern: Mapped[str | None] = mapped_column(String(50), default=None)
    recurring_end_date: Mapped[date | None] = mapped_column(Date, default=None)
    google_calendar_event_id: Mapped[str | None] = mapped_column(String(255), default=None)

    # Relationships
    contact: Mapped["Contact | None"] = relationship()  # noqa: F821
    deal: Mapped["Deal | None"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<Appointment {self.title!r} @ {self.start_datetime}>"


class AppointmentType(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "appointment_type"

    name: Mapped[str] = mapped_column(String(100))
    color: Mapped[str] = mapped_column(String(20), default="#3B82F6")
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    # NULL for the shared default catalogue.
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), default=None, index=True
    )
