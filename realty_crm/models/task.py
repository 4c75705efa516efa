"""Task and CustomTaskType models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin

TASK_PRIORITIES = ("low", "medium", "high", "urgent")
TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")
DEFAULT_TASK_TYPES = (
    "Lead Management",
    "Client Communication",
    "Property & Listing Management",
    "Transaction Management",
    "Administrative Tasks",
    "Business Development",
    "Marketing & Promotion",
)


class Task(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    priority: Mapped[str] = mapped_column(String(20), default="medium")
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    type: Mapped[str | None] = mapped_column(String(100), default=None)
    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="SET NULL"), default=None, index=True
    )
    deal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("deal.id", ondelete="SET NULL"), default=None, index=True
    )
    assigned_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    google_calendar_event_id: Mapped[str | None] = mapped_column(
        String(255), default=None, index=True
    )

    # Relationships
    contact: Mapped["Contact | None"] = relationship(back_populates="tasks")  # noqa: F821
    deal: Mapped["Deal | None"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<Task {self.title!r}>"


class CustomTaskType(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "custom_task_type"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_task_type_user_name"),)

    name: Mapped[str] = mapped_column(String(100))
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
