"""Activity model - timeline of calls, meetings and notes."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin, utcnow

ACTIVITY_TYPES = ("call", "email", "sms", "meeting", "note")
ACTIVITY_DIRECTIONS = ("inbound", "outbound", "none")


class Activity(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "activity"

    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="CASCADE"), default=None, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[str] = mapped_column(String(10))
    direction: Mapped[str] = mapped_column(String(10), default="none")
    title: Mapped[str] = mapped_column(String(300))
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    contact: Mapped["Contact | None"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<Activity {self.type} {self.title!r}>"
