"""Communication model - logged emails, texts and calls."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, UUIDMixin

COMMUNICATION_TYPES = ("email", "sms", "call")
DIRECTIONS = ("inbound", "outbound")


class Communication(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "communication"

    contact_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("contact.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[str] = mapped_column(String(10))
    direction: Mapped[str] = mapped_column(String(10))
    subject: Mapped[str | None] = mapped_column(String(300), default=None)
    content: Mapped[str] = mapped_column(Text)
    # "metadata" is reserved on declarative classes.
    metadata_json: Mapped[dict | None] = mapped_column("metadata", JSON, default=None)

    contact: Mapped["Contact"] = relationship(back_populates="communications")  # noqa: F821
    user: Mapped["User"] = relationship()  # noqa: F821

    def __repr__(self) -> str:
        return f"<Communication {self.type} {self.direction}>"
