"""Agent accounts and per-user settings."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    """An agent who signs in and owns CRM rows."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str | None] = mapped_column(String(200), default=None)
    first_name: Mapped[str | None] = mapped_column(String(100), default=None)
    last_name: Mapped[str | None] = mapped_column(String(100), default=None)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    brokerage_name: Mapped[str | None] = mapped_column(String(200), default=None)
    address: Mapped[str | None] = mapped_column(String(255), default=None)
    city: Mapped[str | None] = mapped_column(String(100), default=None)
    state: Mapped[str | None] = mapped_column(String(50), default=None)
    zip_code: Mapped[str | None] = mapped_column(String(20), default=None)
    profile_image: Mapped[str | None] = mapped_column(Text, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    settings: Mapped["UserSettings | None"] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False
    )

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.email

    def __repr__(self) -> str:
        return f"<User {self.email!r}>"


class UserSettings(UUIDMixin, TimestampMixin, Base):
    """Google Calendar connection state, one row per user."""

    __tablename__ = "user_settings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id", ondelete="CASCADE"), unique=True, index=True
    )
    # {access_token, refresh_token, expires_at (epoch seconds), token_type, scope}
    google_calendar_token: Mapped[dict | None] = mapped_column(JSON, default=None)
    google_calendar_connected: Mapped[bool] = mapped_column(Boolean, default=False)
    # {lastSync, syncEnabled, calendarId}
    google_calendar_sync_status: Mapped[dict | None] = mapped_column(JSON, default=None)

    user: Mapped["User"] = relationship(back_populates="settings")

    def __repr__(self) -> str:
        return f"<UserSettings user={self.user_id} connected={self.google_calendar_connected}>"
