"""Agent accounts - sign-up, credential checks and profile edits."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.sessions import hash_password, verify_password
from ..errors import ValidationError
from ..models.base import utcnow
from ..models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PROFILE_FIELDS = (
    "full_name",
    "first_name",
    "last_name",
    "phone",
    "brokerage_name",
    "address",
    "city",
    "state",
    "zip_code",
    "profile_image",
)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(User.email == _normalize_email(email))
    return (await db.execute(stmt)).scalar_one_or_none()


async def sign_up(
    db: AsyncSession,
    email: str,
    password: str,
    *,
    full_name: str | None = None,
) -> User:
    email_norm = _normalize_email(email)
    if not email_norm or "@" not in email_norm:
        raise ValidationError("A valid email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if await get_user_by_email(db, email_norm):
        raise ValidationError("An account with this email already exists")

    first_name = last_name = None
    if full_name:
        parts = full_name.strip().split(" ", 1)
        first_name = parts[0] or None
        last_name = parts[1].strip() if len(parts) > 1 else None

    user = User(
        email=email_norm,
        password_hash=hash_password(password),
        full_name=(full_name or "").strip() or None,
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created account %s", email_norm)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the active user for valid credentials, else None."""
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    user.last_login_at = utcnow()
    await db.commit()
    await db.refresh(user)
    return user


async def update_profile(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> User | None:
    user = await get_user(db, user_id)
    if not user:
        return None
    for key, value in kwargs.items():
        if key in PROFILE_FIELDS:
            setattr(user, key, value)
    user.updated_at = utcnow()
    await db.commit()
    await db.refresh(user)
    return user
