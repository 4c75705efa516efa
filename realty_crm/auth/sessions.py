"""Signed session cookies and password hashing."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import secrets
import time
import uuid
from dataclasses import dataclass
from urllib.parse import urlsplit

from fastapi import Request

from ..config import RealtySettings


@dataclass(frozen=True)
class SessionUser:
    user_id: uuid.UUID
    email: str


def hash_password(password: str, iterations: int = 200_000) -> str:
    """Hash a password using PBKDF2-SHA256."""
    if not password:
        raise ValueError("Password is required")
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return (
        f"pbkdf2_sha256${iterations}$"
        f"{binascii.hexlify(salt).decode('ascii')}$"
        f"{binascii.hexlify(digest).decode('ascii')}"
    )


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a PBKDF2-SHA256 password hash."""
    if not password or not stored_hash:
        return False
    try:
        scheme, iterations_raw, salt_hex, digest_hex = stored_hash.split("$", 3)
        if scheme != "pbkdf2_sha256":
            return False
        iterations = int(iterations_raw)
        salt = binascii.unhexlify(salt_hex.encode("ascii"))
        expected = binascii.unhexlify(digest_hex.encode("ascii"))
    except (ValueError, binascii.Error):
        return False

    actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * ((4 - (len(data) % 4)) % 4)
    return base64.urlsafe_b64decode((data + padding).encode("utf-8"))


def _sign(secret: str, body: str) -> str:
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def _ttl_seconds(settings_obj: RealtySettings) -> int:
    return max(60, int(settings_obj.auth_session_ttl_seconds))


def issue_session_token(settings_obj: RealtySettings, user_id: uuid.UUID, email: str) -> str:
    secret = (settings_obj.auth_secret or "").strip()
    if not secret:
        raise RuntimeError("auth_secret is required to issue sessions")

    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "email": (email or "").strip().lower(),
        "iat": now,
        "exp": now + _ttl_seconds(settings_obj),
    }
    body = _b64url_encode(json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8"))
    return f"{body}.{_sign(secret, body)}"


def decode_session_token(settings_obj: RealtySettings, token: str) -> SessionUser | None:
    secret = (settings_obj.auth_secret or "").strip()
    if not secret or not token:
        return None

    try:
        body, provided_sig = token.split(".", 1)
    except ValueError:
        return None
    if not hmac.compare_digest(provided_sig, _sign(secret, body)):
        return None

    try:
        payload = json.loads(_b64url_decode(body))
    except (ValueError, binascii.Error):
        return None
    if not isinstance(payload, dict):
        return None

    exp = payload.get("exp")
    if not isinstance(exp, int) or exp <= int(time.time()):
        return None
    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None
    return SessionUser(user_id=user_id, email=str(payload.get("email") or ""))


def token_from_request(request: Request, settings_obj: RealtySettings) -> str:
    cookie_token = request.cookies.get(settings_obj.auth_cookie_name, "")
    if cookie_token:
        return cookie_token

    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return ""


def session_from_request(request: Request, settings_obj: RealtySettings) -> SessionUser | None:
    return decode_session_token(settings_obj, token_from_request(request, settings_obj))


def set_session_cookie(response, settings_obj: RealtySettings, token: str) -> None:
    response.set_cookie(
        key=settings_obj.auth_cookie_name,
        value=token,
        max_age=_ttl_seconds(settings_obj),
        httponly=True,
        secure=settings_obj.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response, settings_obj: RealtySettings) -> None:
    response.delete_cookie(settings_obj.auth_cookie_name, path="/")


def sanitize_next_path(raw_next: str, home_path: str = "/dashboard") -> str:
    """Only allow local absolute paths as post-login targets."""
    next_path = (raw_next or "").strip()
    if not next_path or "\\" in next_path:
        return home_path
    parsed = urlsplit(next_path)
    if parsed.scheme or parsed.netloc:
        return home_path
    if not next_path.startswith("/") or next_path.startswith("//"):
        return home_path
    return next_path
