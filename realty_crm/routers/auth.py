"""Sign-in pages, the Google OAuth redirect target and the profile API."""

from __future__ import annotations

import logging
import uuid
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user, get_optional_user
from ..auth.sessions import (
    clear_session_cookie,
    issue_session_token,
    sanitize_next_path,
    set_session_cookie,
)
from ..config import settings
from ..database import get_db
from ..errors import CRMError
from ..models.user import User
from ..schemas.user import ProfileResponse, ProfileUpdate
from ..services import profile_svc
from ..services.google_calendar_svc import GoogleCalendarService, get_calendar_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
templates = Jinja2Templates(directory=str(settings.templates_dir))

HOME_PATH = "/dashboard"
SETTINGS_PATH = "/dashboard/settings"


def _signed_in(user: User, next_path: str) -> RedirectResponse:
    response = RedirectResponse(next_path, status_code=303)
    set_session_cookie(response, settings, issue_session_token(settings, user.id, user.email))
    return response


@router.get("/")
async def index():
    return RedirectResponse("/login", status_code=303)


@router.get("/login")
async def login_page(request: Request, next: str = HOME_PATH):  # noqa: A002
    return templates.TemplateResponse(
        request, "login.html", {"next": sanitize_next_path(next, HOME_PATH), "error": None}
    )


@router.post("/login")
async def login_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    email = str(form.get("email", "")).strip()
    password = str(form.get("password", ""))
    next_path = sanitize_next_path(str(form.get("next", HOME_PATH)), HOME_PATH)

    user = await profile_svc.authenticate(db, email, password)
    if not user:
        logger.info("Failed sign-in for %s", email.lower())
        return templates.TemplateResponse(
            request,
            "login.html",
            {"next": next_path, "error": "Invalid credentials", "email": email},
            status_code=401,
        )
    return _signed_in(user, next_path)


@router.get("/signup")
async def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html", {"error": None})


@router.post("/signup")
async def signup_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    email = str(form.get("email", "")).strip()
    try:
        user = await profile_svc.sign_up(
            db,
            email,
            str(form.get("password", "")),
            full_name=str(form.get("full_name", "")).strip() or None,
        )
    except CRMError as exc:
        return templates.TemplateResponse(
            request,
            "signup.html",
            {"error": exc.message, "email": email},
            status_code=400,
        )
    return _signed_in(user, HOME_PATH)


@router.api_route("/logout", methods=["GET", "POST"])
async def logout():
    response = RedirectResponse("/login", status_code=303)
    clear_session_cookie(response, settings)
    return response


@router.get("/auth/callback")
async def google_oauth_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    current: User | None = Depends(get_optional_user),
    calendar: GoogleCalendarService = Depends(get_calendar_service),
):
    """Google redirects here; ``state`` carries the user id."""

    def _failed(message: str) -> RedirectResponse:
        query = urlencode({"calendar": "error", "message": message})
        return RedirectResponse(f"{SETTINGS_PATH}?{query}", status_code=303)

    if error:
        return _failed(error)
    if not code or not state:
        return _failed("Missing authorization code")
    try:
        user_id = uuid.UUID(state)
    except ValueError:
        return _failed("Invalid state")
    # state is the bare user id, so it only counts when the session agrees
    if settings.auth_enabled and current is None:
        return _failed("Sign in before connecting Google Calendar")
    if current is not None and current.id != user_id:
        return _failed("Signed-in user does not match the authorization request")

    try:
        await calendar.exchange_code_for_token(user_id, code)
    except CRMError as exc:
        logger.warning("Google code exchange failed for %s: %s", user_id, exc.message)
        return _failed(exc.message)
    return RedirectResponse(f"{SETTINGS_PATH}?calendar=connected", status_code=303)


@router.get("/api/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("/api/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await profile_svc.update_profile(db, user.id, **data.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Profile not found")
    return updated
