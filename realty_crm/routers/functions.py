"""RPC-style calendar function endpoints.

``POST /functions/v1/google-calendar-auth`` and
``POST /functions/v1/google-calendar-sync`` take ``{userId, action, ...}``
and answer ``{...result}`` or ``{"error": message}`` with permissive CORS
headers.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.sessions import session_from_request
from ..config import settings
from ..database import get_db
from ..google.client import GoogleCalendarClient
from ..schemas.functions import FunctionRequest
from ..services import calendar_sync_svc
from ..services.calendar_sync_svc import InvalidActionError
from ..services.google_calendar_svc import get_google_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(body: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


async def _run(name: str, handler, request: Request, db: AsyncSession, client: GoogleCalendarClient):
    try:
        payload = FunctionRequest.model_validate(await request.json()).model_dump()
    except ValueError as exc:
        logger.error("Error in %s: bad payload: %s", name, exc)
        return _json({"error": "Invalid request body"}, status_code=500)

    session = session_from_request(request, settings)
    if settings.auth_enabled and (session is None or str(session.user_id) != str(payload["userId"])):
        return _json({"error": "Not allowed for this user"}, status_code=403)

    try:
        result = await handler(db, client, payload)
    except InvalidActionError:
        return _json({"error": "Invalid action"}, status_code=400)
    except Exception as exc:
        logger.exception("Error in %s", name)
        return _json({"error": getattr(exc, "message", None) or str(exc)}, status_code=500)
    return _json(result)


@router.options("/google-calendar-auth")
@router.options("/google-calendar-sync")
async def functions_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/google-calendar-auth")
async def google_calendar_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
    client: GoogleCalendarClient = Depends(get_google_client),
):
    return await _run("google-calendar-auth", calendar_sync_svc.handle_auth_action, request, db, client)


@router.post("/google-calendar-sync")
async def google_calendar_sync(
    request: Request,
    db: AsyncSession = Depends(get_db),
    client: GoogleCalendarClient = Depends(get_google_client),
):
    return await _run("google-calendar-sync", calendar_sync_svc.handle_sync_action, request, db, client)
