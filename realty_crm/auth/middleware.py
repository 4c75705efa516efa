"""Route gating based on the session cookie."""

from __future__ import annotations

from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import RealtySettings
from .sessions import session_from_request

PROTECTED_PAGE_PREFIX = "/dashboard"
PUBLIC_ENTRY_PATHS = {"/", "/login", "/signup"}
API_PREFIXES = ("/api/", "/functions/")


def _is_under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


class AuthMiddleware(BaseHTTPMiddleware):
    """Redirect or reject requests according to session presence.

    - unauthenticated requests under ``/dashboard`` go to ``/login?next=...``
    - authenticated requests for ``/``, ``/login`` and ``/signup`` go to
      ``/dashboard``
    - unauthenticated JSON API and function calls get 401
    """

    def __init__(self, app, *, settings_obj: RealtySettings):
        super().__init__(app)
        self._settings_obj = settings_obj

    async def dispatch(self, request: Request, call_next):
        if not self._settings_obj.auth_enabled or request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        session = session_from_request(request, self._settings_obj)
        request.state.session_user = session

        if session is None:
            if _is_under(path, PROTECTED_PAGE_PREFIX):
                target = path
                if request.url.query:
                    target = f"{target}?{request.url.query}"
                return RedirectResponse(f"/login?next={quote(target, safe='/:?=&')}", status_code=303)
            if path.startswith(API_PREFIXES):
                return JSONResponse({"detail": "Authentication required"}, status_code=401)
        elif path in PUBLIC_ENTRY_PATHS:
            return RedirectResponse("/dashboard", status_code=303)

        return await call_next(request)
