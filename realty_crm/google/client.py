"""Google OAuth 2.0 + Calendar v3 REST client.

Handles the pieces of the Authorization Code flow the CRM needs:
1. Generate the consent URL (user id carried as ``state``)
2. Exchange the returned code for access + refresh tokens
3. Refresh the access token when it has expired
4. Create / update / delete / list events on the primary calendar

Every call is a single request on a fresh ``httpx.AsyncClient``; failures
raise ``GoogleCalendarError`` with the provider's message and are not retried.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from ..config import RealtySettings
from ..errors import GoogleCalendarError

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
]
PRIMARY_CALENDAR = "primary"
EVENT_DURATION = timedelta(hours=1)
REMINDER_MINUTES = (15, 60)


@dataclass
class GoogleTokens:
    """Tokens returned from Google's token endpoint."""

    access_token: str
    expires_in: int  # seconds
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scope: str = ""
    _created_at: int = field(default_factory=lambda: int(time.time()))

    @property
    def expires_at(self) -> int:
        """Unix timestamp when the access token expires."""
        return self._created_at + self.expires_in

    def to_storage_data(self) -> dict[str, Any]:
        """Shape persisted in ``UserSettings.google_calendar_token``."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "token_type": self.token_type,
            "scope": self.scope,
        }


def _error_payload(response: httpx.Response) -> dict:
    try:
        data = response.json() if response.content else {}
    except ValueError:
        data = {"raw_response": response.text[:500]}
    return data if isinstance(data, dict) else {"raw_response": data}


def _provider_message(data: dict, fallback: str) -> str:
    """Pull a human message out of either error shape Google uses.

    Token endpoint: ``{"error": "invalid_grant", "error_description": "..."}``
    Calendar API: ``{"error": {"code": 404, "message": "..."}}``
    """
    error = data.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or fallback)
    return str(data.get("error_description") or error or fallback)


def _error_code(data: dict, default: str) -> str:
    error = data.get("error")
    if isinstance(error, dict):
        return str(error.get("status") or error.get("code") or default)
    return str(error or default)


def task_event_body(
    title: str,
    description: str | None,
    due_date: datetime,
    time_zone: str,
    *,
    with_reminders: bool = False,
) -> dict[str, Any]:
    """Translate a task into a one-hour calendar event."""
    start = due_date if due_date.tzinfo else due_date.replace(tzinfo=timezone.utc)
    end = start + EVENT_DURATION
    body: dict[str, Any] = {
        "summary": title,
        "description": description or "",
        "start": {"dateTime": start.isoformat(), "timeZone": time_zone},
        "end": {"dateTime": end.isoformat(), "timeZone": time_zone},
    }
    if with_reminders:
        body["reminders"] = {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": m} for m in REMINDER_MINUTES],
        }
    return body


class GoogleCalendarClient:
    """Outbound calls to Google OAuth and the Calendar API.

    Usage:
        client = GoogleCalendarClient.from_settings(settings)
        url = client.get_authorization_url(state=str(user.id))
        tokens = await client.exchange_code(code)
        event = await client.create_event(tokens.access_token, body)
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str,
        *,
        auth_url: str = "https://accounts.google.com/o/oauth2/v2/auth",
        token_url: str = "https://oauth2.googleapis.com/token",
        api_base: str = "https://www.googleapis.com/calendar/v3",
        timeout: float = 30.0,
        scopes: list[str] | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.scopes = scopes or list(GOOGLE_CALENDAR_SCOPES)

    @classmethod
    def from_settings(cls, settings_obj: RealtySettings) -> "GoogleCalendarClient":
        return cls(
            client_id=settings_obj.google_client_id,
            client_secret=settings_obj.google_client_secret,
            redirect_uri=settings_obj.google_redirect_uri,
            auth_url=settings_obj.google_auth_url,
            token_url=settings_obj.google_token_url,
            api_base=settings_obj.google_calendar_api,
            timeout=settings_obj.google_http_timeout_seconds,
        )

    def _require_credentials(self) -> None:
        if not self.client_id or not self.client_secret:
            raise GoogleCalendarError(
                "Google Calendar is not configured",
                error_code="not_configured",
            )

    # -- OAuth -------------------------------------------------------------

    def get_authorization_url(self, state: str) -> str:
        """Consent URL requesting offline access; *state* is passed through."""
        if not self.client_id:
            raise GoogleCalendarError(
                "Google Calendar is not configured",
                error_code="not_configured",
            )
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{self.auth_url}?{urlencode(params)}"

    async def _token_request(self, data: dict[str, str], failure: str, default_code: str) -> GoogleTokens:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )

        payload = _error_payload(response)
        if response.status_code != 200 or "error" in payload:
            raise GoogleCalendarError(
                _provider_message(payload, f"{failure}: {response.status_code}"),
                error_code=_error_code(payload, default_code),
                details=payload,
            )
        return self._parse_token_response(payload)

    async def exchange_code(self, code: str) -> GoogleTokens:
        """Exchange an authorization code for tokens."""
        self._require_credentials()
        return await self._token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            "Token exchange failed",
            "exchange_failed",
        )

    async def refresh_access_token(self, refresh_token: str) -> GoogleTokens:
        """Get a fresh access token. Google usually omits a new refresh token."""
        self._require_credentials()
        if not refresh_token:
            raise GoogleCalendarError("No refresh token stored", error_code="missing_refresh_token")
        return await self._token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            "Token refresh failed",
            "refresh_failed",
        )

    def _parse_token_response(self, data: dict[str, Any]) -> GoogleTokens:
        try:
            return GoogleTokens(
                access_token=data["access_token"],
                expires_in=int(data.get("expires_in", 3600)),
                refresh_token=data.get("refresh_token"),
                token_type=data.get("token_type", "Bearer"),
                scope=data.get("scope", ""),
            )
        except KeyError as e:
            raise GoogleCalendarError(
                f"Invalid token response: missing {e}",
                error_code="invalid_response",
                details={"missing_field": str(e), "response_keys": list(data.keys())},
            )

    # -- Calendar API ------------------------------------------------------

    def _events_url(self, calendar_id: str, event_id: str | None = None) -> str:
        url = f"{self.api_base}/calendars/{quote(calendar_id, safe='')}/events"
        if event_id:
            url = f"{url}/{quote(event_id, safe='')}"
        return url

    @staticmethod
    def _headers(access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _check(response: httpx.Response, action: str) -> dict:
        payload = _error_payload(response)
        if not 200 <= response.status_code < 300 or "error" in payload:
            raise GoogleCalendarError(
                _provider_message(payload, f"{action} failed: {response.status_code}"),
                error_code=_error_code(payload, f"{action}_failed"),
                details=payload,
            )
        return payload

    async def create_event(
        self, access_token: str, event: dict[str, Any], calendar_id: str = PRIMARY_CALENDAR
    ) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self._events_url(calendar_id), json=event, headers=self._headers(access_token)
            )
        return self._check(response, "create_event")

    async def update_event(
        self,
        access_token: str,
        event_id: str,
        event: dict[str, Any],
        calendar_id: str = PRIMARY_CALENDAR,
    ) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.put(
                self._events_url(calendar_id, event_id), json=event, headers=self._headers(access_token)
            )
        return self._check(response, "update_event")

    async def delete_event(
        self, access_token: str, event_id: str, calendar_id: str = PRIMARY_CALENDAR
    ) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.delete(
                self._events_url(calendar_id, event_id),
                headers={"Authorization": f"Bearer {access_token}"},
            )
        self._check(response, "delete_event")

    async def list_events(
        self,
        access_token: str,
        time_min: str,
        time_max: str,
        calendar_id: str = PRIMARY_CALENDAR,
    ) -> list[dict]:
        """Events in ``[time_min, time_max]`` in provider order."""
        items: list[dict] = []
        params: dict[str, str] = {"timeMin": time_min, "timeMax": time_max}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while True:
                response = await client.get(
                    self._events_url(calendar_id),
                    params=params,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                payload = self._check(response, "list_events")
                items.extend(payload.get("items") or [])
                page_token = payload.get("nextPageToken")
                if not page_token:
                    break
                params = {**params, "pageToken": page_token}
        logger.debug("Fetched %d calendar events between %s and %s", len(items), time_min, time_max)
        return items
