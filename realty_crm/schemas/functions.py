"""Payloads for the calendar function endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FunctionRequest(BaseModel):
    """``{userId, action, ...}``; action-specific keys pass through as extras."""

    model_config = ConfigDict(extra="allow")

    userId: str
    action: str | None = None
    code: str | None = None
    taskId: str | None = None
    eventId: str | None = None
    event: dict | None = None
    startDate: str | None = None
    endDate: str | None = None
