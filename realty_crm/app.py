"""FastAPI application factory for Realty CRM."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .auth.middleware import AuthMiddleware
from .config import settings
from .errors import CRMError, NotFoundError, ValidationError
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import async_session_factory, engine
        from .models import Base
        from .services import appointment_type_svc, property_type_svc

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with async_session_factory() as db:
            await appointment_type_svc.ensure_default_appointment_types(db)
            await property_type_svc.ensure_default_property_types(db)
    logger.info("Realty CRM started (%s)", settings.environment)
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)

app.add_middleware(AuthMiddleware, settings_obj=settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

settings.storage_path.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.storage_public_base_url,
    StaticFiles(directory=str(settings.storage_path), check_dir=False),
    name="files",
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse({"detail": exc.message}, status_code=404)


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse({"detail": exc.message}, status_code=422)


@app.exception_handler(CRMError)
async def crm_error_handler(request: Request, exc: CRMError):
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=400)


# Import and register routers
from .routers import (  # noqa: E402
    health, auth, dashboard, contacts, deals, tasks, appointments, properties,
    communications, calendar, functions,
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(contacts.router)
app.include_router(deals.router)
app.include_router(tasks.router)
app.include_router(appointments.router)
app.include_router(properties.router)
app.include_router(communications.router)
app.include_router(calendar.router)
app.include_router(functions.router)
