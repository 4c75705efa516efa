"""Realty CRM CLI - database setup and calendar maintenance."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import settings
from .logging_setup import setup_logging

app = typer.Typer(
    name="realty-crm",
    help="Realty CRM - database setup, seed data and Google Calendar sync",
    no_args_is_help=True,
)
console = Console()

db_app = typer.Typer(help="Database commands")
calendar_app = typer.Typer(help="Google Calendar commands")

app.add_typer(db_app, name="db")
app.add_typer(calendar_app, name="calendar")


# ============================================================================
# Environment
# ============================================================================


@app.command("check-env")
def check_env():
    """Show which settings are configured."""
    table = Table(title="Realty CRM Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Database", settings.database_url.split("@")[-1])
    table.add_row("Auth", "enabled" if settings.auth_enabled else "[yellow]disabled[/yellow]")
    table.add_row(
        "Auth secret",
        "[red]default (change me)[/red]" if settings.auth_secret == "dev-secret-change-me" else "Set",
    )
    table.add_row("Google client", "Set" if settings.google_configured else "[red]Not set[/red]")
    table.add_row("Redirect URI", settings.google_redirect_uri)
    table.add_row("Storage", str(settings.storage_path))
    table.add_row("Calendar lookahead", f"{settings.calendar_sync_lookahead_days} days")

    console.print(table)


@app.command("check-connection")
def check_connection():
    """Run a trivial query against the configured database."""
    from sqlalchemy import text

    from .database import engine

    async def _ping():
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await engine.dispose()

    try:
        asyncio.run(_ping())
    except Exception as exc:
        console.print(f"[red]Database unreachable:[/red] {exc}")
        raise typer.Exit(1)
    console.print("[green]Database connection OK[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port", "-p"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the web app with uvicorn."""
    import uvicorn

    uvicorn.run("realty_crm.app:app", host=host, port=port, reload=reload)


# ============================================================================
# Database Commands
# ============================================================================


@db_app.command("init")
def db_init():
    """Create all tables (SQLite/dev; use Alembic for PostgreSQL)."""
    from .database import engine
    from .models import Base

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(_create())
    console.print(f"[green]Tables created[/green] ({len(Base.metadata.tables)} tables)")


@db_app.command("seed-types")
def db_seed_types():
    """Insert the default appointment and property types."""
    from .database import async_session_factory, engine
    from .services import appointment_type_svc, property_type_svc

    async def _seed():
        async with async_session_factory() as db:
            appointment_types = await appointment_type_svc.ensure_default_appointment_types(db)
            property_types = await property_type_svc.ensure_default_property_types(db)
        await engine.dispose()
        return appointment_types, property_types

    appointment_types, property_types = asyncio.run(_seed())
    console.print(
        Panel(
            f"Appointment types added: [bold]{appointment_types}[/bold]\n"
            f"Property types added: [bold]{property_types}[/bold]",
            title="Seed Types",
        )
    )


# ============================================================================
# Calendar Commands
# ============================================================================


def _user_or_exit(user):
    if user is None:
        console.print("[red]No user with that email[/red]")
        raise typer.Exit(1)
    return user


@calendar_app.command("status")
def calendar_status(email: str = typer.Option(..., "--email", "-e", help="Agent email")):
    """Show Google Calendar connection state for an agent."""
    from .database import async_session_factory, engine
    from .services import profile_svc
    from .services.google_calendar_svc import GoogleCalendarService

    async def _status():
        async with async_session_factory() as db:
            user = await profile_svc.get_user_by_email(db, email)
            if user is None:
                return None, False, None
            service = GoogleCalendarService(db)
            return user, await service.is_connected(user.id), await service.get_sync_status(user.id)

    try:
        user, connected, status = asyncio.run(_status())
    finally:
        asyncio.run(engine.dispose())
    _user_or_exit(user)

    table = Table(title=f"Google Calendar - {user.email}")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")
    table.add_row("Connected", "Yes" if connected else "[red]No[/red]")
    table.add_row("Last sync", (status or {}).get("lastSync") or "-")
    console.print(table)


@calendar_app.command("sync")
def calendar_sync(
    email: str = typer.Option(..., "--email", "-e", help="Agent email"),
    days: int = typer.Option(90, "--days", "-d", help="Days ahead to import"),
):
    """Import upcoming Google Calendar events as tasks."""
    from .database import async_session_factory, engine
    from .errors import CRMError
    from .models.base import utcnow
    from .services import profile_svc
    from .services.google_calendar_svc import GoogleCalendarService

    setup_logging(settings.log_level)

    async def _sync():
        async with async_session_factory() as db:
            user = await profile_svc.get_user_by_email(db, email)
            if user is None:
                return None
            start = utcnow()
            tasks = await GoogleCalendarService(db).sync_from_google_calendar(
                user.id, start, start + timedelta(days=days)
            )
            return [(t.title, t.due_date) for t in tasks]

    try:
        imported = asyncio.run(_sync())
    except CRMError as exc:
        console.print(f"[red]Sync failed:[/red] {exc.message}")
        raise typer.Exit(1)
    finally:
        asyncio.run(engine.dispose())
    _user_or_exit(imported)

    table = Table(title=f"Imported {len(imported)} events")
    table.add_column("Title", style="cyan")
    table.add_column("Due", style="green")
    for title, due in imported:
        table.add_row(title, due.strftime("%Y-%m-%d %H:%M") if due else "-")
    console.print(table)


# ============================================================================
# Main
# ============================================================================


@app.command()
def version():
    """Show version information."""
    from importlib.metadata import version as dist_version

    console.print(f"Realty CRM v{dist_version('realty-crm')}")


if __name__ == "__main__":
    app()
