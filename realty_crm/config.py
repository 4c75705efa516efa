"""Realty CRM configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class RealtySettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///realty_crm.db"
    echo_sql: bool = False
    app_title: str = "Realty CRM"
    log_level: str = "INFO"

    auth_enabled: bool = True
    auth_secret: str = "dev-secret-change-me"
    auth_cookie_name: str = "realty_session"
    auth_cookie_secure: bool = False
    auth_session_ttl_seconds: int = 86400

    # Comma-separated origins allowed by the JSON API CORS middleware.
    cors_origins: str = "http://localhost:3000"

    # Google Calendar (optional)
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_redirect_uri: str = "http://localhost:8000/auth/callback"
    google_auth_url: str = "https://accounts.google.com/o/oauth2/v2/auth"
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_calendar_api: str = "https://www.googleapis.com/calendar/v3"
    google_http_timeout_seconds: float = 30.0
    calendar_default_timezone: str = "UTC"
    calendar_sync_lookahead_days: int = 90

    # Uploaded property images and deal documents
    storage_dir: str = "data/storage"
    storage_public_base_url: str = "/files"

    model_config = {"env_prefix": "REALTY_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def storage_path(self) -> Path:
        path = Path(self.storage_dir)
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    @property
    def templates_dir(self) -> Path:
        return self.base_dir / "templates"

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = RealtySettings()
