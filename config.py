"""
Centralised settings loader.

Values come from the environment (or a local `.env`); unknown variables are
ignored so the profile service can share an env file with the rest of the
backend.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ────────────────────────────────────────────────
    env_name: str = "local"
    database_url: str | None = None
    cloud_sql_instance: str | None = Field(
        None, validation_alias="CLOUD_SQL_CONNECTION_NAME"
    )
    db_user: str | None = None
    db_pass: str | None = None
    db_name: str | None = None

    # ─── profile page ────────────────────────────────────────────────
    placeholder_image: str = "/placeholder.png"
    max_open_sessions: int = 1000

    # ─── service shell ───────────────────────────────────────────────
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
