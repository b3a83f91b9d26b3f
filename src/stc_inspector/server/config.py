"""Configuration for the dashboard API.

The API can start and serve empty views even when the engine's stores are
unreachable; nothing here is required.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the JSON API consumed by the dashboard UI."""

    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="STC_INSPECTOR_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    seed_demo: bool = Field(
        default=False,
        validation_alias="STC_INSPECTOR_SEED_DEMO",
        description=(
            "If true and no backends are supplied, the app starts on in-memory stores "
            "populated with demo workflows."
        ),
    )

    refresh_seconds: float = Field(
        default=2.0,
        gt=0,
        le=300,
        validation_alias="STC_INSPECTOR_REFRESH_SECONDS",
        description=(
            "Polling interval advertised to clients. Every refresh recomputes views from "
            "the stores, so this is also the staleness window."
        ),
    )

    max_pager_sessions: int = Field(
        default=256,
        ge=1,
        validation_alias="STC_INSPECTOR_MAX_PAGER_SESSIONS",
        description="Least recently used pager sessions are evicted beyond this count.",
    )

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
