"""Configuration for the inspector core.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

None of these settings are required; the defaults match the dashboard's
historical behaviour.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InspectorSettings(BaseSettings):
    """Tuning knobs for the inspector.

    Environment variables:
    - LOG_LEVEL                       (optional)
    - STC_INSPECTOR_PAGE_SIZE         (optional)
    - STC_INSPECTOR_REPLAY_PAGE_SIZE  (optional)
    - STC_INSPECTOR_DAG_MAX_DEPTH     (optional)
    - STC_INSPECTOR_RECENT_LIMIT      (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `InspectorSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    page_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        validation_alias="STC_INSPECTOR_PAGE_SIZE",
        description="Events per page in the paginated event log view",
    )

    replay_page_size: int = Field(
        default=500,
        ge=1,
        le=10_000,
        validation_alias="STC_INSPECTOR_REPLAY_PAGE_SIZE",
        description="Batch size used when replaying the whole log for aggregates",
    )

    dag_max_depth: int = Field(
        default=30,
        ge=1,
        le=200,
        validation_alias="STC_INSPECTOR_DAG_MAX_DEPTH",
        description=(
            "Depth budget for program structure walks. Deeper (or self-referential) "
            "structures render as an 'unknown' node."
        ),
    )

    recent_limit: int = Field(
        default=20,
        ge=0,
        le=1000,
        validation_alias="STC_INSPECTOR_RECENT_LIMIT",
        description="Number of trailing events shown on the overview",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
