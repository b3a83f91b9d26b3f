"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from stc_inspector.config import InspectorSettings
from stc_inspector.server.config import ServerSettings

_ENV_VARS = (
    "LOG_LEVEL",
    "STC_INSPECTOR_PAGE_SIZE",
    "STC_INSPECTOR_REPLAY_PAGE_SIZE",
    "STC_INSPECTOR_DAG_MAX_DEPTH",
    "STC_INSPECTOR_RECENT_LIMIT",
    "STC_INSPECTOR_CORS_ORIGINS",
    "STC_INSPECTOR_SEED_DEMO",
    "STC_INSPECTOR_REFRESH_SECONDS",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_inspector_settings_defaults(clean_env: Path) -> None:
    """Test inspector settings defaults."""
    settings = InspectorSettings()

    assert settings.log_level == "INFO"
    assert settings.page_size == 50
    assert settings.replay_page_size == 500
    assert settings.dag_max_depth == 30
    assert settings.recent_limit == 20


def test_inspector_settings_load_from_dotenv(clean_env: Path) -> None:
    """Test inspector settings load from dotenv."""
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "STC_INSPECTOR_PAGE_SIZE=25",
                "STC_INSPECTOR_DAG_MAX_DEPTH=12",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = InspectorSettings()

    assert settings.log_level == "DEBUG"
    assert settings.page_size == 25
    assert settings.dag_max_depth == 12


def test_environment_overrides_dotenv(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test environment overrides dotenv."""
    (clean_env / ".env").write_text("STC_INSPECTOR_RECENT_LIMIT=5\n", encoding="utf-8")
    monkeypatch.setenv("STC_INSPECTOR_RECENT_LIMIT", "7")

    assert InspectorSettings().recent_limit == 7


def test_inspector_settings_reject_out_of_range(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test inspector settings reject out of range."""
    monkeypatch.setenv("STC_INSPECTOR_PAGE_SIZE", "0")
    with pytest.raises(ValidationError):
        InspectorSettings()


def test_server_settings(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test server settings."""
    monkeypatch.setenv("STC_INSPECTOR_CORS_ORIGINS", "http://a.test, ,http://b.test")
    monkeypatch.setenv("STC_INSPECTOR_SEED_DEMO", "true")

    settings = ServerSettings()

    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]
    assert settings.seed_demo is True
    assert settings.refresh_seconds == 2.0
