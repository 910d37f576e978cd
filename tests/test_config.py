from __future__ import annotations

from pathlib import Path

import pytest

from core.config import DEFAULT_MEMORY_FILE, load_settings

ENV_VARS = (
    "YOUTUBE_API_KEY",
    "YOUTUBE_MCP_MEMORY_PATH",
    "YOUTUBE_MCP_HEARTBEAT_MINUTES",
    "YOUTUBE_MCP_HTTP_TIMEOUT",
    "YOUTUBE_MCP_LOG_LEVEL",
    "YOUTUBE_MCP_LOG_FILE",
    "YOUTUBE_MCP_TRANSPORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.youtube_api_key == ""
    assert settings.memory_path == tmp_path / DEFAULT_MEMORY_FILE
    assert settings.heartbeat_interval_minutes == 30
    assert settings.http_timeout == 30.0
    assert settings.log_level == "INFO"
    assert settings.log_file == "data/agent.log"
    assert settings.transport == "stdio"


def test_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YOUTUBE_API_KEY", "abc")
    monkeypatch.setenv("YOUTUBE_MCP_MEMORY_PATH", str(tmp_path / "state.json"))
    monkeypatch.setenv("YOUTUBE_MCP_HEARTBEAT_MINUTES", "15")
    monkeypatch.setenv("YOUTUBE_MCP_HTTP_TIMEOUT", "7.5")
    monkeypatch.setenv("YOUTUBE_MCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("YOUTUBE_MCP_LOG_FILE", "")
    monkeypatch.setenv("YOUTUBE_MCP_TRANSPORT", "http")

    settings = load_settings()

    assert settings.youtube_api_key == "abc"
    assert settings.memory_path == tmp_path / "state.json"
    assert settings.heartbeat_interval_minutes == 15
    assert settings.http_timeout == 7.5
    assert settings.log_level == "DEBUG"
    assert settings.log_file == ""
    assert settings.transport == "http"


def test_bad_number_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YOUTUBE_MCP_HEARTBEAT_MINUTES", "half an hour")
    with pytest.raises(ValueError, match="YOUTUBE_MCP_HEARTBEAT_MINUTES"):
        load_settings()


@pytest.mark.parametrize("minutes", ["0", "1", "4", "121"])
def test_heartbeat_minutes_out_of_range_is_rejected(monkeypatch: pytest.MonkeyPatch, minutes: str) -> None:
    monkeypatch.setenv("YOUTUBE_MCP_HEARTBEAT_MINUTES", minutes)
    with pytest.raises(ValueError, match="between 5 and 120"):
        load_settings()


@pytest.mark.parametrize("minutes", ["5", "120"])
def test_heartbeat_minutes_bounds_are_inclusive(monkeypatch: pytest.MonkeyPatch, minutes: str) -> None:
    monkeypatch.setenv("YOUTUBE_MCP_HEARTBEAT_MINUTES", minutes)
    assert load_settings().heartbeat_interval_minutes == int(minutes)
