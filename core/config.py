"""
Runtime settings.

Everything is read from environment variables (populated from .env by
main.py before this module is used). No config files, no CLI flags.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MEMORY_FILE = ".youtube-mcp-memory.json"
MIN_HEARTBEAT_MINUTES = 5
MAX_HEARTBEAT_MINUTES = 120


@dataclass
class Settings:
    """Process-wide settings for the insight server."""
    youtube_api_key: str
    memory_path: Path
    heartbeat_interval_minutes: int = 30
    http_timeout: float = 30.0
    log_level: str = "INFO"
    log_file: str = "data/agent.log"
    transport: str = "stdio"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _heartbeat_minutes() -> int:
    minutes = _int_env("YOUTUBE_MCP_HEARTBEAT_MINUTES", 30)
    if not MIN_HEARTBEAT_MINUTES <= minutes <= MAX_HEARTBEAT_MINUTES:
        raise ValueError(
            f"YOUTUBE_MCP_HEARTBEAT_MINUTES must be between {MIN_HEARTBEAT_MINUTES} "
            f"and {MAX_HEARTBEAT_MINUTES}, got {minutes}"
        )
    return minutes


def default_memory_path() -> Path:
    """State file location: YOUTUBE_MCP_MEMORY_PATH or ./.youtube-mcp-memory.json."""
    override = os.environ.get("YOUTUBE_MCP_MEMORY_PATH", "").strip()
    if override:
        return Path(override)
    return Path.cwd() / DEFAULT_MEMORY_FILE


def load_settings() -> Settings:
    """Load settings from the environment with defaults."""
    return Settings(
        youtube_api_key=os.environ.get("YOUTUBE_API_KEY", ""),
        memory_path=default_memory_path(),
        heartbeat_interval_minutes=_heartbeat_minutes(),
        http_timeout=_float_env("YOUTUBE_MCP_HTTP_TIMEOUT", 30.0),
        log_level=os.environ.get("YOUTUBE_MCP_LOG_LEVEL", "INFO").upper(),
        log_file=os.environ.get("YOUTUBE_MCP_LOG_FILE", "data/agent.log"),
        transport=os.environ.get("YOUTUBE_MCP_TRANSPORT", "stdio"),
    )
