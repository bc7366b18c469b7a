"""
Configuration management.

Settings come from three layers, later layers winning:
1. Defaults below
2. An optional YAML file (MINDMATCH_CONFIG or an explicit path)
3. MINDMATCH_* environment variables
"""

from __future__ import annotations
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class GameConfig(BaseModel):
    """Board and scoring settings."""

    pair_count: int = Field(default=8, ge=2)
    match_reward: int = Field(default=10, gt=0)
    mismatch_delay_ms: int = Field(default=1000, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    session_idle_seconds: int = Field(default=3600, gt=0)


class Config(BaseModel):
    """Root configuration."""

    game: GameConfig = GameConfig()
    logging: LoggingConfig = LoggingConfig()
    server: ServerConfig = ServerConfig()


_ENV_OVERRIDES = {
    "MINDMATCH_PAIR_COUNT": ("game", "pair_count"),
    "MINDMATCH_MATCH_REWARD": ("game", "match_reward"),
    "MINDMATCH_MISMATCH_DELAY_MS": ("game", "mismatch_delay_ms"),
    "MINDMATCH_LOG_LEVEL": ("logging", "level"),
    "MINDMATCH_HOST": ("server", "host"),
    "MINDMATCH_PORT": ("server", "port"),
}


def _read_yaml(path: Path | str | None) -> dict:
    if path is None:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_config(path: Path | str | None = None, environ: dict | None = None) -> Config:
    """Load configuration from YAML file and environment.

    Args:
        path: Path to config file. Falls back to MINDMATCH_CONFIG; missing
            files are treated as empty.
        environ: Environment mapping (os.environ if None).

    Returns:
        Config object.

    Raises:
        pydantic.ValidationError: a value is out of range or mistyped.
    """
    environ = os.environ if environ is None else environ
    data = _read_yaml(path if path is not None else environ.get("MINDMATCH_CONFIG"))

    for var, (section, key) in _ENV_OVERRIDES.items():
        if var in environ:
            data.setdefault(section, {})[key] = environ[var]

    if "ALLOWED_ORIGINS" in environ:
        data.setdefault("server", {})["allowed_origins"] = environ["ALLOWED_ORIGINS"].split(",")

    return Config(**data)
