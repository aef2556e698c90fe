"""Configuration via environment variables, config.json, and .env files."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from speechcoach.core.constants import (
    CONFIG_FILE_PATH,
    DEFAULT_BACKEND_URL,
    DEFAULT_DB_PATH,
    DEFAULT_GEMINI_API_BASE,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GEMINI_UPLOAD_URL,
    DEFAULT_POLL_INITIAL_DELAY_SEC,
    DEFAULT_POLL_MAX_DELAY_SEC,
    DEFAULT_POLL_MAX_WAIT_SEC,
    DEFAULT_REQUEST_TIMEOUT_SEC,
    DEFAULT_STATUS_POLL_INTERVAL_SEC,
    GEMINI_KEY_PLACEHOLDER,
)

# Keys that may be persisted in config.json
FILE_KEYS = (
    "gemini_api_key",
    "gemini_model",
    "gemini_api_base",
    "gemini_upload_url",
    "backend_url",
    "request_timeout_sec",
    "poll_max_wait_sec",
    "mock_fallback",
    "mock_analysis",
)


def _load_config_file() -> dict:
    """Read ~/.config/speechcoach/config.json if it exists, return as dict."""
    if not CONFIG_FILE_PATH.exists():
        return {}
    try:
        data = json.loads(CONFIG_FILE_PATH.read_text())
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict) -> Path:
    """Write config dict to ~/.config/speechcoach/config.json. Returns the path."""
    CONFIG_FILE_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE_PATH.write_text(json.dumps(data, indent=2) + "\n")
    return CONFIG_FILE_PATH


class SpeechCoachConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini
    gemini_api_key: str = Field(default="")
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL)
    gemini_api_base: str = Field(default=DEFAULT_GEMINI_API_BASE)
    gemini_upload_url: str = Field(default=DEFAULT_GEMINI_UPLOAD_URL)

    # Secondary backend ("" disables it)
    backend_url: str = Field(default=DEFAULT_BACKEND_URL)

    # Timeouts / polling
    request_timeout_sec: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SEC, gt=0)
    poll_initial_delay_sec: float = Field(default=DEFAULT_POLL_INITIAL_DELAY_SEC, gt=0)
    poll_max_delay_sec: float = Field(default=DEFAULT_POLL_MAX_DELAY_SEC, gt=0)
    poll_max_wait_sec: float = Field(default=DEFAULT_POLL_MAX_WAIT_SEC, gt=0)
    status_poll_interval_sec: float = Field(default=DEFAULT_STATUS_POLL_INTERVAL_SEC, gt=0)

    # Fallbacks
    mock_fallback: bool = Field(default=True)
    mock_analysis: bool = Field(default=False)

    # Database
    db_path: Path = Field(default=DEFAULT_DB_PATH)

    @property
    def has_gemini_key(self) -> bool:
        key = self.gemini_api_key.strip()
        return bool(key) and key != GEMINI_KEY_PLACEHOLDER


def get_config(db_path: Path | None = None) -> SpeechCoachConfig:
    """Create config with priority: env vars > config.json > defaults."""
    file_data = _load_config_file()

    # pydantic treats __init__ kwargs as highest priority, so only pass
    # config.json values whose env var is unset.
    init_kwargs: dict = {}
    for key in FILE_KEYS:
        env_name = f"SC_{key.upper()}"
        if key in file_data and env_name not in os.environ:
            init_kwargs[key] = file_data[key]

    config = SpeechCoachConfig(**init_kwargs)

    if db_path is not None:
        config.db_path = db_path
    return config


def validate_config(config: SpeechCoachConfig) -> list[str]:
    """Return human-readable configuration problems (empty list when usable)."""
    problems: list[str] = []
    if not config.has_gemini_key:
        problems.append("Gemini API key is not configured (set SC_GEMINI_API_KEY or run `speechcoach config setup`).")
    if config.poll_max_delay_sec < config.poll_initial_delay_sec:
        problems.append("poll_max_delay_sec is smaller than poll_initial_delay_sec.")
    if not config.has_gemini_key and not config.backend_url and not config.mock_fallback:
        problems.append("No analysis path is available: no Gemini key, no backend URL, mock fallback disabled.")
    return problems
