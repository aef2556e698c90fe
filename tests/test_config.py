"""Tests for config loading: env vars > config.json > defaults."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from speechcoach.core.config import _load_config_file, get_config, save_config, validate_config
from speechcoach.core.constants import DEFAULT_GEMINI_MODEL, GEMINI_KEY_PLACEHOLDER


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("SC_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# save / load round-trip
# ---------------------------------------------------------------------------

def test_save_and_load_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake_config = tmp_path / "config.json"
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", fake_config)

    result = save_config({"gemini_api_key": "test-key-123", "mock_fallback": False})
    assert result == fake_config

    loaded = json.loads(fake_config.read_text())
    assert loaded["gemini_api_key"] == "test-key-123"
    assert loaded["mock_fallback"] is False


def test_load_config_file_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "nope.json")
    assert _load_config_file() == {}


def test_load_config_file_invalid_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    bad = tmp_path / "config.json"
    bad.write_text("not json {{{")
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", bad)
    assert _load_config_file() == {}


# ---------------------------------------------------------------------------
# Priority: env vars > config.json > defaults
# ---------------------------------------------------------------------------

def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "nope.json")

    config = get_config()
    assert config.gemini_api_key == ""
    assert config.gemini_model == DEFAULT_GEMINI_MODEL
    assert config.poll_initial_delay_sec == 2.0
    assert config.poll_max_delay_sec == 10.0
    assert config.poll_max_wait_sec == 180.0
    assert config.status_poll_interval_sec == 2.0
    assert config.mock_fallback is True
    assert config.has_gemini_key is False


def test_config_file_overrides_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({
        "gemini_api_key": "abc",
        "gemini_model": "gemini-2.5-pro",
        "backend_url": "",
    }))
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", cfg_file)

    config = get_config()
    assert config.gemini_model == "gemini-2.5-pro"
    assert config.backend_url == ""
    assert config.has_gemini_key is True


def test_env_var_overrides_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({"gemini_api_key": "abc", "gemini_model": "gemini-2.5-pro"}))
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", cfg_file)
    monkeypatch.setenv("SC_GEMINI_MODEL", "my-custom-model")

    config = get_config()
    assert config.gemini_model == "my-custom-model"
    assert config.gemini_api_key == "abc"


def test_db_path_override() -> None:
    custom = Path("/tmp/test.db")
    config = get_config(db_path=custom)
    assert config.db_path == custom


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_placeholder_key_is_not_a_key(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "nope.json")
    monkeypatch.setenv("SC_GEMINI_API_KEY", GEMINI_KEY_PLACEHOLDER)
    config = get_config()
    assert config.has_gemini_key is False
    assert any("Gemini API key" in p for p in validate_config(config))


def test_no_analysis_path_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "nope.json")
    monkeypatch.setenv("SC_BACKEND_URL", "")
    monkeypatch.setenv("SC_MOCK_FALLBACK", "false")
    problems = validate_config(get_config())
    assert any("No analysis path" in p for p in problems)


def test_valid_config_has_no_problems(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "nope.json")
    monkeypatch.setenv("SC_GEMINI_API_KEY", "real-key")
    assert validate_config(get_config()) == []
