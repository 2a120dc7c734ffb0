"""Tests for alterevo.core.config: configuration management.

Tests cover:
- Default values for configuration fields.
- Environment variable overrides via the ALTEREVO_ prefix.
- Automatic data directory creation on initialisation.
- Pydantic validation constraints.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from alterevo.core.config import HISTORY_CAPACITY, HISTORY_STORAGE_KEY, AlterevoConfig


class TestConfigDefaults:
    """Verify that AlterevoConfig provides sensible defaults."""

    def test_history_defaults(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("ALTEREVO_HISTORY_CAPACITY", raising=False)
        monkeypatch.delenv("ALTEREVO_HISTORY_KEY", raising=False)
        cfg = AlterevoConfig(data_dir=str(temp_dir / "data"), _env_file=None)

        assert cfg.history_capacity == HISTORY_CAPACITY == 20
        assert cfg.history_key == HISTORY_STORAGE_KEY == "alterevo-history"

    def test_default_gateway(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("ALTEREVO_GATEWAY", raising=False)
        cfg = AlterevoConfig(data_dir=str(temp_dir / "data"), _env_file=None)

        assert cfg.gateway == "Gemini"
        assert cfg.styles_file is None

    def test_default_server_port(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("ALTEREVO_SERVER_PORT", raising=False)
        cfg = AlterevoConfig(data_dir=str(temp_dir / "data"), _env_file=None)

        assert cfg.server_port == 7860


class TestConfigEnvironment:
    """Verify ALTEREVO_ environment overrides."""

    def test_env_overrides(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("ALTEREVO_HISTORY_CAPACITY", "5")
        monkeypatch.setenv("ALTEREVO_GEMINI_API_KEY", "secret")
        monkeypatch.setenv("ALTEREVO_DATA_DIR", str(temp_dir / "env-data"))

        cfg = AlterevoConfig(_env_file=None)

        assert cfg.history_capacity == 5
        assert cfg.gemini_api_key == "secret"
        assert cfg.data_dir == temp_dir / "env-data"


class TestConfigDirectoryCreation:
    """Verify that AlterevoConfig creates the data directory."""

    def test_data_dir_created(self, test_config: AlterevoConfig):
        assert test_config.data_dir.is_dir()

    def test_creates_nested_directories(self, temp_dir: Path):
        deep = temp_dir / "a" / "b" / "c" / "data"
        cfg = AlterevoConfig(data_dir=str(deep), _env_file=None)

        assert cfg.data_dir.exists()


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    def test_invalid_port_too_low(self, temp_dir: Path):
        with pytest.raises(Exception):
            AlterevoConfig(server_port=80, data_dir=str(temp_dir), _env_file=None)

    @pytest.mark.parametrize("capacity", [0, -1, 101])
    def test_invalid_capacity(self, temp_dir: Path, capacity: int):
        with pytest.raises(Exception):
            AlterevoConfig(history_capacity=capacity, data_dir=str(temp_dir), _env_file=None)

    def test_invalid_log_level(self, temp_dir: Path):
        with pytest.raises(Exception):
            AlterevoConfig(log_level="LOUD", data_dir=str(temp_dir), _env_file=None)
