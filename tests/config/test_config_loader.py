"""Tests for production_config: YAML loading, overrides, validation."""

from pathlib import Path

import pytest
import yaml

from production_config import get_active_config
from production_config.loader import (
    apply_env_overrides,
    compute_checksum,
    load_yaml_file,
    parse_config,
)


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultConfig:

    def test_default_set_loads(self):
        config = get_active_config(environ={})

        assert config.config_id == "production-default"
        assert config.settlement.max_attempts == 3
        assert config.logging.level == "INFO"
        assert config.database.url.startswith("sqlite")
        assert len(config.checksum) == 64

    def test_config_loaded_logged(self, captured_logs):
        config = get_active_config(environ={})
        loaded = [r for r in captured_logs() if r["message"] == "CONFIG_LOADED"]
        assert loaded[-1]["checksum"] == config.checksum


class TestEnvOverrides:

    def test_overrides_applied(self):
        config = get_active_config(environ={
            "PRODUCTION_DATABASE_URL": "postgresql://u:p@db/production",
            "PRODUCTION_LOG_LEVEL": "debug",
            "PRODUCTION_SETTLEMENT_MAX_ATTEMPTS": "7",
        })

        assert config.database.url == "postgresql://u:p@db/production"
        assert config.logging.level == "DEBUG"
        assert config.settlement.max_attempts == 7

    def test_empty_override_ignored(self):
        merged = apply_env_overrides({"database": {"url": "sqlite://"}}, {"PRODUCTION_DATABASE_URL": ""})
        assert merged["database"]["url"] == "sqlite://"

    def test_source_not_mutated(self):
        source = {"settlement": {"max_attempts": 3}}
        apply_env_overrides(source, {"PRODUCTION_SETTLEMENT_MAX_ATTEMPTS": "9"})
        assert source == {"settlement": {"max_attempts": 3}}

    def test_override_changes_checksum(self):
        base = get_active_config(environ={})
        other = get_active_config(environ={"PRODUCTION_SETTLEMENT_MAX_ATTEMPTS": "4"})
        assert base.checksum != other.checksum


class TestValidation:

    def test_missing_database_url(self, tmp_path):
        path = _write(tmp_path, {"database": {}})
        with pytest.raises(ValueError, match="database.url"):
            get_active_config(config_path=path, environ={})

    @pytest.mark.parametrize("value", [0, -1, "many", True])
    def test_invalid_max_attempts(self, value):
        with pytest.raises(ValueError, match="settlement.max_attempts"):
            parse_config({"database": {"url": "sqlite://"}, "settlement": {"max_attempts": value}})

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="logging.level"):
            parse_config({"database": {"url": "sqlite://"}, "logging": {"level": "LOUD"}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="settlement"):
            parse_config({"database": {"url": "sqlite://"}, "settlement": [1, 2]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(config_path=tmp_path / "absent.yaml", environ={})

    def test_empty_file_is_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}


class TestChecksum:

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
