"""
YAML loader for production configuration sets.

* ``load_yaml_file`` reads one YAML document with ``yaml.safe_load``.
* ``apply_env_overrides`` layers ``PRODUCTION_*`` environment variables over
  the parsed document.
* ``parse_config`` validates the merged document into a frozen
  ``ProductionConfig``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  effective document so a log line identifies the exact settings in use.

Failure modes:
* Missing file    -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ValueError`` naming the offending key.
"""

from __future__ import annotations

import copy
import hashlib
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from production_config.schema import (
    VALID_LOG_LEVELS,
    DatabaseConfig,
    LoggingConfig,
    ProductionConfig,
    SettlementConfig,
)

# Environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PRODUCTION_DATABASE_URL": ("database", "url"),
    "PRODUCTION_LOG_LEVEL": ("logging", "level"),
    "PRODUCTION_SETTLEMENT_MAX_ATTEMPTS": ("settlement", "max_attempts"),
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str],
) -> dict[str, Any]:
    """Return a copy of ``data`` with any set override variables applied."""
    merged = copy.deepcopy(data)
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        merged.setdefault(section, {})[key] = value
    return merged


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    return section


def _as_int(value: Any, key: str, minimum: int) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {number}")
    return number


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false", "1", "0"):
        return value.lower() in ("true", "1")
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ValueError("database.url is required")
    return DatabaseConfig(
        url=url,
        echo=_as_bool(data.get("echo", False), "database.echo"),
        pool_size=_as_int(data.get("pool_size", 5), "database.pool_size", 1),
        max_overflow=_as_int(data.get("max_overflow", 10), "database.max_overflow", 0),
        pool_timeout=_as_int(data.get("pool_timeout", 30), "database.pool_timeout", 1),
        pool_recycle=_as_int(data.get("pool_recycle", 1800), "database.pool_recycle", -1),
    )


def parse_settlement(data: dict[str, Any]) -> SettlementConfig:
    return SettlementConfig(
        max_attempts=_as_int(
            data.get("max_attempts", 3), "settlement.max_attempts", 1,
        ),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {sorted(VALID_LOG_LEVELS)}, got {level!r}"
        )
    return LoggingConfig(level=level)


def parse_config(data: dict[str, Any]) -> ProductionConfig:
    """Validate a merged configuration document."""
    return ProductionConfig(
        config_id=str(data.get("config_id", "production")),
        version=_as_int(data.get("version", 1), "version", 1),
        database=parse_database(_section(data, "database")),
        settlement=parse_settlement(_section(data, "settlement")),
        logging=parse_logging(_section(data, "logging")),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
