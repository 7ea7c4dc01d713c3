"""
production_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or ``PRODUCTION_*`` environment variables directly.

Architecture position:
    Configuration -- sits beside ``production_kernel``.  The kernel MUST
    NEVER import from ``production_config``; scripts and the orchestration
    layer pass the values they need down.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ValueError`` -- a value fails validation.

Every successful ``get_active_config()`` call emits a ``CONFIG_LOADED`` log
entry with the config_id, version and checksum of the effective settings.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from production_config.loader import (
    apply_env_overrides,
    load_yaml_file,
    parse_config,
)
from production_config.schema import (
    DatabaseConfig,
    LoggingConfig,
    ProductionConfig,
    SettlementConfig,
)

_logger = logging.getLogger("production_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProductionConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to
            production_config/sets/default.yaml.
        environ: Environment to read overrides from.  Defaults to
            ``os.environ``.

    Returns:
        A validated, frozen ProductionConfig.  Not cached; callers hold it.
    """
    path = config_path or _DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)
    data = apply_env_overrides(data, os.environ if environ is None else environ)
    config = parse_config(data)

    _logger.info(
        "CONFIG_LOADED",
        extra={
            "trace_type": "CONFIG_LOADED",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(path),
        },
    )
    return config


__all__ = [
    "get_active_config",
    "DatabaseConfig",
    "LoggingConfig",
    "ProductionConfig",
    "SettlementConfig",
]
