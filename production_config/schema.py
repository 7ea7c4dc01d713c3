"""
Production configuration schema.

Frozen dataclasses parsed from a YAML configuration set by the loader.
Every instance has already passed validation; holders never re-check.
"""

from __future__ import annotations

from dataclasses import dataclass, field

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings passed to ``init_engine_from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class SettlementConfig:
    """Retry policy for settlements that hit an optimistic-lock conflict."""

    max_attempts: int = 3


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class ProductionConfig:
    """The effective runtime configuration."""

    config_id: str
    version: int
    database: DatabaseConfig
    settlement: SettlementConfig = field(default_factory=SettlementConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""
