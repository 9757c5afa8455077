"""Application configuration loader.

Loads configuration from data/config/liftcore.yaml (or the file named by
LIFTCORE_CONFIG), falling back to built-in defaults when no file exists.

Usage:
    from liftcore.config.app_config import load_app_config

    config = load_app_config()
    repo = ExerciseRepository.open(config.storage.db_path, pool_size=config.storage.pool_size)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to working directory)
CONFIG_FILE = Path("data/config/liftcore.yaml")

CONFIG_ENV = "LIFTCORE_CONFIG"
DB_PATH_ENV = "LIFTCORE_DB_PATH"


@dataclass
class StorageConfig:
    """Configuration for the exercise store."""

    db_path: str = "exercises.db"
    pool_size: int = 8
    acquire_timeout: float = 30.0
    busy_timeout: float = 5.0


@dataclass
class LoggingConfig:
    """Configuration for process-wide logging."""

    level: str = "INFO"
    json: bool = False


@dataclass
class AppConfig:
    """Application-wide configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object.

    Raises:
        ValueError: If a value is out of range
    """
    defaults = StorageConfig()
    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        db_path=str(storage_data.get("db_path", defaults.db_path)),
        pool_size=int(storage_data.get("pool_size", defaults.pool_size)),
        acquire_timeout=float(storage_data.get("acquire_timeout", defaults.acquire_timeout)),
        busy_timeout=float(storage_data.get("busy_timeout", defaults.busy_timeout)),
    )

    if storage.pool_size < 1:
        raise ValueError(f"storage.pool_size must be at least 1, got {storage.pool_size}")
    if storage.acquire_timeout < 0:
        raise ValueError(f"storage.acquire_timeout must be >= 0, got {storage.acquire_timeout}")
    if storage.busy_timeout < 0:
        raise ValueError(f"storage.busy_timeout must be >= 0, got {storage.busy_timeout}")

    logging_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")).upper(),
        json=bool(logging_data.get("json", False)),
    )

    return AppConfig(storage=storage, logging=logging_config)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    config_file = Path(os.environ.get(CONFIG_ENV) or CONFIG_FILE)

    data: dict[str, Any]
    if config_file.exists():
        logger.debug("loading_app_config", source=str(config_file))
        data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    else:
        logger.debug("using_default_config")
        data = {}

    config = _parse_config(data)

    db_path = os.environ.get(DB_PATH_ENV)
    if db_path:
        logger.debug("db_path_from_env", db_path=db_path)
        config.storage.db_path = db_path

    _cached_config = config
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
