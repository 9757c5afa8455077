"""Configuration package for liftcore."""

from liftcore.config.app_config import (
    AppConfig,
    LoggingConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "StorageConfig",
    "clear_config_cache",
    "load_app_config",
]
