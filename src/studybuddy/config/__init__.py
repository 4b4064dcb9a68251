"""Configuration package for StudyBuddy."""

from studybuddy.config.app_config import (
    AppConfig,
    AuthConfig,
    ConfigError,
    DatabaseConfig,
    ProgressionConfig,
    clear_config_cache,
    load_app_config,
)
from studybuddy.config.logging_config import configure_logging

__all__ = [
    "AppConfig",
    "AuthConfig",
    "ConfigError",
    "DatabaseConfig",
    "ProgressionConfig",
    "clear_config_cache",
    "configure_logging",
    "load_app_config",
]
