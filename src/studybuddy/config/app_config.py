"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
(or the file named by STUDYBUDDY_CONFIG) with built-in defaults.

Usage:
    from studybuddy.config.app_config import load_app_config

    config = load_app_config()
    config.progression.pass_mark  # 60
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")
CONFIG_ENV = "STUDYBUDDY_CONFIG"

UNLOCK_SCAN_POLICIES = ("continue", "break")


class ConfigError(Exception):
    """Invalid configuration value."""

    pass


@dataclass
class ProgressionConfig:
    """Rules of the quiz/chapter progression engine."""

    pass_mark: float = 60
    max_attempts: int = 2
    free_chapters: int = 2
    unlock_scan: str = "continue"


@dataclass
class DatabaseConfig:
    """SQLite database location."""

    path: str = "db/studybuddy.db"


@dataclass
class AuthConfig:
    """Settings for verifying identity tokens issued elsewhere."""

    secret_env: str = "STUDYBUDDY_JWT_SECRET"
    algorithm: str = "HS256"
    cookie_name: str = "token"

    def get_secret(self) -> str | None:
        """Get signing secret from environment variable."""
        return os.environ.get(self.secret_env)


@dataclass
class AppConfig:
    """Application-wide configuration."""

    progression: ProgressionConfig = field(default_factory=ProgressionConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    log_level: str = "INFO"


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "progression": {
            "pass_mark": 60,
            "max_attempts": 2,
            "free_chapters": 2,
            "unlock_scan": "continue",
        },
        "database": {
            "path": "db/studybuddy.db",
        },
        "auth": {
            "secret_env": "STUDYBUDDY_JWT_SECRET",
            "algorithm": "HS256",
            "cookie_name": "token",
        },
        "logging": {
            "level": "INFO",
        },
    }


def _validate_progression(progression: ProgressionConfig) -> None:
    """Reject progression settings the engine cannot honor."""
    if not 0 <= progression.pass_mark <= 100:
        raise ConfigError(
            f"progression.pass_mark must be between 0 and 100, got {progression.pass_mark}"
        )
    if progression.max_attempts < 1:
        raise ConfigError(
            f"progression.max_attempts must be at least 1, got {progression.max_attempts}"
        )
    if progression.free_chapters < 1:
        raise ConfigError(
            f"progression.free_chapters must be at least 1, got {progression.free_chapters}"
        )
    if progression.unlock_scan not in UNLOCK_SCAN_POLICIES:
        raise ConfigError(
            f"progression.unlock_scan must be one of {UNLOCK_SCAN_POLICIES}, "
            f"got '{progression.unlock_scan}'"
        )


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    prog_data = {**defaults["progression"], **(data.get("progression") or {})}
    try:
        progression = ProgressionConfig(
            pass_mark=float(prog_data["pass_mark"]),
            max_attempts=int(prog_data["max_attempts"]),
            free_chapters=int(prog_data["free_chapters"]),
            unlock_scan=str(prog_data["unlock_scan"]),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"progression settings must be numbers: {e}") from e
    _validate_progression(progression)

    db_data = {**defaults["database"], **(data.get("database") or {})}
    database = DatabaseConfig(path=str(db_data["path"]))

    auth_data = {**defaults["auth"], **(data.get("auth") or {})}
    auth = AuthConfig(
        secret_env=auth_data["secret_env"],
        algorithm=auth_data["algorithm"],
        cookie_name=auth_data["cookie_name"],
    )

    log_data = {**defaults["logging"], **(data.get("logging") or {})}

    return AppConfig(
        progression=progression,
        database=database,
        auth=auth,
        log_level=str(log_data["level"]).upper(),
    )


def _config_path() -> Path:
    """Config file location, honoring the environment override."""
    override = os.environ.get(CONFIG_ENV)
    return Path(override) if override else CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file holds values the engine cannot honor.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]
    config_path = _config_path()

    if config_path.exists():
        logger.debug("loading_app_config", source=str(config_path))
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
