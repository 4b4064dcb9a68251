"""Tests for application config loading (F1)."""

import pytest

from studybuddy.config.app_config import (
    CONFIG_ENV,
    AppConfig,
    ConfigError,
    clear_config_cache,
    load_app_config,
)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the loader at a temp config file (not created yet)."""
    path = tmp_path / "config" / "app_config_v1.yaml"
    path.parent.mkdir(parents=True)
    monkeypatch.setenv(CONFIG_ENV, str(path))
    clear_config_cache()
    return path


class TestDefaults:
    """Config without a file."""

    def test_missing_file_uses_defaults(self, config_file):
        """All rules fall back to built-in defaults."""
        config = load_app_config()

        assert isinstance(config, AppConfig)
        assert config.progression.pass_mark == 60
        assert config.progression.max_attempts == 2
        assert config.progression.free_chapters == 2
        assert config.progression.unlock_scan == "continue"
        assert config.database.path == "db/studybuddy.db"
        assert config.auth.cookie_name == "token"
        assert config.auth.algorithm == "HS256"
        assert config.log_level == "INFO"

    def test_empty_file_uses_defaults(self, config_file):
        """An empty YAML file is treated like no overrides."""
        config_file.write_text("", encoding="utf-8")

        config = load_app_config()

        assert config.progression.pass_mark == 60


class TestOverrides:
    """Config values read from YAML."""

    def test_progression_overrides(self, config_file):
        """Values in the file replace defaults."""
        config_file.write_text(
            "progression:\n"
            "  pass_mark: 70\n"
            "  max_attempts: 3\n"
            "  free_chapters: 1\n"
            "  unlock_scan: break\n",
            encoding="utf-8",
        )

        rules = load_app_config().progression

        assert rules.pass_mark == 70
        assert rules.max_attempts == 3
        assert rules.free_chapters == 1
        assert rules.unlock_scan == "break"

    def test_partial_section_keeps_other_defaults(self, config_file):
        """Keys missing from a section keep their defaults."""
        config_file.write_text("progression:\n  pass_mark: 50\n", encoding="utf-8")

        config = load_app_config()

        assert config.progression.pass_mark == 50
        assert config.progression.max_attempts == 2
        assert config.database.path == "db/studybuddy.db"

    def test_quoted_numbers_coerced(self, config_file):
        """Numbers written as YAML strings are read as numbers."""
        config_file.write_text(
            'progression:\n  pass_mark: "75"\n  max_attempts: "3"\n', encoding="utf-8"
        )

        rules = load_app_config().progression

        assert rules.pass_mark == 75.0
        assert rules.max_attempts == 3

    def test_log_level_is_uppercased(self, config_file):
        config_file.write_text("logging:\n  level: debug\n", encoding="utf-8")

        assert load_app_config().log_level == "DEBUG"

    @pytest.mark.parametrize(
        "yaml_text",
        [
            "progression:\n  pass_mark: 120\n",
            "progression:\n  pass_mark: -1\n",
            "progression:\n  max_attempts: 0\n",
            "progression:\n  free_chapters: 0\n",
            "progression:\n  unlock_scan: sideways\n",
            "progression:\n  pass_mark: sixty\n",
            "progression:\n  max_attempts: [2]\n",
            "progression:\n  free_chapters: null\n",
        ],
    )
    def test_invalid_values_rejected(self, config_file, yaml_text):
        """Rules the engine cannot honor raise ConfigError."""
        config_file.write_text(yaml_text, encoding="utf-8")

        with pytest.raises(ConfigError):
            load_app_config()


class TestCache:
    """Module-level config cache."""

    def test_cached_between_calls(self, config_file):
        assert load_app_config() is load_app_config()

    def test_force_reload_reads_file_again(self, config_file):
        """force_reload picks up a modified file."""
        config_file.write_text("progression:\n  pass_mark: 60\n", encoding="utf-8")
        assert load_app_config().progression.pass_mark == 60

        config_file.write_text("progression:\n  pass_mark: 80\n", encoding="utf-8")
        assert load_app_config().progression.pass_mark == 60
        assert load_app_config(force_reload=True).progression.pass_mark == 80


class TestAuthSecret:
    """Signing secret comes from the environment."""

    def test_secret_read_from_env(self, config_file, monkeypatch):
        monkeypatch.setenv("STUDYBUDDY_JWT_SECRET", "s3cret")

        assert load_app_config().auth.get_secret() == "s3cret"

    def test_secret_missing(self, config_file, monkeypatch):
        monkeypatch.delenv("STUDYBUDDY_JWT_SECRET", raising=False)

        assert load_app_config().auth.get_secret() is None
