"""Unit tests for configuration management."""

import tempfile
from pathlib import Path

import pytest

from osmtrace.core.config import Config, find_config_file
from osmtrace.core.constants import APIDefaults, ResolutionMode
from osmtrace.core.error_handling import ConfigurationError


@pytest.fixture
def isolated_config_dirs(tmp_path, monkeypatch):
    """Point the config search at empty temporary directories."""
    work_dir = tmp_path / "work"
    home_dir = tmp_path / "home"
    work_dir.mkdir()
    home_dir.mkdir()
    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("HOME", str(home_dir))
    return work_dir, home_dir


class TestConfig:
    """Test cases for Config class."""

    def create_temp_config(self, content: str) -> Path:
        """Create a temporary config file with given content."""
        temp_file = tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False)
        temp_file.write(content)
        temp_file.close()
        return Path(temp_file.name)

    def test_defaults(self, isolated_config_dirs):
        """Test built-in defaults when no file is found."""
        config = Config()
        assert config.path is None
        assert config.api["base_url"] == APIDefaults.BASE_URL
        assert config.api["timeout"] == APIDefaults.TIMEOUT_SECONDS
        assert config.api["user_agent"].startswith("osmtrace/")
        assert config.resolution_mode is ResolutionMode.STRICT
        assert config.logging == {"level": "INFO", "file": ""}
        config.validate()

    def test_partial_file_merged_over_defaults(self):
        """Test that a file only needs the keys it changes."""
        config_path = self.create_temp_config(
            """
[resolution]
mode = "skip"

[api]
timeout = 5
"""
        )
        try:
            config = Config(config_path)
            assert config.path == config_path
            assert config.resolution_mode is ResolutionMode.SKIP
            assert config.get("api", "timeout") == 5
            assert config.get("api", "base_url") == APIDefaults.BASE_URL
            config.validate()
        finally:
            config_path.unlink()

    def test_missing_explicit_file(self, tmp_path):
        """Test that an explicit path must exist."""
        with pytest.raises(ConfigurationError, match="not found"):
            Config(tmp_path / "nope.toml")

    def test_invalid_toml(self):
        """Test that unparsable TOML raises ConfigurationError."""
        config_path = self.create_temp_config("[section\ninvalid toml content\n")
        try:
            with pytest.raises(ConfigurationError, match="Failed to load config"):
                Config(config_path)
        finally:
            config_path.unlink()

    def test_search_current_directory(self, isolated_config_dirs):
        """Test that the working directory is searched first."""
        work_dir, home_dir = isolated_config_dirs
        user_dir = home_dir / ".config" / "osmtrace"
        user_dir.mkdir(parents=True)
        (user_dir / "osmtrace_config.toml").write_text(
            '[logging]\nlevel = "DEBUG"\n'
        )
        (work_dir / "osmtrace_config.toml").write_text(
            '[logging]\nlevel = "WARNING"\n'
        )

        config = Config()
        assert config.path == work_dir / "osmtrace_config.toml"
        assert config.get("logging", "level") == "WARNING"

    def test_search_user_directory(self, isolated_config_dirs):
        """Test that the user config directory is searched."""
        _, home_dir = isolated_config_dirs
        user_dir = home_dir / ".config" / "osmtrace"
        user_dir.mkdir(parents=True)
        (user_dir / "osmtrace_config.toml").write_text('[resolution]\nmode = "skip"\n')

        assert find_config_file() == user_dir / "osmtrace_config.toml"
        assert Config().resolution_mode is ResolutionMode.SKIP

    def test_get_missing_key(self):
        """Test lookups of unknown keys."""
        config = Config.from_dict({})
        assert config.get("api", "proxy", "none") == "none"
        with pytest.raises(ConfigurationError):
            config.get("api", "proxy")
        with pytest.raises(ConfigurationError):
            config.get_section("printer")

    def test_from_dict(self):
        """Test in-memory overrides."""
        config = Config.from_dict({"api": {"base_url": "http://localhost:3000/api"}})
        assert config.api["base_url"] == "http://localhost:3000/api"
        assert config.api["timeout"] == APIDefaults.TIMEOUT_SECONDS
        assert config.path is None

    def test_from_dict_does_not_share_defaults(self):
        """Test that overrides do not leak into other configs."""
        Config.from_dict({"resolution": {"mode": "skip"}})
        assert Config.from_dict({}).resolution_mode is ResolutionMode.STRICT

    def test_invalid_resolution_mode(self):
        """Test that an unknown mode is rejected."""
        config = Config.from_dict({"resolution": {"mode": "lenient"}})
        with pytest.raises(ConfigurationError, match="resolution.mode"):
            config.validate()
        with pytest.raises(ConfigurationError):
            config.resolution_mode

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"api": {"timeout": 0}}, "api.timeout"),
            ({"api": {"timeout": "fast"}}, "api.timeout"),
            ({"api": {"base_url": ""}}, "api.base_url"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"resolution": "strict"}, "resolution"),
        ],
    )
    def test_validation_errors(self, overrides, message):
        """Test validation of individual settings."""
        with pytest.raises(ConfigurationError, match=message):
            Config.from_dict(overrides).validate()

    def test_lowercase_log_level_valid(self):
        """Test that log levels are case-insensitive."""
        Config.from_dict({"logging": {"level": "debug"}}).validate()
