"""Configuration management for OsmTrace.

Configuration lives in ``osmtrace_config.toml``. Search order (first hit wins):

1. An explicit path passed to :class:`Config`
2. Current directory
3. ~/.config/osmtrace/
4. /etc/osmtrace/

Values from the file are merged over the built-in defaults, so a config file
only needs the keys it changes.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from .. import __version__
from .constants import (
    LOG_LEVELS,
    APIDefaults,
    ConfigFiles,
    ResolutionMode,
    get_resolution_mode,
    get_valid_resolution_modes,
)
from .error_handling import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "api": {
        "base_url": APIDefaults.BASE_URL,
        "timeout": APIDefaults.TIMEOUT_SECONDS,
        "user_agent": f"osmtrace/{__version__}",
    },
    "resolution": {
        "mode": ResolutionMode.STRICT.value,
    },
    "logging": {
        "level": "INFO",
        "file": "",
    },
}


def _merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override config into base config."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value


def search_locations() -> List[Path]:
    """Directories searched for the main config file, in priority order."""
    return [
        Path.cwd(),
        Path.home() / ConfigFiles.USER_CONFIG_DIR,
        Path(ConfigFiles.SYSTEM_CONFIG_DIR),
    ]


def find_config_file(filename: str = ConfigFiles.MAIN_CONFIG) -> Optional[Path]:
    """Find configuration file using the standard search order."""
    for location in search_locations():
        config_path = location / filename
        if config_path.exists() and config_path.is_file():
            return config_path
    return None


class Config:
    """Configuration manager for OsmTrace."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        """Load configuration.

        Args:
            config_path: Explicit TOML file. If None, the search order is used
                and built-in defaults apply when no file is found.

        Raises:
            ConfigurationError: If the file is missing or not valid TOML
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self.path: Optional[Path] = None

        if config_path is not None:
            path = Path(config_path)
            if not path.is_file():
                raise ConfigurationError(f"Configuration file '{path}' not found")
        else:
            path = find_config_file()

        if path is None:
            logger.debug(
                f"Using default configuration (no {ConfigFiles.MAIN_CONFIG} found)"
            )
            return

        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = toml.load(f)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigurationError(
                f"Failed to load config from {path}: {e}", {"path": str(path)}
            ) from e

        _merge_config(self._config, loaded)
        self.path = path
        logger.info(f"Configuration loaded from {path}")

    @classmethod
    def from_dict(cls, overrides: Dict[str, Any]) -> "Config":
        """Build a configuration from defaults plus in-memory overrides."""
        config = cls.__new__(cls)
        config._config = copy.deepcopy(DEFAULT_CONFIG)
        config.path = None
        _merge_config(config._config, overrides)
        return config

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        try:
            return self._config[section][key]
        except KeyError:
            if default is not None:
                return default
            raise ConfigurationError(f"Configuration key '{section}.{key}' not found")

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section."""
        try:
            return self._config[section]
        except KeyError:
            raise ConfigurationError(f"Configuration section '{section}' not found")

    @property
    def api(self) -> Dict[str, Any]:
        """Get API fetcher configuration."""
        return self.get_section("api")

    @property
    def resolution(self) -> Dict[str, Any]:
        """Get resolution configuration."""
        return self.get_section("resolution")

    @property
    def logging(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get_section("logging")

    @property
    def resolution_mode(self) -> ResolutionMode:
        """Get the configured resolution mode as an enum."""
        try:
            return get_resolution_mode(self.get("resolution", "mode"))
        except (ValueError, AttributeError) as e:
            raise ConfigurationError(str(e)) from e

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def validate(self) -> None:
        """Validate configuration completeness and correctness."""
        for section in DEFAULT_CONFIG:
            if not isinstance(self._config.get(section), dict):
                raise ConfigurationError(
                    f"Missing required configuration section: {section}"
                )

        base_url = self.get("api", "base_url", "")
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigurationError("api.base_url must be a non-empty string")

        timeout = self.get("api", "timeout")
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("api.timeout must be positive")

        mode = self.get("resolution", "mode")
        if str(mode).lower() not in get_valid_resolution_modes():
            raise ConfigurationError(
                "resolution.mode must be one of: "
                f"{', '.join(get_valid_resolution_modes())}"
            )

        level = str(self.get("logging", "level")).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                f"logging.level must be one of: {', '.join(LOG_LEVELS)}"
            )
