"""User configuration file support for drplayer-dashboard.

Supports loading defaults from:
1. Environment variables (highest priority)
2. User config file (~/.config/drplayer-dashboard/config.toml)
3. Built-in defaults (lowest priority)

Example config file (~/.config/drplayer-dashboard/config.toml):

    [server]
    host = "127.0.0.1"
    port = 9978
    apps_dir = "/opt/drplayer/apps"
    spa_apps = ["drplayer"]

    [skip]
    settings_file = "/home/me/.local/share/drplayer-dashboard/skip_settings.json"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .constants import (
    DEFAULT_APPS_DIR,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_SPA_APPS,
    ENV_APPS_DIR,
    ENV_PORT,
    ENV_SETTINGS_FILE,
    USER_CONFIG_PATHS,
)
from .logging import get_logger

log = get_logger("config")


@dataclass
class UserConfig:
    """User configuration loaded from config file and environment."""

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    apps_dir: Optional[Path] = None
    spa_apps: list[str] = field(default_factory=lambda: list(DEFAULT_SPA_APPS))

    # Skip settings persistence
    settings_file: Optional[Path] = None

    # Internal: track where config was loaded from
    _config_source: Optional[Path] = field(default=None, repr=False)

    @classmethod
    def load(cls, config_paths: Optional[list[Path]] = None) -> "UserConfig":
        """Load configuration from file and environment.

        Priority (highest to lowest):
        1. Environment variables
        2. User config file
        3. Built-in defaults
        """
        config = cls()
        config._load_from_file(config_paths or USER_CONFIG_PATHS)
        config._load_from_env()
        return config

    def _load_from_file(self, config_paths: list[Path]) -> None:
        """Load configuration from the first TOML file that exists."""
        for config_path in config_paths:
            if config_path.exists():
                try:
                    with open(config_path, "rb") as f:
                        data = tomllib.load(f)
                    self._apply_config_data(data)
                    self._config_source = config_path
                    return
                except (tomllib.TOMLDecodeError, OSError, ValueError, TypeError) as e:
                    log.warning(f"Ignoring malformed config file {config_path}: {e}")

    def _apply_config_data(self, data: dict[str, Any]) -> None:
        """Apply configuration data from parsed TOML."""
        server = data.get("server", {})
        if "host" in server:
            self.host = str(server["host"])
        if "port" in server:
            self.port = int(server["port"])
        if "apps_dir" in server:
            self.apps_dir = Path(server["apps_dir"])
        if "spa_apps" in server:
            self.spa_apps = [str(name) for name in server["spa_apps"]]

        skip = data.get("skip", {})
        if "settings_file" in skip:
            self.settings_file = Path(skip["settings_file"])

    def _load_from_env(self) -> None:
        """Override configuration from environment variables."""
        if ENV_APPS_DIR in os.environ:
            self.apps_dir = Path(os.environ[ENV_APPS_DIR])
        if ENV_PORT in os.environ:
            try:
                self.port = int(os.environ[ENV_PORT])
            except ValueError:
                log.warning(f"Ignoring non-numeric {ENV_PORT}={os.environ[ENV_PORT]!r}")
        if ENV_SETTINGS_FILE in os.environ:
            self.settings_file = Path(os.environ[ENV_SETTINGS_FILE])

    @property
    def config_source(self) -> Optional[Path]:
        """Config file the values were read from, if any."""
        return self._config_source

    def get_apps_dir(self, cli_override: Optional[Path] = None) -> Path:
        """Get apps directory with CLI override support.

        Priority: CLI > env/config > CWD-relative default
        """
        if cli_override is not None:
            return cli_override
        if self.apps_dir is not None:
            return self.apps_dir
        return Path.cwd() / DEFAULT_APPS_DIR

    def get_settings_file(self, cli_override: Optional[Path] = None) -> Path:
        """Get skip settings file with CLI override support."""
        if cli_override is not None:
            return cli_override
        if self.settings_file is not None:
            return self.settings_file
        return DEFAULT_SETTINGS_FILE


# Global config instance (lazily loaded)
_config: Optional[UserConfig] = None


def get_config() -> UserConfig:
    """Get the global user configuration (loads on first access)."""
    global _config
    if _config is None:
        _config = UserConfig.load()
    return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    _config = None
