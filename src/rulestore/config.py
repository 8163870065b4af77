"""Configuration management for RuleStore."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILE_NAME = "rulestore.toml"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_CONFIG = """# RuleStore Configuration

# Base path of the ElastAlert installation
elastalertPath = "."

[rulesPath]
# Join path onto elastalertPath when relative is true
relative = true
path = "rules"

[download]
# Verify TLS certificates when fetching rule archives
verify_tls = true
# Seconds to wait for the archive server
timeout = 30

[access]
# "full" or "read_only"
mode = "full"

[logging]
level = "INFO"
format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
"""


class Config:
    """Configuration manager for RuleStore."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration from TOML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        self.config_path = Path(config_path)
        self._config: dict[str, Any] = {}

        if self.config_path.exists():
            self._load_config()

    def _load_config(self) -> None:
        """Load configuration from TOML file."""
        try:
            with open(self.config_path, "rb") as f:
                self._config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(
                f"Invalid TOML configuration in {self.config_path}: {e}"
            ) from e
        except OSError as e:
            raise ValueError(
                f"Failed to load configuration from {self.config_path}: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key."""
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def elastalert_path(self) -> Path:
        """Get the ElastAlert base path.

        A relative path is resolved against the configuration file's
        directory.
        """
        value = self.get("elastalertPath", ".")
        base = Path(str(value) if value is not None else ".")

        if not base.is_absolute():
            base = self.config_path.parent / base

        return base

    @property
    def rules_path_relative(self) -> bool:
        value = self.get("rulesPath.relative", True)
        return bool(value) if value is not None else True

    @property
    def rules_path(self) -> str:
        value = self.get("rulesPath.path", "rules")
        return str(value) if value is not None else "rules"

    @property
    def verify_tls(self) -> bool:
        """Get whether TLS certificates are verified for archive downloads."""
        value = self.get("download.verify_tls", True)
        return bool(value) if value is not None else True

    @property
    def download_timeout(self) -> float:
        value = self.get("download.timeout", 30)
        return float(value) if value is not None else 30.0

    @property
    def access_mode(self) -> str:
        value = self.get("access.mode", "full")
        return str(value).lower() if value is not None else "full"

    @property
    def log_level(self) -> str:
        value = self.get("logging.level", "INFO")
        return str(value).upper() if value is not None else "INFO"

    @property
    def log_format(self) -> str:
        value = self.get("logging.format", DEFAULT_LOG_FORMAT)
        return str(value) if value is not None else DEFAULT_LOG_FORMAT


def configure_logging(config: Config) -> None:
    """Apply the [logging] section to the root logger."""
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=config.log_format)
