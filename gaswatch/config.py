"""Configuration loading and validation for Gas Watch."""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_BLOCK_TIME_SECS,
    DEFAULT_COUNTDOWN_SECS,
    DEFAULT_ETHERSCAN_URL,
    DEFAULT_GAS_LIMIT,
    DEFAULT_HOUR_FLUSH_SECS,
    DEFAULT_HTTP_TIMEOUT_SECS,
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_MAX_BYTES,
    DEFAULT_LONG_CAPACITY,
    DEFAULT_LONG_COUNTDOWN_SECS,
    DEFAULT_MINUTE_FLUSH_SECS,
    DEFAULT_POLL_SECS,
    DEFAULT_SHORT_CAPACITY,
)

# (env var, section, key, type)
ENV_OVERRIDES = [
    ("GW_ETHERSCAN_URL", "etherscan", "api_url", str),
    ("GW_ETHERSCAN_API_KEY", "etherscan", "api_key", str),
    ("GW_POLL_SECS", "polling", "poll_secs", int),
    ("GW_SHORT_CAPACITY", "windows", "short_capacity", int),
    ("GW_LONG_CAPACITY", "windows", "long_capacity", int),
    ("GW_GAS_LIMIT", "estimates", "gas_limit", int),
    ("GW_BLOCK_TIME_SECS", "estimates", "block_time_secs", float),
    ("GW_LOG_DIR", "logging", "log_dir", str),
    ("GW_LOG_LEVEL", "logging", "level", str),
    ("GW_CONSOLE_LEVEL", "logging", "console_level", str),
]


CONFIG_FILENAME = "config.yaml"
# Gitignored; holds the Etherscan API key
LOCAL_CONFIG_FILENAME = "config.local.yaml"


def find_config_file(start: Optional[Path] = None) -> Path:
    """Nearest config.yaml at or above ``start`` (default: cwd), else ``start/config.yaml``."""
    start = start or Path.cwd()
    for directory in (start, *start.parents):
        if (directory / CONFIG_FILENAME).exists():
            return directory / CONFIG_FILENAME
    return start / CONFIG_FILENAME


def merge_settings(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` layered on top; nested sections merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open('r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


class Config:
    """Configuration container with environment variable overrides."""

    def __init__(self, config_path: Optional[str] = None, create_if_missing: bool = True):
        """
        Load configuration, highest precedence last:
        built-in defaults, config.yaml, config.local.yaml, GW_* environment variables.

        Args:
            config_path: Path to config.yaml. If None, the nearest config.yaml in
                        the current directory or its parents is used.
            create_if_missing: Write a default config.yaml when none is discovered.
                              Ignored for an explicit config_path, which must exist.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
            ValueError: If a file is not a mapping or a capacity or period is not positive
        """
        if config_path is not None:
            self.path = Path(config_path)
            if not self.path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            self.path = find_config_file()
            if create_if_missing and not self.path.exists():
                self.write_default(self.path)

        self._raw: Dict[str, Any] = self.default_config()
        for layer in (self.path, self.path.parent / LOCAL_CONFIG_FILENAME):
            self._raw = merge_settings(self._raw, _read_yaml(layer))

        self._apply_env_overrides()
        self._validate()

    @staticmethod
    def default_config() -> Dict[str, Any]:
        return {
            "etherscan": {
                "api_url": DEFAULT_ETHERSCAN_URL,
                "api_key": "",
                "timeout_secs": DEFAULT_HTTP_TIMEOUT_SECS,
            },
            "polling": {
                "poll_secs": DEFAULT_POLL_SECS,
                "countdown_secs": DEFAULT_COUNTDOWN_SECS,
                "minute_flush_secs": DEFAULT_MINUTE_FLUSH_SECS,
                "hour_flush_secs": DEFAULT_HOUR_FLUSH_SECS,
                "long_countdown_secs": DEFAULT_LONG_COUNTDOWN_SECS,
            },
            "windows": {
                "short_capacity": DEFAULT_SHORT_CAPACITY,
                "long_capacity": DEFAULT_LONG_CAPACITY,
            },
            "estimates": {
                "gas_limit": DEFAULT_GAS_LIMIT,
                "block_time_secs": DEFAULT_BLOCK_TIME_SECS,
            },
            "logging": {
                "level": "INFO",
                "log_dir": "logs",
                "console_level": "INFO",
                "rotation": {
                    "max_bytes": DEFAULT_LOG_MAX_BYTES,
                    "backup_count": DEFAULT_LOG_BACKUP_COUNT,
                    "when": "midnight",
                },
            },
        }

    @classmethod
    def write_default(cls, path: Path) -> None:
        with Path(path).open('w') as f:
            yaml.dump(cls.default_config(), f, default_flow_style=False, sort_keys=False)

    def _apply_env_overrides(self):
        """Apply environment variable overrides using GW_ prefix."""
        for env_name, section, key, cast in ENV_OVERRIDES:
            value = os.getenv(env_name)
            if value:
                self._raw.setdefault(section, {})[key] = cast(value)

    def _validate(self):
        """Reject non-positive window capacities and timer periods."""
        positive = {
            "poll_secs": self.poll_secs,
            "countdown_secs": self.countdown_secs,
            "minute_flush_secs": self.minute_flush_secs,
            "hour_flush_secs": self.hour_flush_secs,
            "long_countdown_secs": self.long_countdown_secs,
            "short_capacity": self.short_capacity,
            "long_capacity": self.long_capacity,
            "block_time_secs": self.block_time_secs,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def _section(self, name: str) -> Dict[str, Any]:
        return self._raw.get(name) or {}

    @property
    def etherscan_url(self) -> str:
        return self._section("etherscan").get("api_url", DEFAULT_ETHERSCAN_URL)

    @property
    def etherscan_api_key(self) -> str:
        return self._section("etherscan").get("api_key", "") or ""

    @property
    def http_timeout_secs(self) -> float:
        return float(self._section("etherscan").get("timeout_secs", DEFAULT_HTTP_TIMEOUT_SECS))

    @property
    def poll_secs(self) -> int:
        return int(self._section("polling").get("poll_secs", DEFAULT_POLL_SECS))

    @property
    def countdown_secs(self) -> int:
        return int(self._section("polling").get("countdown_secs", DEFAULT_COUNTDOWN_SECS))

    @property
    def minute_flush_secs(self) -> int:
        return int(self._section("polling").get("minute_flush_secs", DEFAULT_MINUTE_FLUSH_SECS))

    @property
    def hour_flush_secs(self) -> int:
        return int(self._section("polling").get("hour_flush_secs", DEFAULT_HOUR_FLUSH_SECS))

    @property
    def long_countdown_secs(self) -> int:
        return int(self._section("polling").get("long_countdown_secs", DEFAULT_LONG_COUNTDOWN_SECS))

    @property
    def short_capacity(self) -> int:
        return int(self._section("windows").get("short_capacity", DEFAULT_SHORT_CAPACITY))

    @property
    def long_capacity(self) -> int:
        return int(self._section("windows").get("long_capacity", DEFAULT_LONG_CAPACITY))

    @property
    def gas_limit(self) -> int:
        return int(self._section("estimates").get("gas_limit", DEFAULT_GAS_LIMIT))

    @property
    def block_time_secs(self) -> float:
        return float(self._section("estimates").get("block_time_secs", DEFAULT_BLOCK_TIME_SECS))

    @property
    def log_level(self) -> str:
        return self._section("logging").get("level", "INFO")

    @property
    def log_dir(self) -> str:
        return self._section("logging").get("log_dir", "logs")

    @property
    def console_level(self) -> str:
        return self._section("logging").get("console_level", "INFO")

    @property
    def log_rotation(self) -> Dict[str, Any]:
        """Get log rotation configuration with defaults."""
        rotation = self._section("logging").get("rotation", {}) or {}
        return {
            "max_bytes": rotation.get("max_bytes", DEFAULT_LOG_MAX_BYTES),
            "backup_count": rotation.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
            "when": rotation.get("when", "midnight"),
        }
