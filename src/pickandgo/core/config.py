"""Configuration resolver with 4-level priority.

Priority (highest to lowest):
1. CLI arguments
2. Environment variables (PICKANDGO_*)
3. Config files (user > system)
4. Defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pickandgo.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"


@dataclass
class ConfigSource:
    """Represents where a config value came from."""

    value: Any
    source: str  # 'cli' | 'env' | 'user_config' | 'system_config' | 'default'


@dataclass(frozen=True)
class ApiSettings:
    """Resolved backend connection settings."""

    base_url: str
    timeout_seconds: float


def _flatten_keys(data: dict[str, Any], prefix: str = "") -> set[str]:
    keys: set[str] = set()
    for key, value in data.items():
        key_path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            keys.update(_flatten_keys(value, key_path))
        else:
            keys.add(key_path)
    return keys


class ConfigResolver:
    """Resolve configuration with strict 4-level priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'api': {'base_url': 'https://api.example.lk/api'}},
            user_config_path=Path('~/.config/pickandgo/config.yaml')
        )

        url, source = resolver.resolve('api.base_url')
        # source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Arguments from CLI (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/pickandgo/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/pickandgo/config.yaml")
        self.defaults = defaults or self._default_config()

        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'api.base_url')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._get_nested(self.cli_args, key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._get_nested(self._get_user_config(), key)
        if value is not None:
            return value, "user_config"

        value = self._get_nested(self._get_system_config(), key)
        if value is not None:
            return value, "system_config"

        value = self._get_nested(self.defaults, key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    def resolve_all(self) -> dict[str, ConfigSource]:
        """Resolve every key known to any source."""
        all_keys: set[str] = set()
        all_keys.update(_flatten_keys(self.cli_args))
        all_keys.update(_flatten_keys(self._get_user_config()))
        all_keys.update(_flatten_keys(self._get_system_config()))
        all_keys.update(_flatten_keys(self.defaults))

        result: dict[str, ConfigSource] = {}
        for key in sorted(all_keys):
            try:
                value, source = self.resolve(key)
            except ConfigError:
                continue
            result[key] = ConfigSource(value=value, source=source)
        return result

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level.

        Raises:
            ConfigError: If the resolved value is not quiet/normal/verbose/debug.
        """
        key = "logging.level"
        try:
            value, _src = self.resolve(key)
        except ConfigError:
            return DEFAULT_LOGGING_LEVEL

        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        norm = value.strip().lower()
        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")
        return norm

    def resolve_api_settings(self) -> ApiSettings:
        """Resolve api.base_url and api.timeout_seconds."""
        base_url, _src = self.resolve("api.base_url")
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError("Config key 'api.base_url' must be a non-empty string")

        raw_timeout, _src = self.resolve("api.timeout_seconds")
        timeout = self._as_float("api.timeout_seconds", raw_timeout)
        if timeout <= 0:
            raise ConfigError("Config key 'api.timeout_seconds' must be greater than 0")

        return ApiSettings(base_url=base_url.rstrip("/"), timeout_seconds=timeout)

    def resolve_float(self, key: str) -> float:
        value, _src = self.resolve(key)
        return self._as_float(key, value)

    def resolve_str(self, key: str) -> str:
        value, _src = self.resolve(key)
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")
        return value

    @staticmethod
    def _as_float(key: str, value: Any) -> float:
        # Env values arrive as strings.
        if isinstance(value, bool):
            raise ConfigError(f"Config key '{key}' must be a number")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Config key '{key}' must be a number, got {value!r}") from e

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Environment variable format: PICKANDGO_KEY_NAME
        Example: PICKANDGO_API_BASE_URL, PICKANDGO_LOGGING_LEVEL
        """
        env_key = f"PICKANDGO_{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _get_user_config(self) -> dict[str, Any]:
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'api': {'base_url': 'http://localhost:9000/api'}}
            _get_nested(data, 'api.base_url') -> 'http://localhost:9000/api'
        """
        current: Any = data

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None

        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        return {
            "api": {
                "base_url": "http://localhost:9000/api",
                "timeout_seconds": 30,
            },
            "agreements": {
                "vehicle_owner_type": "vehicle-owner",
                "client_rental_type": "client-rental",
            },
            "pricing": {
                "currency": "LKR",
            },
            "checkout": {
                "service_fee": 15,
            },
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
            "web": {
                "host": "0.0.0.0",
                "port": 8080,
            },
        }
