"""
RegistryConfig - Registry Defaults

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> env = DotEnv.from_config(RegistryConfig())

    >>> # Explicit configuration
    >>> config = RegistryConfig(config_file="prod.env", prefix="app")
    >>> env = DotEnv.from_config(config)

    >>> # From config file
    >>> config = RegistryConfig.from_file("./registry.toml")

Environment Variables:
    DOTENV_REGISTRY_CONFIG_FILE - Config file path
    DOTENV_REGISTRY_SEPARATOR - Key/value separator
    DOTENV_REGISTRY_PREFIX - Environment variable prefix
    DOTENV_REGISTRY_ALLOW_EMPTY_ENV_VARS - Treat set-but-empty env vars as values
    DOTENV_REGISTRY_STRICT_PARSING - Fail loads on malformed lines
    DOTENV_REGISTRY_SORT_KEYS_ON_SAVE - Write keys in sorted order
    DOTENV_REGISTRY_LOCK_WRITES - Hold a file lock while saving
    DOTENV_REGISTRY_LOCK_TIMEOUT - Seconds to wait for the file lock
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, cast

from dotenv_registry.utils.casting import to_bool

# TOML support: tomllib is built-in for Python 3.11+, use tomli for 3.10
try:
    import tomllib

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomllib.load(f))

except ImportError:
    import tomli

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomli.load(f))


ENV_PREFIX = "DOTENV_REGISTRY_"


class RegistryConfig:
    """Construction defaults for ``DotEnv``."""

    # === Source ===

    config_file: str = ".env"
    """Path of the KEY=VALUE config file"""

    separator: str = "="
    """Symbol separating key and value on each line"""

    prefix: str = ""
    """Prefix (without underscore) prepended to every key"""

    allow_empty_env_vars: bool = False
    """Report set-but-empty environment variables as present"""

    # === Parsing ===

    strict_parsing: bool = False
    """Fail the whole load on a malformed line instead of skipping it"""

    # === Writing ===

    sort_keys_on_save: bool = False
    """Write keys sorted instead of in file/insertion order"""

    lock_writes: bool = False
    """Hold a ``<file>.lock`` file lock while saving"""

    lock_timeout: float = 30.0
    """Seconds to wait for the file lock"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if hasattr(type(self), key) and not key.startswith("_"):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

        self._validate()

    def _validate(self) -> None:
        if not self.separator:
            raise ValueError("separator must not be empty")

    def _load_from_env(self) -> None:
        """Load configuration from DOTENV_REGISTRY_* environment variables."""
        if config_file := os.getenv(f"{ENV_PREFIX}CONFIG_FILE"):
            self.config_file = config_file
        if separator := os.getenv(f"{ENV_PREFIX}SEPARATOR"):
            self.separator = separator
        if prefix := os.getenv(f"{ENV_PREFIX}PREFIX"):
            self.prefix = prefix
        if flag := os.getenv(f"{ENV_PREFIX}ALLOW_EMPTY_ENV_VARS"):
            self.allow_empty_env_vars = to_bool(flag)
        if flag := os.getenv(f"{ENV_PREFIX}STRICT_PARSING"):
            self.strict_parsing = to_bool(flag)
        if flag := os.getenv(f"{ENV_PREFIX}SORT_KEYS_ON_SAVE"):
            self.sort_keys_on_save = to_bool(flag)
        if flag := os.getenv(f"{ENV_PREFIX}LOCK_WRITES"):
            self.lock_writes = to_bool(flag)
        if timeout := os.getenv(f"{ENV_PREFIX}LOCK_TIMEOUT"):
            self.lock_timeout = float(timeout)

    @classmethod
    def from_file(cls, path: str | Path) -> "RegistryConfig":
        """
        Load configuration from TOML file.

        Example TOML:
            [registry]
            config_file = "prod.env"
            prefix = "app"

            [parsing]
            strict = true

            [writing]
            sort_keys = true
            lock = true

        Args:
            path: Path to TOML configuration file

        Returns:
            RegistryConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = _load_toml(path)

        flat_config: dict[str, Any] = {}

        # Map section keys to config option names
        section_mapping: dict[str, dict[str, str]] = {
            "registry": {
                "config_file": "config_file",
                "separator": "separator",
                "prefix": "prefix",
                "allow_empty_env_vars": "allow_empty_env_vars",
            },
            "parsing": {"strict": "strict_parsing"},
            "writing": {
                "sort_keys": "sort_keys_on_save",
                "lock": "lock_writes",
                "lock_timeout": "lock_timeout",
            },
        }

        for section, keys in section_mapping.items():
            for key, value in data.get(section, {}).items():
                flat_config[keys.get(key, key)] = value

        # Also support flat top-level keys
        for key, value in data.items():
            if key not in section_mapping and not isinstance(value, dict):
                flat_config[key] = value

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool]] = {
            "registry": {
                "config_file": self.config_file,
                "separator": self.separator,
                "prefix": self.prefix,
                "allow_empty_env_vars": self.allow_empty_env_vars,
            },
            "parsing": {
                "strict": self.strict_parsing,
            },
            "writing": {
                "sort_keys": self.sort_keys_on_save,
                "lock": self.lock_writes,
                "lock_timeout": self.lock_timeout,
            },
        }

        # Build TOML string manually (avoids extra dependency)
        lines = ["# dotenv-registry configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
                    lines.append(f'{key} = "{escaped}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
            lines.append("")

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> "RegistryConfig":
        """Return new config with specified overrides."""
        new_config = RegistryConfig.__new__(RegistryConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            if not hasattr(RegistryConfig, key) or key.startswith("_"):
                raise ValueError(f"Unknown configuration option: {key}")
            setattr(new_config, key, value)
        new_config._validate()
        return new_config
