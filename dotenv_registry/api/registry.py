"""
DotEnv - Prioritized Configuration Registry

Resolves configuration values by key across the process environment and a
KEY=VALUE config file, and writes updated values back to that file.

Precedence (highest to lowest):
    1. Environment variable ``<PREFIX_><UPPERCASE_KEY>``
    2. Config file (through the shared cache, including values ``set()``
       programmatically)
    3. Absent: empty string

For example, with these sources:

    Config
        USER=root
        SECRET=secretFromConfig

    Environment
        SECRET=secretFromEnv

``get("secret")`` returns ``"secretFromEnv"`` and ``get("user")`` returns
``"root"``.

A set-but-empty environment variable always decides the result: ``get()``
returns ``""`` without consulting the file. ``allow_empty_env_vars`` only
controls whether that empty value counts as present (``resolve``/``is_set``).

Example:
    >>> env = DotEnv("app.env", prefix="app")
    >>> env.load_config()
    >>> env.get_int("port")         # APP_PORT
    8080
    >>> env.write("debug", True)    # persists APP_DEBUG=true
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv_registry.storage.cache import CacheStore, default_store
from dotenv_registry.storage.dotenv_file import (
    DEFAULT_SEPARATOR,
    config_file_exists,
    serialize_env,
    write_env_file,
)
from dotenv_registry.types.results import ResolvedValue, ValueSource
from dotenv_registry.utils import casting
from dotenv_registry.utils.size import parse_size_in_bytes

if TYPE_CHECKING:
    from dotenv_registry.config.settings import RegistryConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".env"


class DotEnv:
    """
    A registry bound to one config file.

    Registries pointing at the same file share its cached values through the
    ``CacheStore``; registries on different files are isolated.

    Thread safety:
        ``get``/``lookup`` run concurrently; ``set``, ``save`` and cache
        population are serialized by the store's lock.
    """

    def __init__(
        self,
        config_file: str | Path = DEFAULT_CONFIG_FILE,
        *,
        separator: str = DEFAULT_SEPARATOR,
        prefix: str = "",
        allow_empty_env_vars: bool = False,
        strict_parsing: bool = False,
        sort_keys_on_save: bool = False,
        lock_writes: bool = False,
        lock_timeout: float = 30.0,
        store: CacheStore | None = None,
    ):
        if not separator:
            raise ValueError("separator must not be empty")
        self.config_file = os.fspath(config_file) or DEFAULT_CONFIG_FILE
        self.separator = separator
        self.allow_empty_env_vars = allow_empty_env_vars
        self.strict_parsing = strict_parsing
        self.sort_keys_on_save = sort_keys_on_save
        self.lock_writes = lock_writes
        self.lock_timeout = lock_timeout
        self._store = store if store is not None else default_store()
        self._prefix = ""
        self.set_prefix(prefix)

    @classmethod
    def from_config(
        cls,
        config: RegistryConfig,
        store: CacheStore | None = None,
    ) -> "DotEnv":
        """Build a registry from a ``RegistryConfig``."""
        return cls(
            config.config_file,
            separator=config.separator,
            prefix=config.prefix,
            allow_empty_env_vars=config.allow_empty_env_vars,
            strict_parsing=config.strict_parsing,
            sort_keys_on_save=config.sort_keys_on_save,
            lock_writes=config.lock_writes,
            lock_timeout=config.lock_timeout,
            store=store,
        )

    def __repr__(self) -> str:
        return (
            f"DotEnv(config_file={self.config_file!r}, separator={self.separator!r}, "
            f"prefix={self.get_prefix()!r})"
        )

    @property
    def store(self) -> CacheStore:
        """The cache store this registry reads through."""
        return self._store

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def set_config_file(self, config_file: str | Path) -> None:
        """Point this registry at another config file."""
        self.config_file = os.fspath(config_file)

    def set_prefix(self, prefix: str) -> None:
        """
        Set the prefix used for every key.

        With prefix ``"pro"`` the key ``"port"`` is looked up as ``PRO_PORT``.
        An empty prefix disables prefixing.
        """
        self._prefix = f"{prefix.upper()}_" if prefix else ""

    def get_prefix(self) -> str:
        """Return the prefix without its trailing underscore."""
        return self._prefix.removesuffix("_")

    def allow_empty_env(self, allow_empty_env_vars: bool) -> None:
        """Count set-but-empty environment variables as present values."""
        self.allow_empty_env_vars = allow_empty_env_vars

    def transform_key(self, key: str) -> str:
        """Uppercase ``key`` and prepend the prefix unless already there."""
        key = key.upper()
        if self._prefix and not key.startswith(self._prefix):
            key = self._prefix + key
        return key

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_config(self) -> None:
        """
        Parse the config file and replace its cached values.

        Raises:
            FileNotFoundError: If the file does not exist or is a directory
            EnvFileParseError: If strict parsing is on and a line is malformed
            OSError: On read failure
        """
        if not config_file_exists(self.config_file):
            raise FileNotFoundError(f"Config file not found: {self.config_file}")
        self._store.load(self.config_file, self.separator, strict=self.strict_parsing)

    def invalidate_cache(self) -> None:
        """Force the next read to re-parse this registry's file."""
        self._store.invalidate(self.config_file)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self, key: str) -> ResolvedValue:
        """
        Resolve ``key`` against environment, then config file.

        Never raises: a missing or unreadable file resolves as absent.
        """
        if not key:
            return ResolvedValue(key="")

        key = self.transform_key(key)

        env_value = os.environ.get(key)
        if env_value is not None:
            # Empty env vars short-circuit; they never fall through to the file
            return ResolvedValue(
                key=key,
                value=env_value,
                present=bool(env_value) or self.allow_empty_env_vars,
                source=ValueSource.ENVIRONMENT,
            )

        try:
            value, found = self._store.lookup(
                self.config_file, key, self.separator, strict=self.strict_parsing
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Could not read {self.config_file} while resolving {key}: {e}")
            return ResolvedValue(key=key)

        if found:
            return ResolvedValue(key=key, value=value, present=True, source=ValueSource.FILE)
        return ResolvedValue(key=key)

    def get(self, key: str) -> Any:
        """
        Return the value for ``key``, or ``""`` if it is not set anywhere.

        Values set with ``set()`` keep their original type.
        """
        return self.resolve(key).value

    def lookup(self, key: str) -> tuple[Any, bool]:
        """
        Look ``key`` up in the config file only (the environment is ignored).

        Returns:
            ``(value, True)`` if the key is present (the value may be empty),
            otherwise ``("", False)``

        Raises:
            FileNotFoundError: If the file is not cached and does not exist
            EnvFileParseError: If strict parsing is on and a line is malformed
        """
        return self._store.lookup(
            self.config_file,
            self.transform_key(key),
            self.separator,
            strict=self.strict_parsing,
        )

    def is_set(self, key: str) -> bool:
        """Whether ``key`` resolves to a present value in any source."""
        return self.resolve(key).present

    def all_settings(self) -> dict[str, Any]:
        """
        Return a copy of every key cached for the config file.

        Returns an empty dict if the file cannot be read.
        """
        snapshot = self._store.snapshot(self.config_file)
        if snapshot is None:
            try:
                self._store.load(self.config_file, self.separator, strict=self.strict_parsing)
            except (OSError, ValueError) as e:
                logger.debug(f"Could not load {self.config_file}: {e}")
                return {}
            snapshot = self._store.snapshot(self.config_file)
        return snapshot or {}

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """
        Set ``key`` in the cache only; nothing is written to disk.

        The cached value takes part in the normal precedence, so an
        environment variable with the same name still wins.

        Raises:
            ValueError: If the value contains a line break
        """
        if any(c in casting.to_string(value) for c in "\r\n"):
            raise ValueError(f"Value for {key} must not contain line breaks")
        self._store.set(
            self.config_file,
            self.transform_key(key),
            value,
            self.separator,
            strict=self.strict_parsing,
        )

    def save(self) -> None:
        """
        Write every cached key for the config file back to disk.

        The cache entry is invalidated afterwards, even if the write fails,
        so the next read re-parses the file.

        Raises:
            OSError: If the directory cannot be created or the file written
        """

        def _write(values: dict[str, Any]) -> None:
            data = serialize_env(values, self.separator, sort_keys=self.sort_keys_on_save)
            write_env_file(
                self.config_file,
                data,
                lock=self.lock_writes,
                lock_timeout=self.lock_timeout,
            )

        self._store.flush(self.config_file, _write, self.separator, strict=self.strict_parsing)

    def write(self, key: str, value: Any) -> None:
        """``set()`` followed by ``save()``."""
        self.set(key, value)
        self.save()

    # -------------------------------------------------------------------------
    # Typed accessors
    # -------------------------------------------------------------------------

    def get_string(self, key: str) -> str:
        return casting.to_string(self.get(key))

    def get_bool(self, key: str) -> bool:
        return casting.to_bool(self.get(key))

    def get_int(self, key: str) -> int:
        return casting.to_int(self.get(key))

    def get_uint(self, key: str) -> int:
        return casting.to_uint(self.get(key))

    def get_float(self, key: str) -> float:
        return casting.to_float(self.get(key))

    def get_duration(self, key: str) -> timedelta:
        return casting.to_duration(self.get(key))

    def get_time(self, key: str) -> datetime:
        return casting.to_time(self.get(key))

    def get_int_list(self, key: str) -> list[int]:
        return casting.to_int_list(self.get(key))

    def get_string_list(self, key: str) -> list[str]:
        return casting.to_string_list(self.get(key))

    def get_string_map(self, key: str) -> dict[str, Any]:
        return casting.to_string_map(self.get(key))

    def get_string_map_string(self, key: str) -> dict[str, str]:
        return casting.to_string_map_string(self.get(key))

    def get_string_map_string_list(self, key: str) -> dict[str, list[str]]:
        return casting.to_string_map_string_list(self.get(key))

    def get_size_in_bytes(self, key: str) -> int:
        """Value as a byte count, e.g. ``"10kb"`` → 10240."""
        return parse_size_in_bytes(self.get_string(key))
