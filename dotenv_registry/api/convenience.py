"""
Convenience Functions

Top-level functions operating on a default ``DotEnv`` instance, for scripts
and REPL usage. The default instance is created on first use and reads
``.env`` from the current directory unless ``set_config_file()`` says
otherwise.

Example:
    >>> import dotenv_registry as dotenv
    >>> dotenv.set_config_file("app.env")
    >>> dotenv.load_config()
    >>> dotenv.get_string("user")
    'root'
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from dotenv_registry.api.registry import DotEnv
from dotenv_registry.storage.cache import default_store
from dotenv_registry.types.results import ResolvedValue

_default: DotEnv | None = None
_default_lock = threading.Lock()


def init(config_file: str | Path | None = None, **kwargs: Any) -> DotEnv:
    """
    Return a new ``DotEnv`` for ``config_file`` (``.env`` if omitted).

    The default instance used by the module-level functions is unchanged.
    """
    return DotEnv(config_file or ".env", **kwargs)


def get_dotenv() -> DotEnv:
    """Return the default instance, creating it if needed."""
    global _default
    with _default_lock:
        if _default is None:
            _default = init()
        return _default


def set_config_file(config_file: str | Path) -> None:
    """Replace the default instance with one reading ``config_file``."""
    global _default
    with _default_lock:
        _default = init(config_file)


def reset() -> None:
    """Forget the default instance."""
    global _default
    with _default_lock:
        _default = None


def load_config() -> None:
    """Parse the default config file; raises FileNotFoundError if missing."""
    get_dotenv().load_config()


def set_prefix(prefix: str) -> None:
    get_dotenv().set_prefix(prefix)


def get_prefix() -> str:
    return get_dotenv().get_prefix()


def allow_empty_env(allow_empty_env_vars: bool) -> None:
    get_dotenv().allow_empty_env(allow_empty_env_vars)


def get(key: str) -> Any:
    return get_dotenv().get(key)


def resolve(key: str) -> ResolvedValue:
    return get_dotenv().resolve(key)


def lookup(key: str) -> tuple[Any, bool]:
    return get_dotenv().lookup(key)


def is_set(key: str) -> bool:
    return get_dotenv().is_set(key)


def set(key: str, value: Any) -> None:  # noqa: A001
    get_dotenv().set(key, value)


def save() -> None:
    get_dotenv().save()


def write(key: str, value: Any) -> None:
    get_dotenv().write(key, value)


def invalidate_cache_for_file(file_path: str | Path) -> None:
    """Drop the cached values of ``file_path`` in the shared store."""
    default_store().invalidate(file_path)


def get_string(key: str) -> str:
    return get_dotenv().get_string(key)


def get_bool(key: str) -> bool:
    return get_dotenv().get_bool(key)


def get_int(key: str) -> int:
    return get_dotenv().get_int(key)


def get_uint(key: str) -> int:
    return get_dotenv().get_uint(key)


def get_float(key: str) -> float:
    return get_dotenv().get_float(key)


def get_duration(key: str) -> timedelta:
    return get_dotenv().get_duration(key)


def get_time(key: str) -> datetime:
    return get_dotenv().get_time(key)


def get_int_list(key: str) -> list[int]:
    return get_dotenv().get_int_list(key)


def get_string_list(key: str) -> list[str]:
    return get_dotenv().get_string_list(key)


def get_string_map(key: str) -> dict[str, Any]:
    return get_dotenv().get_string_map(key)


def get_string_map_string(key: str) -> dict[str, str]:
    return get_dotenv().get_string_map_string(key)


def get_string_map_string_list(key: str) -> dict[str, list[str]]:
    return get_dotenv().get_string_map_string_list(key)


def get_size_in_bytes(key: str) -> int:
    return get_dotenv().get_size_in_bytes(key)
