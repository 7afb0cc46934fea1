"""
Storage Layer

On-disk config files and the in-memory cache in front of them.

Modules:
    dotenv_file: KEY=VALUE file reading, serialization and writing
    cache: Shared, lock-guarded cache of parsed files
"""

from dotenv_registry.storage.cache import CacheStore, ReadWriteLock, default_store
from dotenv_registry.storage.dotenv_file import (
    DEFAULT_SEPARATOR,
    EnvFileParseError,
    config_file_exists,
    read_env_file,
    serialize_env,
    write_env_file,
)

__all__ = [
    "CacheStore",
    "ReadWriteLock",
    "default_store",
    "DEFAULT_SEPARATOR",
    "EnvFileParseError",
    "config_file_exists",
    "read_env_file",
    "serialize_env",
    "write_env_file",
]
