"""
dotenv-registry - Prioritized .env Configuration Registry

Resolves configuration values by key from environment variables and a
KEY=VALUE config file (in that order), caches parsed files, and writes
updated values back.

Example:
    >>> from dotenv_registry import DotEnv
    >>> env = DotEnv("app.env")
    >>> env.load_config()
    >>> env.get_string("database_url")
    'postgres://localhost/app'

    >>> # Module-level functions use a default instance
    >>> import dotenv_registry as dotenv
    >>> dotenv.set_config_file("app.env")
    >>> dotenv.get_bool("debug")
    False

Main Classes:
    DotEnv: Registry bound to one config file
    CacheStore: Shared cache of parsed config files
    RegistryConfig: Defaults for building registries
"""

__version__ = "0.4.0"

_CONVENIENCE = (
    "init",
    "get_dotenv",
    "set_config_file",
    "reset",
    "load_config",
    "set_prefix",
    "get_prefix",
    "allow_empty_env",
    "get",
    "resolve",
    "lookup",
    "is_set",
    "set",
    "save",
    "write",
    "invalidate_cache_for_file",
    "get_string",
    "get_bool",
    "get_int",
    "get_uint",
    "get_float",
    "get_duration",
    "get_time",
    "get_int_list",
    "get_string_list",
    "get_string_map",
    "get_string_map_string",
    "get_string_map_string_list",
    "get_size_in_bytes",
)


# Public API - lazy imports to keep `import dotenv_registry` cheap
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "DotEnv":
        from dotenv_registry.api.registry import DotEnv
        return DotEnv

    if name == "RegistryConfig":
        from dotenv_registry.config.settings import RegistryConfig
        return RegistryConfig

    if name in ("CacheStore", "default_store"):
        from dotenv_registry.storage import cache
        return getattr(cache, name)

    if name == "EnvFileParseError":
        from dotenv_registry.storage.dotenv_file import EnvFileParseError
        return EnvFileParseError

    if name in ("marshal", "unmarshal"):
        from dotenv_registry.api import binding
        return getattr(binding, name)

    if name in ("ResolvedValue", "ValueSource"):
        from dotenv_registry import types
        return getattr(types, name)

    # Convenience functions
    if name in _CONVENIENCE:
        from dotenv_registry.api import convenience
        return getattr(convenience, name)

    raise AttributeError(f"module 'dotenv_registry' has no attribute {name!r}")


__all__ = [
    # Main classes
    "DotEnv",
    "CacheStore",
    "RegistryConfig",
    "default_store",
    "EnvFileParseError",

    # Binding
    "marshal",
    "unmarshal",

    # Types
    "ResolvedValue",
    "ValueSource",

    # Convenience functions
    *_CONVENIENCE,

    # Version
    "__version__",
]
