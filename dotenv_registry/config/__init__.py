"""
Configuration System

Defaults for constructing registries, with a layered approach.

Configuration Priority (highest to lowest):
    1. Programmatic (passed to RegistryConfig())
    2. Environment variables (DOTENV_REGISTRY_* prefix)
    3. Built-in defaults

RegistryConfig.from_file() reads the same options from a TOML file.

Modules:
    settings: RegistryConfig class
"""

from dotenv_registry.config.settings import RegistryConfig

__all__ = ["RegistryConfig"]
