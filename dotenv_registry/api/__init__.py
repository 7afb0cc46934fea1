"""
Public API

Modules:
    registry: DotEnv registry class
    binding: pydantic model marshal/unmarshal
    convenience: Module-level functions over a default registry
"""

from dotenv_registry.api.binding import marshal, unmarshal
from dotenv_registry.api.registry import DotEnv

__all__ = ["DotEnv", "marshal", "unmarshal"]
