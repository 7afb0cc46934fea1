"""
Type Definitions

Pydantic models shared across the package.
"""

from dotenv_registry.types.results import ResolvedValue, ValueSource

__all__ = ["ResolvedValue", "ValueSource"]
