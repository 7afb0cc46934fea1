"""
Utility Functions

Helpers used by the typed accessors and struct binding.

Modules:
    casting: Lenient coercion of raw values to concrete types
    size: Human-readable byte size parsing
"""

from dotenv_registry.utils.casting import (
    format_duration,
    parse_duration,
    to_bool,
    to_duration,
    to_float,
    to_int,
    to_int_list,
    to_string,
    to_string_list,
    to_string_map,
    to_string_map_string,
    to_string_map_string_list,
    to_time,
    to_uint,
)
from dotenv_registry.utils.size import parse_size_in_bytes

__all__ = [
    "format_duration",
    "parse_duration",
    "parse_size_in_bytes",
    "to_bool",
    "to_duration",
    "to_float",
    "to_int",
    "to_int_list",
    "to_string",
    "to_string_list",
    "to_string_map",
    "to_string_map_string",
    "to_string_map_string_list",
    "to_time",
    "to_uint",
]
