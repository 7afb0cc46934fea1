"""
Lenient Value Casting

Coerces raw registry values (strings read from a file or environment, or
whatever was passed to ``DotEnv.set``) into concrete Python types.

Every caster is total: when a value cannot be coerced the zero value of the
target type is returned instead of raising. Callers that need to detect bad
input should validate the raw value themselves (see ``DotEnv.resolve``).
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from pydantic import TypeAdapter, ValidationError

_BOOL = TypeAdapter(bool)
_INT = TypeAdapter(int)
_FLOAT = TypeAdapter(float)
_DATETIME = TypeAdapter(datetime)

# Go-style duration units, expressed in nanoseconds
_DURATION_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def to_string(value: Any) -> str:
    """Render a raw value the way it is written back to a config file."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return json.dumps(dict(value), default=str)
    if isinstance(value, (list, tuple, set)):
        return " ".join(to_string(item) for item in value)
    return str(value)


def to_bool(value: Any) -> bool:
    """Accepts ``1/0``, ``true/false``, ``yes/no``, ``on/off`` (any case)."""
    if isinstance(value, str):
        value = value.strip()
    try:
        return _BOOL.validate_python(value)
    except ValidationError:
        return False


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        value = value.strip()
        # strconv-style base prefixes: 0x1f, 0o17, 0b101
        if re.fullmatch(r"[+-]?0[xXoObB][0-9a-fA-F_]+", value):
            try:
                return int(value, 0)
            except ValueError:
                return 0
    try:
        return _INT.validate_python(value)
    except ValidationError:
        return 0


def to_uint(value: Any) -> int:
    """Like ``to_int`` but negative values collapse to 0."""
    return max(to_int(value), 0)


def to_float(value: Any) -> float:
    if isinstance(value, str):
        value = value.strip()
    try:
        return _FLOAT.validate_python(value)
    except ValidationError:
        return 0.0


def parse_duration(text: str) -> timedelta:
    """
    Parse a Go-style duration string such as ``"1h30m"`` or ``"-1.5s"``.

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = text.strip()
    if not text:
        raise ValueError("empty duration")

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    total_ns = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ValueError(f"invalid duration: {text!r}")
        total_ns += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration: {text!r}")

    return timedelta(microseconds=sign * total_ns / 1_000)


def format_duration(value: timedelta) -> str:
    """Inverse of ``parse_duration`` at microsecond resolution."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000_000:
        if micros % 1_000 == 0:
            return f"{sign}{micros // 1_000}ms"
        return f"{sign}{micros}us"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = rest / 1_000_000

    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    out += f"{seconds:g}s"
    return out


def to_duration(value: Any) -> timedelta:
    """
    Coerce to ``timedelta``.

    Strings use Go duration syntax; a bare number (string or int) is read as
    nanoseconds. Floats are read as seconds.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        return timedelta(0)
    if isinstance(value, int):
        return timedelta(microseconds=value / 1_000)
    if isinstance(value, float):
        return timedelta(seconds=value)
    if isinstance(value, str):
        text = value.strip()
        if re.fullmatch(r"[+-]?\d+", text):
            return timedelta(microseconds=int(text) / 1_000)
        try:
            return parse_duration(text)
        except ValueError:
            return timedelta(0)
    return timedelta(0)


def to_time(value: Any) -> datetime:
    """Coerce to ``datetime`` (ISO 8601 or unix timestamp); epoch on failure."""
    if isinstance(value, str):
        value = value.strip()
    try:
        return _DATETIME.validate_python(value)
    except ValidationError:
        return datetime(1970, 1, 1)


def to_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple, set)):
        return [to_string(item) for item in value]
    return []


def to_int_list(value: Any) -> list[int]:
    """Whole list or nothing: one bad element yields an empty list."""
    items: list[Any]
    if isinstance(value, str):
        items = value.replace(",", " ").split()
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return []

    result = []
    for item in items:
        if isinstance(item, str):
            item = item.strip()
        try:
            result.append(_INT.validate_python(item))
        except ValidationError:
            return []
    return result


def _as_mapping(value: Any) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    if isinstance(value, (str, bytes)):
        try:
            decoded = json.loads(value)
        except ValueError:
            return {}
        if isinstance(decoded, dict):
            return decoded
    return {}


def to_string_map(value: Any) -> dict[str, Any]:
    return _as_mapping(value)


def to_string_map_string(value: Any) -> dict[str, str]:
    return {k: to_string(v) for k, v in _as_mapping(value).items()}


def to_string_map_string_list(value: Any) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for key, item in _as_mapping(value).items():
        if isinstance(item, (list, tuple, set)):
            result[key] = to_string_list(item)
        else:
            result[key] = [to_string(item)]
    return result
