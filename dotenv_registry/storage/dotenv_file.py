"""
Dotenv File Storage

Reads and writes the on-disk ``KEY=VALUE`` configuration file.

File format:
    # comment
    KEY=value
    export OTHER="quoted value"
    EMPTY=

Grammar (intentionally minimal):
    - One assignment per line, split on the first separator
    - Optional leading ``export`` token on the key side
    - One level of matching ``'`` or ``"`` quotes stripped from the value
    - Blank lines and ``#`` comments ignored
    - No multiline values, escapes or interpolation

Malformed lines are skipped unless strict parsing is requested.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from filelock import FileLock

from dotenv_registry.utils.casting import to_string

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "="

_EXPORT_PREFIX = re.compile(r"^export\s+")
_QUOTES = ("'", '"')


class EnvFileParseError(ValueError):
    """A line in a config file could not be parsed (strict mode only)."""

    def __init__(self, path: str | Path, line_number: int, line: str) -> None:
        self.path = str(path)
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed line {line_number} in config file {self.path}: {line!r}")


def config_file_exists(path: str | Path) -> bool:
    """Return True if ``path`` exists and is not a directory."""
    return os.path.isfile(path)


def parse_line(line: str, separator: str = DEFAULT_SEPARATOR) -> tuple[str, str] | None:
    """
    Parse a single assignment line.

    Returns:
        ``(key, value)`` or None if the line has no separator or an empty key
    """
    key, sep, value = line.partition(separator)
    if not sep:
        return None

    key = _EXPORT_PREFIX.sub("", key.strip()).strip()
    if not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        value = value[1:-1]

    return key, value


def read_env_file(
    path: str | Path,
    separator: str = DEFAULT_SEPARATOR,
    *,
    strict: bool = False,
) -> dict[str, str]:
    """
    Read a config file into a flat mapping.

    Args:
        path: Config file path
        separator: Key/value separator
        strict: Raise on malformed lines instead of skipping them

    Returns:
        Mapping of key to value, in file order

    Raises:
        FileNotFoundError: If the file does not exist or is a directory
        EnvFileParseError: If ``strict`` and a line is malformed
        OSError: If the file cannot be read
    """
    if not config_file_exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise OSError(f"Failed to read config file {path}: {e}") from e

    values: dict[str, str] = {}
    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        parsed = parse_line(line, separator)
        if parsed is None:
            if strict:
                raise EnvFileParseError(path, line_number, line)
            logger.debug(f"Skipping malformed line {line_number} in {path}")
            continue

        key, value = parsed
        values[key] = value

    return values


def serialize_env(
    values: Mapping[str, Any],
    separator: str = DEFAULT_SEPARATOR,
    *,
    sort_keys: bool = False,
) -> str:
    """
    Render a mapping as config file text.

    Quotes are never added back, so values with surrounding whitespace or
    keys containing the separator do not survive a round trip. Values are
    written verbatim, so a line break inside one starts a new assignment;
    ``DotEnv.set`` rejects such values.
    """
    keys = sorted(values) if sort_keys else list(values)
    return "".join(f"{key}{separator}{to_string(values[key])}\n" for key in keys)


def write_env_file(
    path: str | Path,
    data: str,
    *,
    lock: bool = False,
    lock_timeout: float = 30.0,
) -> None:
    """
    Overwrite ``path`` with ``data``, creating parent directories as needed.

    Args:
        path: Config file path
        data: Full file content
        lock: Hold a ``<path>.lock`` file lock while writing
        lock_timeout: Seconds to wait for the file lock

    Raises:
        OSError: If the directory cannot be created or the file written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if lock:
            with FileLock(f"{path}.lock", timeout=lock_timeout):
                path.write_text(data, encoding="utf-8")
        else:
            path.write_text(data, encoding="utf-8")
    except OSError as e:
        raise OSError(f"Failed to write config file {path}: {e}") from e

    logger.debug(f"Wrote {len(data)} bytes to {path}")
