"""Human-readable byte sizes ("10kb", "2 MB", "1GB")."""

from __future__ import annotations

from dotenv_registry.utils.casting import to_int

_MULTIPLIERS = {
    "k": 1 << 10,
    "m": 1 << 20,
    "g": 1 << 30,
}


def parse_size_in_bytes(size: str) -> int:
    """
    Convert a size string to a number of bytes.

    A trailing ``b``/``B`` may be preceded by a ``k``, ``m`` or ``g`` unit.
    Anything unparseable, and negative sizes, give 0.

    Example:
        >>> parse_size_in_bytes("10kb")
        10240
        >>> parse_size_in_bytes("512")
        512
    """
    size = size.strip()
    last = len(size) - 1
    multiplier = 1

    if last > 0 and size[last] in "bB":
        if last > 1:
            unit = size[last - 1].lower()
            if unit in _MULTIPLIERS:
                multiplier = _MULTIPLIERS[unit]
                size = size[: last - 1].strip()
            else:
                size = size[:last].strip()

    return max(to_int(size), 0) * multiplier
