"""
Result Types

Models returned by the resolver.

    - ValueSource: Which source produced a value
    - ResolvedValue: Tagged result of resolving one key
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ValueSource(str, Enum):
    """Where a resolved value came from."""

    ENVIRONMENT = "environment"
    FILE = "file"
    NONE = "none"


class ResolvedValue(BaseModel):
    """
    Result of resolving a key against environment and config file.

    Attributes:
        key: The transformed key that was looked up (prefixed, uppercase)
        value: Raw value; empty string when absent
        present: Whether a usable value was found
        source: Source that decided the result

    An empty environment variable that is not allowed still decides the
    result (``source=ENVIRONMENT``) but is reported as not present.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    value: Any = ""
    present: bool = False
    source: ValueSource = ValueSource.NONE

    def __bool__(self) -> bool:
        return self.present
