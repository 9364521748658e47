"""Core value types shared by the format registry, parser and evaluator."""

from __future__ import annotations

import operator
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable


EPOCH_DATE = date(2000, 1, 1)
"""Dummy date that time-only values are placed on."""


class TemporalKind(Enum):
    """The kind of temporal value being validated.

    The kind selects the format set used for parsing, which components are
    zeroed after extraction, and the granularity restrictions compare at.

    Attributes:
        DATE: Calendar date only, time of day is discarded
        TIME: Time of day only, placed on ``EPOCH_DATE``
        DATETIME: Full timestamp
    """

    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"

    @classmethod
    def from_value(cls, value: TemporalKind | str) -> TemporalKind:
        """Coerce a kind name (case-insensitive) or member to a TemporalKind.

        Raises:
            ConfigurationError: If the name is not a known kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown temporal kind: {value!r}",
                context={"kind": value, "allowed": [k.value for k in cls]},
            ) from e


class Components(NamedTuple):
    """The seven extracted components of a temporal value.

    ``fraction`` holds microseconds. Every slot is always populated, using 0
    for anything the matched format did not capture.
    """

    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    fraction: int = 0


class Restriction(Enum):
    """Ordering restrictions, declared in evaluation order."""

    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "on_or_before"
    ON_OR_AFTER = "on_or_after"

    @property
    def compare(self) -> Callable[[Any, Any], bool]:
        """Predicate the validated value must satisfy against the operand."""
        return _OPERATORS[self]

    @classmethod
    def names(cls) -> list[str]:
        return [r.value for r in cls]


_OPERATORS = {
    Restriction.BEFORE: operator.lt,
    Restriction.AFTER: operator.gt,
    Restriction.ON_OR_BEFORE: operator.le,
    Restriction.ON_OR_AFTER: operator.ge,
}


__all__ = ["EPOCH_DATE", "TemporalKind", "Components", "Restriction"]
