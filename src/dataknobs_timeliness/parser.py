"""Temporal parser: raw values to normalized datetimes.

``resolve`` is the entry point used by validation. It never raises for bad
input: an unmatched string and a matched but impossible date both come back
as ``None``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any

from .exceptions import InvalidCalendarError, InvalidFormatError, ParseError
from .formats import FormatRegistry, default_registry
from .types import EPOCH_DATE, Components, TemporalKind

logger = logging.getLogger(__name__)


def extract_components(
    text: str,
    kind: TemporalKind | str,
    bounded: bool = True,
    registry: FormatRegistry | None = None,
) -> Components | None:
    """Extract components from text using the first matching format.

    Args:
        text: Raw text, surrounding whitespace is ignored
        kind: Kind whose formats are tried
        bounded: If True the format must match the entire trimmed text,
            otherwise a match anywhere in the text is accepted
        registry: Format registry, defaults to the module level registry

    Returns:
        Extracted components, or None if no format matched
    """
    registry = registry or default_registry
    text = text.strip()
    for spec in registry.patterns_for(kind):
        match = spec.match(text, bounded)
        if match is not None:
            return spec.extract(match)
    return None


def construct(components: Components, kind: TemporalKind | str) -> datetime:
    """Build a datetime from components, applying the kind's zeroing rule.

    Time values are placed on ``EPOCH_DATE`` and date values at midnight.

    Raises:
        InvalidCalendarError: If the date or time of day is out of range
    """
    kind = TemporalKind.from_value(kind)
    if kind is TemporalKind.TIME:
        components = components._replace(
            year=EPOCH_DATE.year, month=EPOCH_DATE.month, day=EPOCH_DATE.day
        )
    elif kind is TemporalKind.DATE:
        components = components._replace(hour=0, minute=0, second=0, fraction=0)

    try:
        return datetime(*components)
    except (ValueError, OverflowError) as e:
        raise InvalidCalendarError(components, kind.value, str(e)) from e


def to_datetime(value: date | time | datetime, kind: TemporalKind | str) -> datetime:
    """Normalize a native temporal value for a kind without parsing."""
    kind = TemporalKind.from_value(kind)
    if isinstance(value, datetime):
        if kind is TemporalKind.DATE:
            return datetime.combine(value.date(), time(), tzinfo=value.tzinfo)
        if kind is TemporalKind.TIME:
            return datetime.combine(EPOCH_DATE, value.timetz())
        return value
    if isinstance(value, date):
        if kind is TemporalKind.TIME:
            return datetime.combine(EPOCH_DATE, time())
        return datetime.combine(value, time())
    if isinstance(value, time):
        return datetime.combine(EPOCH_DATE, value)
    raise TypeError(f"Not a temporal value: {type(value).__name__}")


def to_granularity(value: date | time | datetime, kind: TemporalKind | str) -> date | datetime:
    """Convert a value to the form restrictions are compared in.

    Dates compare as ``date``; times and datetimes compare as ``datetime``,
    with times on the shared epoch date so only the time of day matters.
    """
    kind = TemporalKind.from_value(kind)
    if kind is TemporalKind.DATE:
        return to_datetime(value, kind).date()
    return to_datetime(value, kind)


def is_temporal(value: Any) -> bool:
    return isinstance(value, (date, time, datetime))


class TemporalParser:
    """Resolve raw values to datetimes using a format registry.

    Subclass and override ``resolve`` to plug in a different parsing
    algorithm; it must return None for invalid input and a datetime
    otherwise.
    """

    def __init__(self, registry: FormatRegistry | None = None):
        self.registry = registry or default_registry

    def parse(self, raw_value: Any, kind: TemporalKind | str, strict: bool = True) -> datetime:
        """Parse a raw value into a datetime, raising on failure.

        Raises:
            InvalidFormatError: If no format matches
            InvalidCalendarError: If the matched components are impossible
        """
        kind = TemporalKind.from_value(kind)
        if is_temporal(raw_value):
            return to_datetime(raw_value, kind)
        if not isinstance(raw_value, str):
            raise InvalidFormatError(raw_value, kind.value)

        components = extract_components(raw_value, kind, bounded=strict, registry=self.registry)
        if components is None:
            raise InvalidFormatError(raw_value, kind.value)
        return construct(components, kind)

    def resolve(
        self, raw_value: Any, kind: TemporalKind | str, strict: bool = True
    ) -> datetime | None:
        """Parse a raw value, returning None when it is not a valid value.

        Args:
            raw_value: Text or a native date, time or datetime
            kind: Kind to parse as
            strict: Require the format to match the whole text

        Returns:
            The parsed datetime or None
        """
        try:
            return self.parse(raw_value, kind, strict)
        except ParseError as e:
            logger.debug(f"Could not resolve {raw_value!r}: {e}")
            return None


default_parser = TemporalParser()


def resolve(raw_value: Any, kind: TemporalKind | str, strict: bool = True) -> datetime | None:
    """Resolve a raw value with the default parser."""
    return default_parser.resolve(raw_value, kind, strict)


__all__ = [
    "TemporalParser",
    "default_parser",
    "resolve",
    "extract_components",
    "construct",
    "to_datetime",
    "to_granularity",
    "is_temporal",
]
