"""Restriction evaluation: ordering checks against resolved operands.

A restriction operand is one of four variants:

- ``LiteralOperand``: a date, time or datetime used as is
- ``FieldOperand``: the pending value of another attribute on the record
- ``CallableOperand``: a function called with the record, e.g. for "now"
- ``TextOperand``: text parsed loosely (unbounded) with the validated kind

Both sides are converted to the kind's granularity before comparing: dates
compare as dates, times as times of day on the epoch date, datetimes in full.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, Union

from .exceptions import ConfigurationError, RestrictionEvaluationError
from .parser import TemporalParser, default_parser, is_temporal, to_granularity
from .result import DEFAULT_MESSAGES, Violation
from .types import Restriction, TemporalKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from .records import PendingRecord

logger = logging.getLogger(__name__)

FIELD_PREFIX = ":"


@dataclass(frozen=True)
class LiteralOperand:
    value: date | time | datetime


@dataclass(frozen=True)
class FieldOperand:
    """Refers to another attribute on the record being validated."""

    name: str


@dataclass(frozen=True)
class CallableOperand:
    """Computed at validation time; called with the record."""

    function: Callable[[Any], Any]


@dataclass(frozen=True)
class TextOperand:
    text: Any


Operand = Union[LiteralOperand, FieldOperand, CallableOperand, TextOperand]
OPERAND_TYPES = (LiteralOperand, FieldOperand, CallableOperand, TextOperand)


def field_ref(name: str) -> FieldOperand:
    """Restriction operand reading the pending value of attribute ``name``."""
    return FieldOperand(name)


def operand_from(value: Any) -> Operand:
    """Classify a raw restriction value.

    Strings starting with ``:`` (``":birth_date"``) name another attribute,
    which lets configuration files express field references.
    """
    if isinstance(value, OPERAND_TYPES):
        return value
    if is_temporal(value):
        return LiteralOperand(value)
    if callable(value):
        return CallableOperand(value)
    if isinstance(value, str) and value.startswith(FIELD_PREFIX):
        return FieldOperand(value[len(FIELD_PREFIX):])
    return TextOperand(value)


def normalize_restrictions(
    restrictions: Mapping[Restriction | str, Any] | None,
) -> dict[Restriction, Operand]:
    """Map restriction names to operands, dropping ``None`` values.

    Raises:
        ConfigurationError: For an unknown restriction name
    """
    normalized: dict[Restriction, Operand] = {}
    for name, value in (restrictions or {}).items():
        try:
            restriction = name if isinstance(name, Restriction) else Restriction(name)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown restriction: {name!r}",
                context={"restriction": name, "allowed": Restriction.names()},
            ) from e
        if value is not None:
            normalized[restriction] = operand_from(value)
    return normalized


def display_value(value: date | datetime, kind: TemporalKind) -> date | time | datetime:
    """The operand as shown in messages: a date, a time of day or a datetime."""
    if kind is TemporalKind.TIME and isinstance(value, datetime):
        return value.time()
    return value


class RestrictionEvaluator:
    """Check a parsed value against before/after restrictions.

    Each restriction is evaluated independently, in ``Restriction`` order.
    An operand that resolves to None skips its restriction silently, and an
    exception while resolving or comparing one restriction becomes a
    ``restriction_error`` violation for that restriction only.

    Example:
        ```python
        evaluator = RestrictionEvaluator()
        violations = evaluator.evaluate(
            datetime(2008, 1, 3),
            "date",
            record,
            {"on_or_before": datetime(2008, 1, 2, 23, 59, 59)},
            attribute="birth_date",
        )
        violations[0].message  # "must be on or before 2008-01-02"
        ```
    """

    def __init__(self, parser: TemporalParser | None = None):
        self.parser = parser or default_parser

    def resolve_operand(
        self, operand: Operand, kind: TemporalKind, record: PendingRecord | None
    ) -> date | time | datetime | None:
        """Resolve an operand to a temporal value, or None if it has none."""
        if isinstance(operand, LiteralOperand):
            return operand.value
        if isinstance(operand, FieldOperand):
            if record is None:
                raise ValueError(f"No record to read field '{operand.name}' from")
            return self._coerce(record.get_pending_value(operand.name), kind)
        if isinstance(operand, CallableOperand):
            return self._coerce(operand.function(record), kind)
        if isinstance(operand, TextOperand):
            return self.parser.resolve(operand.text, kind, strict=False)
        raise TypeError(f"Unsupported restriction operand: {operand!r}")

    def _coerce(self, value: Any, kind: TemporalKind) -> date | time | datetime | None:
        if value is None or is_temporal(value):
            return value
        return self.parser.resolve(value, kind, strict=False)

    def evaluate(
        self,
        value: date | time | datetime,
        kind: TemporalKind | str,
        record: PendingRecord | None,
        restrictions: Mapping[Restriction | str, Any] | None,
        messages: Mapping[str, str] | None = None,
        attribute: str = "value",
    ) -> list[Violation]:
        """Evaluate all restrictions against a parsed value.

        Args:
            value: Parsed value of the attribute under test
            kind: Kind the attribute is validated as
            record: Record that field references and callables read from
            restrictions: Restriction names mapped to raw values or operands
            messages: Message template overrides keyed by restriction name
            attribute: Attribute name reported on violations

        Returns:
            One violation per failed restriction, in restriction order
        """
        kind = TemporalKind.from_value(kind)
        templates = {**DEFAULT_MESSAGES, **(messages or {})}
        operands = normalize_restrictions(restrictions)
        compared = to_granularity(value, kind)

        violations: list[Violation] = []
        for restriction in Restriction:
            operand = operands.get(restriction)
            if operand is None:
                continue
            try:
                target = self.resolve_operand(operand, kind, record)
                if target is None:
                    logger.debug(
                        f"Skipping '{restriction.value}' on {attribute}: operand {operand!r} did not resolve"
                    )
                    continue
                target = to_granularity(target, kind)
                if not restriction.compare(compared, target):
                    violations.append(Violation(
                        attribute=attribute,
                        key=restriction.value,
                        template=templates[restriction.value],
                        parameter=display_value(target, kind),
                    ))
            except Exception as e:
                error = RestrictionEvaluationError(restriction.value, e)
                logger.warning(f"{attribute}: {error}")
                violations.append(Violation(
                    attribute=attribute,
                    key="restriction_error",
                    template=templates["restriction_error"],
                    parameter=restriction.value,
                ))
        return violations


default_evaluator = RestrictionEvaluator()


def evaluate(
    value: date | time | datetime,
    kind: TemporalKind | str,
    record: PendingRecord | None,
    restrictions: Mapping[Restriction | str, Any] | None,
    messages: Mapping[str, str] | None = None,
    attribute: str = "value",
) -> list[Violation]:
    """Evaluate restrictions with the default evaluator."""
    return default_evaluator.evaluate(value, kind, record, restrictions, messages, attribute)


__all__ = [
    "LiteralOperand",
    "FieldOperand",
    "CallableOperand",
    "TextOperand",
    "Operand",
    "field_ref",
    "operand_from",
    "normalize_restrictions",
    "RestrictionEvaluator",
    "default_evaluator",
    "evaluate",
]
