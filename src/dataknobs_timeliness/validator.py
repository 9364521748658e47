"""Per-attribute timeliness validation and a fluent schema over it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError
from .parser import TemporalParser, default_parser
from .records import ErrorSink
from .restrictions import RestrictionEvaluator, normalize_restrictions
from .result import DEFAULT_MESSAGES, ValidationResult, Violation
from .types import Restriction, TemporalKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .config import TimelinessSettings
    from .records import PendingRecord

logger = logging.getLogger(__name__)

MESSAGE_SUFFIX = "_message"


def is_blank(value: Any) -> bool:
    """None, whitespace-only strings and empty collections are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


class TimelinessValidator:
    """Validate that attributes hold a valid date, time or datetime.

    Options:
        kind: ``date``, ``time`` or ``datetime`` (default)
        allow_nil: Skip attributes whose value is None
        allow_blank: Skip attributes whose value is blank
        before, after, on_or_before, on_or_after: Restriction operands
        messages: Message template overrides keyed by message name
        <name>_message: Single message override, e.g. ``before_message``
        parser: A ``TemporalParser`` (or subclass) replacing the default

    Example:
        ```python
        validator = TimelinessValidator(
            "birth_date", kind="date",
            on_or_before=lambda record: date.today(),
            on_or_after=":enrolled_on",
        )
        result = validator.validate(record)
        ```
    """

    def __init__(
        self,
        *attributes: str,
        kind: TemporalKind | str = TemporalKind.DATETIME,
        allow_nil: bool = False,
        allow_blank: bool = False,
        messages: Mapping[str, str] | None = None,
        parser: TemporalParser | None = None,
        **options: Any,
    ):
        if not attributes:
            raise ConfigurationError("At least one attribute name is required")
        self.attributes = list(attributes)
        self.kind = TemporalKind.from_value(kind)
        self.allow_nil = allow_nil
        self.allow_blank = allow_blank
        self.parser = parser or default_parser
        self.evaluator = RestrictionEvaluator(self.parser)
        self.messages = {**DEFAULT_MESSAGES, **(messages or {})}

        raw_restrictions = {}
        for key, value in options.items():
            if key in Restriction.names():
                raw_restrictions[key] = value
            elif key.endswith(MESSAGE_SUFFIX) and key[: -len(MESSAGE_SUFFIX)] in DEFAULT_MESSAGES:
                self.messages[key[: -len(MESSAGE_SUFFIX)]] = value
            else:
                raise ConfigurationError(
                    f"Unknown validation option: {key}",
                    context={"option": key, "attributes": self.attributes},
                )
        self.restrictions = normalize_restrictions(raw_restrictions)

    def validate_each(self, record: PendingRecord, attribute: str) -> list[Violation]:
        """Validate one attribute's pending value.

        An invalid value is cleared on the record (set to None) so that later
        field references to it resolve to nothing rather than to bad input.
        """
        raw_value = record.get_pending_value(attribute)

        if raw_value is None and self.allow_nil:
            return []
        if is_blank(raw_value):
            if self.allow_blank:
                return []
            return [Violation(attribute, "blank", self.messages["blank"])]

        try:
            value = self.parser.resolve(raw_value, self.kind, strict=True)
        except Exception as e:
            logger.warning(f"Parser failed on {attribute}={raw_value!r}: {e}")
            value = None

        if value is None:
            record.set_pending_value(attribute, None)
            return [Violation(
                attribute, "invalid_datetime", self.messages["invalid_datetime"], self.kind.value
            )]

        return self.evaluator.evaluate(
            value, self.kind, record, self.restrictions, self.messages, attribute
        )

    def validate(
        self, record: PendingRecord, errors: ErrorSink | None = None
    ) -> ValidationResult:
        """Validate every attribute and report violations to the error sink.

        Args:
            record: Record to read pending values from
            errors: Error sink with ``add_violation``, defaults to ``record.errors``
                when that is one

        Returns:
            ValidationResult whose value is the record

        Raises:
            ConfigurationError: If ``errors`` has no ``add_violation`` method
        """
        if errors is not None and not isinstance(errors, ErrorSink):
            raise ConfigurationError(
                f"Error sink {type(errors).__name__} has no add_violation method",
                context={"sink": type(errors).__name__},
            )
        sink = errors if errors is not None else getattr(record, "errors", None)
        result = ValidationResult.success(record)
        for attribute in self.attributes:
            for violation in self.validate_each(record, attribute):
                result.add_violation(violation)
                if isinstance(sink, ErrorSink):
                    sink.add_violation(violation)
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "attributes": list(self.attributes),
            "kind": self.kind.value,
            "allow_nil": self.allow_nil,
            "allow_blank": self.allow_blank,
            "restrictions": {r.value: repr(op) for r, op in self.restrictions.items()},
        }


def validates_timeliness_of(*attributes: str, **options: Any) -> TimelinessValidator:
    """Validator for attributes, kind ``datetime`` unless given."""
    return TimelinessValidator(*attributes, **options)


def validates_date(*attributes: str, **options: Any) -> TimelinessValidator:
    """Validate values and restrictions as dates."""
    options["kind"] = TemporalKind.DATE
    return TimelinessValidator(*attributes, **options)


def validates_time(*attributes: str, **options: Any) -> TimelinessValidator:
    """Validate values and restrictions as times of day."""
    options["kind"] = TemporalKind.TIME
    return TimelinessValidator(*attributes, **options)


def validates_datetime(*attributes: str, **options: Any) -> TimelinessValidator:
    """Validate values and restrictions as full datetimes."""
    options["kind"] = TemporalKind.DATETIME
    return TimelinessValidator(*attributes, **options)


class TimelinessSchema:
    """Fluent collection of timeliness validators for a record type.

    Validators run in the order they were added, and all of them run so that
    every violation on the record is reported.

    Example:
        ```python
        schema = (
            TimelinessSchema("person")
            .datetime("birth_date_and_time", before=date(2008, 1, 2))
            .date("birth_date", on_or_after=":birth_date_and_time")
            .time("birth_time", allow_nil=True)
        )
        result = schema.validate(Record({...}))
        ```
    """

    def __init__(self, name: str = "unnamed", settings: TimelinessSettings | None = None):
        self.name = name
        self.settings = settings
        self.validators: list[TimelinessValidator] = []
        self.description: str | None = None
        self._parser = (
            TemporalParser(settings.build_registry()) if settings is not None else default_parser
        )

    def add(self, validator: TimelinessValidator) -> TimelinessSchema:
        self.validators.append(validator)
        return self

    def field(
        self, *attributes: str, kind: TemporalKind | str = TemporalKind.DATETIME, **options: Any
    ) -> TimelinessSchema:
        """Add a validator, applying settings defaults (fluent API)."""
        if self.settings is not None:
            options.setdefault("allow_nil", self.settings.allow_nil)
            options.setdefault("allow_blank", self.settings.allow_blank)
            options["messages"] = {**self.settings.messages, **(options.get("messages") or {})}
        options.setdefault("parser", self._parser)
        return self.add(TimelinessValidator(*attributes, kind=kind, **options))

    def date(self, *attributes: str, **options: Any) -> TimelinessSchema:
        return self.field(*attributes, kind=TemporalKind.DATE, **options)

    def time(self, *attributes: str, **options: Any) -> TimelinessSchema:
        return self.field(*attributes, kind=TemporalKind.TIME, **options)

    def datetime(self, *attributes: str, **options: Any) -> TimelinessSchema:
        return self.field(*attributes, kind=TemporalKind.DATETIME, **options)

    def with_description(self, description: str) -> TimelinessSchema:
        self.description = description
        return self

    def validate(
        self, record: PendingRecord, errors: ErrorSink | None = None
    ) -> ValidationResult:
        """Run every validator against the record."""
        result = ValidationResult.success(record)
        for validator in self.validators:
            result = result.merge(validator.validate(record, errors))
        return result

    def validate_many(
        self, records: Iterable[PendingRecord], stop_on_error: bool = False
    ) -> list[ValidationResult]:
        results = []
        for record in records:
            result = self.validate(record)
            results.append(result)
            if not result.valid and stop_on_error:
                break
        return results

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "validators": [validator.to_dict() for validator in self.validators],
        }


__all__ = [
    "TimelinessValidator",
    "TimelinessSchema",
    "validates_timeliness_of",
    "validates_date",
    "validates_time",
    "validates_datetime",
    "is_blank",
]
