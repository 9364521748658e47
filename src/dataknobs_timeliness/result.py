"""Violation and validation result types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_MESSAGES: dict[str, str] = {
    "blank": "can't be blank",
    "invalid_datetime": "is not a valid {value}",
    "before": "must be before {value}",
    "after": "must be after {value}",
    "on_or_before": "must be on or before {value}",
    "on_or_after": "must be on or after {value}",
    "restriction_error": "restriction '{value}' value was invalid",
}


@dataclass(frozen=True)
class Violation:
    """A single failed check on one attribute.

    Attributes:
        attribute: Name of the attribute that failed
        key: ``invalid_datetime``, ``blank``, ``restriction_error`` or a
            restriction name
        template: Message template with a ``{value}`` placeholder
        parameter: Value substituted into the template
    """

    attribute: str
    key: str
    template: str
    parameter: Any = None

    @property
    def message(self) -> str:
        return self.template.format(value=self.parameter)

    def full_message(self) -> str:
        """Message prefixed with the humanized attribute name."""
        return f"{self.attribute.replace('_', ' ').capitalize()} {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating one or more attributes of a record.

    ``errors`` holds rendered messages, ``violations`` the structured form
    they were rendered from.
    """

    valid: bool
    value: Any
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine results for composite validation.

        Args:
            other: Another ValidationResult to merge with this one

        Returns:
            New ValidationResult with combined state
        """
        return ValidationResult(
            valid=self.valid and other.valid,
            value=other.value if other.valid else self.value,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
            violations=self.violations + other.violations,
        )

    def add_violation(self, violation: Violation) -> ValidationResult:
        """Record a violation and mark as invalid (fluent API)."""
        self.violations.append(violation)
        self.errors.append(violation.full_message())
        self.valid = False
        return self

    def add_warning(self, warning: str) -> ValidationResult:
        self.warnings.append(warning)
        return self

    def errors_on(self, attribute: str) -> list[str]:
        """Messages of the violations for one attribute."""
        return [v.message for v in self.violations if v.attribute == attribute]

    @classmethod
    def success(cls, value: Any, warnings: list[str] | None = None) -> ValidationResult:
        return cls(valid=True, value=value, errors=[], warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        value: Any,
        violations: list[Violation],
        warnings: list[str] | None = None,
    ) -> ValidationResult:
        """Create a failed result from a list of violations."""
        return cls(
            valid=False,
            value=value,
            errors=[v.full_message() for v in violations],
            warnings=warnings or [],
            violations=list(violations),
        )


__all__ = ["DEFAULT_MESSAGES", "Violation", "ValidationResult"]
