"""Exception hierarchy for the dataknobs_timeliness package.

Parsing and restriction failures never leave the package as exceptions during a
validation pass: the parser collapses them to ``None`` and the evaluator turns
them into violations. They are raised internally so that each failure carries
a context dictionary for logging, and raised to the caller only for
configuration or format registry misuse.

Example:
    ```python
    from dataknobs_timeliness.exceptions import TimelinessError

    try:
        registry.remove_formats("date", "yyyy-dd-mm")
    except TimelinessError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class TimelinessError(Exception):
    """Base exception for the timeliness package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (kind, format, value, etc.)
    """

    def __init__(self, message: str, context: Dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}
        self.details = self.context


class ConfigurationError(TimelinessError):
    """Raised when settings or validator options are invalid.

    Example:
        ```python
        raise ConfigurationError(
            "Unknown temporal kind",
            context={"kind": "week", "allowed": ["date", "time", "datetime"]}
        )
        ```
    """

    pass


class FormatError(TimelinessError):
    """Raised when a format string cannot be compiled or registered."""

    pass


class ParseError(TimelinessError):
    """Base class for failures turning a raw value into a temporal value."""

    pass


class InvalidFormatError(ParseError):
    """Raised when raw text matches no registered format for a kind."""

    def __init__(self, value: Any, kind: str):
        self.value = value
        self.kind = kind
        super().__init__(
            f"{value!r} is not a valid {kind}",
            context={"value": value, "kind": kind},
        )


class InvalidCalendarError(ParseError):
    """Raised when matched components form an impossible date or time."""

    def __init__(self, components: Any, kind: str, reason: str):
        self.components = components
        self.kind = kind
        super().__init__(
            f"Invalid {kind} components {tuple(components)}: {reason}",
            context={"components": tuple(components), "kind": kind, "reason": reason},
        )


class RestrictionEvaluationError(TimelinessError):
    """Raised when a restriction operand cannot be resolved or compared."""

    def __init__(self, restriction: str, error: Exception):
        self.restriction = restriction
        self.error = error
        super().__init__(
            f"Restriction '{restriction}' could not be evaluated: {error!s}",
            context={"restriction": restriction, "error_type": type(error).__name__},
        )


__all__ = [
    "TimelinessError",
    "ConfigurationError",
    "FormatError",
    "ParseError",
    "InvalidFormatError",
    "InvalidCalendarError",
    "RestrictionEvaluationError",
]
