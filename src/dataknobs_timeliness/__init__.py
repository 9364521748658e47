"""DataKnobs Timeliness Package - date, time and datetime validation.

The `dataknobs-timeliness` package checks that raw attribute values are valid
dates, times or datetimes and that they satisfy ordering restrictions against
literals, values computed at validation time, or sibling attributes.

Modules:
    types: TemporalKind, Restriction and the Components tuple
    formats: Token format compilation and the per-kind FormatRegistry
    parser: Parsing raw values into datetimes (resolve, TemporalParser)
    restrictions: Operands and the RestrictionEvaluator
    records: The Record collaborator and Errors sink
    validator: TimelinessValidator, validates_* helpers and TimelinessSchema
    config: TimelinessSettings loaded from dicts, YAML or JSON
    factory: Building schemas from configuration
    exceptions: Custom exceptions for error handling

Quick Examples:

    Parse values:

    ```python
    from dataknobs_timeliness import resolve

    resolve("1980-02-29", "date")   # datetime(1980, 2, 29, 0, 0)
    resolve("1981-02-29", "date")   # None
    resolve("6:30pm", "time")       # datetime(2000, 1, 1, 18, 30)
    ```

    Validate a record:

    ```python
    from datetime import date
    from dataknobs_timeliness import Record, TimelinessSchema

    schema = (
        TimelinessSchema("person")
        .datetime("birth_date_and_time", before=date(2008, 1, 2))
        .date("birth_date", on_or_after=":birth_date_and_time")
        .time("birth_time", after="06:00", before="23:00", allow_nil=True)
    )

    person = Record({"birth_date_and_time": "2008-01-03 00:00:00", "birth_date": "2008-01-01"})
    result = schema.validate(person)
    person.errors.on("birth_date_and_time")  # "must be before 2008-01-02 00:00:00"
    ```
"""

from .config import TimelinessSettings
from .exceptions import (
    ConfigurationError,
    FormatError,
    InvalidCalendarError,
    InvalidFormatError,
    ParseError,
    RestrictionEvaluationError,
    TimelinessError,
)
from .factory import TimelinessSchemaFactory, timeliness_schema_factory
from .formats import FormatRegistry, FormatSpec, compile_format, default_registry, patterns_for
from .parser import TemporalParser, construct, extract_components, resolve, to_granularity
from .records import Errors, ErrorSink, PendingRecord, Record
from .restrictions import (
    CallableOperand,
    FieldOperand,
    LiteralOperand,
    RestrictionEvaluator,
    TextOperand,
    evaluate,
    field_ref,
)
from .result import DEFAULT_MESSAGES, ValidationResult, Violation
from .types import EPOCH_DATE, Components, Restriction, TemporalKind
from .validator import (
    TimelinessSchema,
    TimelinessValidator,
    validates_date,
    validates_datetime,
    validates_time,
    validates_timeliness_of,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "TemporalKind",
    "Restriction",
    "Components",
    "EPOCH_DATE",
    # Formats
    "FormatRegistry",
    "FormatSpec",
    "compile_format",
    "default_registry",
    "patterns_for",
    # Parsing
    "TemporalParser",
    "resolve",
    "extract_components",
    "construct",
    "to_granularity",
    # Restrictions
    "RestrictionEvaluator",
    "evaluate",
    "field_ref",
    "LiteralOperand",
    "FieldOperand",
    "CallableOperand",
    "TextOperand",
    # Results
    "Violation",
    "ValidationResult",
    "DEFAULT_MESSAGES",
    # Records
    "Record",
    "PendingRecord",
    "ErrorSink",
    "Errors",
    # Validation
    "TimelinessValidator",
    "TimelinessSchema",
    "validates_timeliness_of",
    "validates_date",
    "validates_time",
    "validates_datetime",
    # Configuration
    "TimelinessSettings",
    "TimelinessSchemaFactory",
    "timeliness_schema_factory",
    # Exceptions
    "TimelinessError",
    "ConfigurationError",
    "FormatError",
    "ParseError",
    "InvalidFormatError",
    "InvalidCalendarError",
    "RestrictionEvaluationError",
]
