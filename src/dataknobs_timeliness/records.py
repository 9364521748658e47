"""Host record collaborator: pending attribute values and an error sink.

Validation reads the *pending* value of an attribute, the value assigned but
not yet committed, both for the attribute under test and for restrictions
that refer to sibling attributes. ``Record`` keeps pending and persisted
values apart so that this distinction is explicit.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .result import Violation


@runtime_checkable
class PendingRecord(Protocol):
    """What the validator needs from a host record."""

    def get_pending_value(self, name: str) -> Any:
        """Current value of an attribute before it is committed."""
        ...

    def set_pending_value(self, name: str, value: Any) -> None:
        ...


@runtime_checkable
class ErrorSink(Protocol):
    """Where the validator reports violations, e.g. ``Errors``."""

    def add_violation(self, violation: Violation) -> None:
        ...


class Errors:
    """Error messages collected per attribute during a validation pass.

    Example:
        ```python
        errors = Errors()
        errors.add("birth_date", "is not a valid date")
        errors.on("birth_date")  # "is not a valid date"
        errors.full_messages()  # ["Birth date is not a valid date"]
        ```
    """

    def __init__(self) -> None:
        self._messages: OrderedDict[str, list[str]] = OrderedDict()

    def add(self, attribute: str, message: str) -> None:
        self._messages.setdefault(attribute, []).append(message)

    def add_violation(self, violation: Violation) -> None:
        self.add(violation.attribute, violation.message)

    def on(self, attribute: str) -> str | list[str] | None:
        """Messages for an attribute: one string, a list if several, else None."""
        messages = self._messages.get(attribute)
        if not messages:
            return None
        if len(messages) == 1:
            return messages[0]
        return list(messages)

    def get(self, attribute: str) -> list[str]:
        return list(self._messages.get(attribute, []))

    def full_messages(self) -> list[str]:
        return [
            f"{attribute.replace('_', ' ').capitalize()} {message}"
            for attribute, messages in self._messages.items()
            for message in messages
        ]

    def clear(self) -> None:
        self._messages.clear()

    def is_empty(self) -> bool:
        return not self._messages

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for attribute, messages in self._messages.items():
            for message in messages:
                yield attribute, message

    def __contains__(self, attribute: str) -> bool:
        return bool(self._messages.get(attribute))


class Record:
    """A dict-backed record with pending and persisted attribute values.

    Assignments are pending until ``commit`` is called. Reads through
    ``record[name]`` or ``get_pending_value`` return the pending value when
    one exists and fall back to the persisted one.

    Example:
        ```python
        record = Record({"birth_date": "1980-01-31"})
        record.commit()
        record["birth_date"] = "1980-02-30"

        record.get_pending_value("birth_date")    # "1980-02-30"
        record.get_persisted_value("birth_date")  # "1980-01-31"
        ```
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self._persisted: dict[str, Any] = {}
        self._pending: dict[str, Any] = dict(data or {})
        self.errors = Errors()

    def get_pending_value(self, name: str, default: Any = None) -> Any:
        if name in self._pending:
            return self._pending[name]
        return self._persisted.get(name, default)

    def set_pending_value(self, name: str, value: Any) -> None:
        self._pending[name] = value

    def get_persisted_value(self, name: str, default: Any = None) -> Any:
        return self._persisted.get(name, default)

    def has_changes(self) -> bool:
        return bool(self._pending)

    def changed(self) -> list[str]:
        return list(self._pending)

    def commit(self) -> None:
        """Persist all pending values."""
        self._persisted.update(self._pending)
        self._pending.clear()

    def rollback(self) -> None:
        """Discard pending values."""
        self._pending.clear()

    def is_valid(self) -> bool:
        return self.errors.is_empty()

    def to_dict(self) -> dict[str, Any]:
        data = dict(self._persisted)
        data.update(self._pending)
        return data

    def __getitem__(self, name: str) -> Any:
        return self.get_pending_value(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set_pending_value(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self._pending or name in self._persisted

    def __repr__(self) -> str:
        return f"Record({self.to_dict()!r})"


__all__ = ["PendingRecord", "ErrorSink", "Errors", "Record"]
