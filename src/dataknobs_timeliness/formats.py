"""Format registry: ordered, pre-compiled textual formats per temporal kind.

Formats are written with tokens rather than raw regular expressions::

    yyyy  4 digit year            yy    2 or 4 digit year
    mmm   month name or abbr.     mm    2 digit month     m   1-2 digit month
    ddd   weekday name (ignored)  dd    2 digit day       d   1-2 digit day
    hh    2 digit hour            h     1-2 digit hour
    nn    2 digit minute          n     1-2 digit minute
    ss    2 digit second          s     1-2 digit second
    u     fraction of a second, 1-6 digits
    ampm  meridian: am, pm, a.m., p.m. (any case)
    _     optional single space

Any other character matches itself. Each format is compiled once into a
``FormatSpec`` pairing the regular expression with an extractor that maps the
captured groups onto a full seven slot ``Components`` tuple.

Lists are tried in order and the first match wins, so formats that could be
mistaken for a prefix of a longer one (``h:nn`` inside ``h:nn_ampm``) come
after it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from re import Pattern
from typing import TYPE_CHECKING

from .exceptions import FormatError
from .types import Components, TemporalKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


TIME_FORMATS = [
    "h:nn:ss_ampm",
    "h:nn_ampm",
    "h.nn_ampm",
    "h nn_ampm",
    "h-nn_ampm",
    "h_ampm",
    "hh:nn:ss.u",
    "hh:nn:ss",
    "hh-nn-ss",
    "h:nn",
    "h.nn",
    "h nn",
    "h-nn",
]

DATE_FORMATS = [
    "yyyy-mm-dd",
    "yyyy/mm/dd",
    "yyyy.mm.dd",
    "m/d/yy",
    "m\\d\\yy",
    "d-m-yy",
    "d.m.yy",
    "d mmm yy",
    "ddd d mmm yyyy",
]

DATETIME_FORMATS = [
    "yyyy-mm-dd hh:nn:ss.u",
    "yyyy-mm-dd hh:nn:ss",
    "yyyy-mm-ddThh:nn:ss.u",
    "yyyy-mm-ddThh:nn:ss",
    "yyyy-mm-ddThh:nn",
    "yyyy-mm-dd h:nn_ampm",
    "yyyy-mm-dd h:nn",
    "m/d/yy h:nn:ss",
    "m/d/yy h:nn_ampm",
    "m/d/yy h:nn",
    "d mmm yy h:nn:ss",
    "d mmm yy h:nn",
]

DEFAULT_FORMATS: dict[TemporalKind, list[str]] = {
    TemporalKind.TIME: TIME_FORMATS,
    TemporalKind.DATE: DATE_FORMATS,
    TemporalKind.DATETIME: DATETIME_FORMATS,
}

# Month-first formats and their day-first counterparts.
US_TO_EURO = {
    "m/d/yy": "d/m/yy",
    "m\\d\\yy": "d\\m\\yy",
    "m/d/yy h:nn:ss": "d/m/yy h:nn:ss",
    "m/d/yy h:nn_ampm": "d/m/yy h:nn_ampm",
    "m/d/yy h:nn": "d/m/yy h:nn",
}
EURO_TO_US = {euro: us for us, euro in US_TO_EURO.items()}

DEFAULT_AMBIGUOUS_YEAR_THRESHOLD = 30

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_TOKENS = [
    ("ampm", r"(?P<meridian>[AaPp])\.?[Mm]\.?"),
    ("yyyy", r"(?P<year>\d{4})"),
    ("yy", r"(?P<year>\d{4}|\d{2})"),
    ("mmm", r"(?P<month_name>[A-Za-z]{3,9})"),
    ("mm", r"(?P<month>\d{2})"),
    ("m", r"(?P<month>\d{1,2})"),
    ("ddd", r"(?:[A-Za-z]{3,9},?)"),
    ("dd", r"(?P<day>\d{2})"),
    ("d", r"(?P<day>\d{1,2})"),
    ("hh", r"(?P<hour>\d{2})"),
    ("h", r"(?P<hour>\d{1,2})"),
    ("nn", r"(?P<minute>\d{2})"),
    ("n", r"(?P<minute>\d{1,2})"),
    ("ss", r"(?P<second>\d{2})"),
    ("s", r"(?P<second>\d{1,2})"),
    ("u", r"(?P<fraction>\d{1,6})"),
    ("_", r"\s?"),
]


def format_to_regexp(fmt: str) -> str:
    """Translate a token format into a regular expression body."""
    parts = []
    position = 0
    while position < len(fmt):
        for token, expression in _TOKENS:
            if fmt.startswith(token, position):
                parts.append(expression)
                position += len(token)
                break
        else:
            parts.append(re.escape(fmt[position]))
            position += 1
    return "".join(parts)


def full_hour(hour: int, meridian: str | None) -> int:
    """Convert a 12 hour clock reading to 24 hour time."""
    if meridian is None:
        return hour
    if meridian.lower() == "a":
        return 0 if hour == 12 else hour
    return hour if hour == 12 else hour + 12


def unambiguous_year(year: str, century: int, threshold: int) -> int:
    """Expand a 2 digit year into the current or previous century."""
    if len(year) > 2:
        return int(year)
    value = int(year)
    if value >= threshold:
        return century - 100 + value
    return century + value


def month_index(name: str) -> int:
    """1-based month for a month name or 3+ letter abbreviation, 0 if unknown."""
    name = name.lower()
    for index, month in enumerate(MONTH_NAMES, start=1):
        if month.startswith(name) and len(name) >= 3:
            return index
    return 0


def microseconds(fraction: str) -> int:
    return int(fraction.ljust(6, "0")[:6])


def make_extractor(
    century: int, threshold: int
) -> Callable[[dict[str, str | None]], Components]:
    """Build the extractor mapping captured groups to a ``Components`` tuple."""

    def extract(groups: dict[str, str | None]) -> Components:
        def number(name: str) -> int:
            value = groups.get(name)
            return int(value) if value else 0

        year = groups.get("year")
        month_name = groups.get("month_name")
        fraction = groups.get("fraction")
        return Components(
            year=unambiguous_year(year, century, threshold) if year else 0,
            month=month_index(month_name) if month_name else number("month"),
            day=number("day"),
            hour=full_hour(number("hour"), groups.get("meridian")),
            minute=number("minute"),
            second=number("second"),
            fraction=microseconds(fraction) if fraction else 0,
        )

    return extract


@dataclass(frozen=True)
class FormatSpec:
    """A compiled format: the source token string, its regex and extractor."""

    format: str
    regexp: Pattern[str]
    extractor: Callable[[dict[str, str | None]], Components]

    def match(self, text: str, bounded: bool = True) -> re.Match[str] | None:
        """Match the whole of ``text`` when bounded, else anywhere within it."""
        if bounded:
            return self.regexp.fullmatch(text)
        return self.regexp.search(text)

    def extract(self, match: re.Match[str]) -> Components:
        return self.extractor(match.groupdict())


def compile_format(
    fmt: str,
    century: int | None = None,
    threshold: int = DEFAULT_AMBIGUOUS_YEAR_THRESHOLD,
) -> FormatSpec:
    """Compile a token format into a ``FormatSpec``.

    The expression is anchored against neighbouring digits so that a loose
    (unbounded) search cannot start or stop in the middle of a number.

    Raises:
        FormatError: If the format is empty or produces an invalid expression
    """
    if not fmt:
        raise FormatError("Format string cannot be empty")
    if century is None:
        century = date.today().year // 100 * 100
    try:
        regexp = re.compile(r"(?<!\d)" + format_to_regexp(fmt) + r"(?!\d)")
    except re.error as e:
        raise FormatError(
            f"Format '{fmt}' could not be compiled: {e}",
            context={"format": fmt},
        ) from e
    return FormatSpec(format=fmt, regexp=regexp, extractor=make_extractor(century, threshold))


class FormatRegistry:
    """Ordered format lists per kind, compiled once and read-only afterwards.

    ``patterns_for`` returns immutable tuples. Mutating operations rebuild the
    compiled table and swap it in with a single assignment, so readers on
    other threads see either the old or the new table, never a partial one.

    The datetime kind also falls back to the date formats, producing midnight.

    Example:
        ```python
        registry = FormatRegistry()
        registry.add_formats("date", "dd-mmm-yyyy", before="d-m-yy")
        registry.use_euro_formats()
        specs = registry.patterns_for("date")
        ```
    """

    def __init__(
        self,
        formats: dict[TemporalKind | str, Iterable[str]] | None = None,
        ambiguous_year_threshold: int = DEFAULT_AMBIGUOUS_YEAR_THRESHOLD,
        century: int | None = None,
    ):
        self.ambiguous_year_threshold = ambiguous_year_threshold
        self.century = century if century is not None else date.today().year // 100 * 100
        self._formats: dict[TemporalKind, list[str]] = {
            kind: list(fmts) for kind, fmts in DEFAULT_FORMATS.items()
        }
        if formats:
            for kind, fmts in formats.items():
                self._formats[TemporalKind.from_value(kind)] = list(fmts)
        self._compiled: dict[TemporalKind, tuple[FormatSpec, ...]] = {}
        self._rebuild()

    def patterns_for(self, kind: TemporalKind | str) -> tuple[FormatSpec, ...]:
        """Ordered format specs to try for a kind."""
        return self._compiled[TemporalKind.from_value(kind)]

    def formats_for(self, kind: TemporalKind | str) -> list[str]:
        """The registered token formats for a kind, excluding fallbacks."""
        return list(self._formats[TemporalKind.from_value(kind)])

    def add_formats(
        self, kind: TemporalKind | str, *formats: str, before: str | None = None
    ) -> FormatRegistry:
        """Register formats for a kind (fluent API).

        Args:
            kind: Kind to register formats for
            *formats: Token formats to add
            before: Existing format to insert ahead of; appended if None

        Returns:
            Self for chaining

        Raises:
            FormatError: If ``before`` is not registered for the kind
        """
        kind = TemporalKind.from_value(kind)
        current = list(self._formats[kind])
        new = [fmt for fmt in formats if fmt not in current]
        for fmt in new:
            compile_format(fmt, self.century, self.ambiguous_year_threshold)
        if before is None:
            current.extend(new)
        else:
            if before not in current:
                raise FormatError(
                    f"Format '{before}' is not registered for {kind.value}",
                    context={"kind": kind.value, "format": before},
                )
            index = current.index(before)
            current[index:index] = new
        self._formats[kind] = current
        self._rebuild()
        return self

    def remove_formats(self, kind: TemporalKind | str, *formats: str) -> FormatRegistry:
        """Unregister formats for a kind (fluent API).

        Raises:
            FormatError: If any format is not registered for the kind
        """
        kind = TemporalKind.from_value(kind)
        current = list(self._formats[kind])
        for fmt in formats:
            if fmt not in current:
                raise FormatError(
                    f"Format '{fmt}' is not registered for {kind.value}",
                    context={"kind": kind.value, "format": fmt},
                )
            current.remove(fmt)
        self._formats[kind] = current
        self._rebuild()
        return self

    def use_euro_formats(self) -> FormatRegistry:
        """Read ambiguous slash dates day first (``d/m/yy``)."""
        return self._swap(US_TO_EURO)

    def use_us_formats(self) -> FormatRegistry:
        """Read ambiguous slash dates month first (``m/d/yy``), the default."""
        return self._swap(EURO_TO_US)

    def _swap(self, mapping: dict[str, str]) -> FormatRegistry:
        for kind, fmts in self._formats.items():
            self._formats[kind] = [mapping.get(fmt, fmt) for fmt in fmts]
        self._rebuild()
        return self

    def _rebuild(self) -> None:
        def build(fmts: list[str]) -> tuple[FormatSpec, ...]:
            return tuple(
                compile_format(fmt, self.century, self.ambiguous_year_threshold)
                for fmt in fmts
            )

        compiled = {kind: build(fmts) for kind, fmts in self._formats.items()}
        compiled[TemporalKind.DATETIME] = (
            compiled[TemporalKind.DATETIME] + compiled[TemporalKind.DATE]
        )
        self._compiled = compiled
        logger.debug(
            "Compiled formats: "
            + ", ".join(f"{kind.value}={len(specs)}" for kind, specs in compiled.items())
        )


default_registry = FormatRegistry()


def patterns_for(kind: TemporalKind | str) -> tuple[FormatSpec, ...]:
    """Ordered format specs for a kind from the default registry."""
    return default_registry.patterns_for(kind)


__all__ = [
    "TIME_FORMATS",
    "DATE_FORMATS",
    "DATETIME_FORMATS",
    "DEFAULT_FORMATS",
    "FormatSpec",
    "FormatRegistry",
    "compile_format",
    "default_registry",
    "patterns_for",
    "full_hour",
    "unambiguous_year",
]
