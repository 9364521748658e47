"""Global timeliness settings loaded from dictionaries, YAML or JSON files."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError
from .formats import DEFAULT_AMBIGUOUS_YEAR_THRESHOLD, FormatRegistry
from .result import DEFAULT_MESSAGES
from .types import TemporalKind

logger = logging.getLogger(__name__)

DATE_ORDERS = ("us", "euro")


@dataclass
class TimelinessSettings:
    """Settings shared by the validators of a schema.

    Settings attributes:
        - messages: Message template overrides keyed by message name
        - ambiguous_year_threshold: 2 digit years at or above this fall in
          the previous century
        - date_order: ``us`` (m/d/yy) or ``euro`` (d/m/yy) slash dates
        - extra_formats: Additional token formats keyed by kind
        - allow_nil: Default for validators that do not set it
        - allow_blank: Default for validators that do not set it

    Example configuration (YAML):
        ```yaml
        date_order: euro
        ambiguous_year_threshold: 50
        messages:
          before: "has to be earlier than {value}"
        extra_formats:
          date:
            - "dd-mmm-yyyy"
        ```
    """

    messages: Dict[str, str] = field(default_factory=dict)
    ambiguous_year_threshold: int = DEFAULT_AMBIGUOUS_YEAR_THRESHOLD
    date_order: str = "us"
    extra_formats: Dict[str, List[str]] = field(default_factory=dict)
    allow_nil: bool = False
    allow_blank: bool = False

    def __post_init__(self) -> None:
        unknown = set(self.messages) - set(DEFAULT_MESSAGES)
        if unknown:
            raise ConfigurationError(
                f"Unknown message keys: {', '.join(sorted(unknown))}",
                context={"keys": sorted(unknown), "allowed": sorted(DEFAULT_MESSAGES)},
            )
        if self.date_order not in DATE_ORDERS:
            raise ConfigurationError(
                f"Invalid date_order: {self.date_order!r}",
                context={"date_order": self.date_order, "allowed": list(DATE_ORDERS)},
            )
        if not isinstance(self.ambiguous_year_threshold, int) or not (
            0 <= self.ambiguous_year_threshold <= 100
        ):
            raise ConfigurationError(
                f"ambiguous_year_threshold must be an integer from 0 to 100, "
                f"got {self.ambiguous_year_threshold!r}"
            )
        for kind in self.extra_formats:
            TemporalKind.from_value(kind)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelinessSettings":
        """Create settings from a dictionary.

        Raises:
            ConfigurationError: If a key is unknown or a value invalid
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown settings: {', '.join(sorted(unknown))}",
                context={"keys": sorted(unknown), "allowed": sorted(known)},
            )
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TimelinessSettings":
        """Create settings from a YAML or JSON file.

        A file holding a ``timeliness`` key is read from that section.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported file format: {suffix}", context={"path": str(path)}
                )

        data = data or {}
        if "timeliness" in data:
            data = data["timeliness"] or {}
        logger.info(f"Loaded timeliness settings from {path}")
        return cls.from_dict(data)

    def build_registry(self) -> FormatRegistry:
        """Format registry honouring date order, extra formats and year threshold."""
        registry = FormatRegistry(ambiguous_year_threshold=self.ambiguous_year_threshold)
        if self.date_order == "euro":
            registry.use_euro_formats()
        for kind, formats in self.extra_formats.items():
            registry.add_formats(kind, *formats)
        return registry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": dict(self.messages),
            "ambiguous_year_threshold": self.ambiguous_year_threshold,
            "date_order": self.date_order,
            "extra_formats": {k: list(v) for k, v in self.extra_formats.items()},
            "allow_nil": self.allow_nil,
            "allow_blank": self.allow_blank,
        }


__all__ = ["TimelinessSettings"]
