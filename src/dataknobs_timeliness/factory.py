"""Factory building timeliness schemas from configuration."""

import logging
from typing import Any

from .config import TimelinessSettings
from .validator import TimelinessSchema

logger = logging.getLogger(__name__)


class TimelinessSchemaFactory:
    """Factory for creating timeliness schemas from configuration.

    Configuration Options:
        name (str): Schema name
        description (str): Optional schema description
        settings (dict): Global settings, see ``TimelinessSettings``
        fields (list): List of field definitions

    Field Definition Options:
        name (str | list): Attribute name, or several sharing the options
        type (str): date, time or datetime (default: datetime)
        allow_nil (bool): Skip None values
        allow_blank (bool): Skip blank values
        before, after, on_or_before, on_or_after: Restriction values; text is
            parsed, ``:other_field`` refers to another attribute
        messages (dict): Message overrides for this field

    Example Configuration:
        schemas:
          - name: person
            factory: timeliness
            settings:
              date_order: euro
            fields:
              - name: birth_date
                type: date
                on_or_after: ":registered_on"
              - name: [opens_at, closes_at]
                type: time
                after: "06:00"
                before: "23:00"
    """

    def create(self, **config: Any) -> TimelinessSchema:
        """Create a TimelinessSchema from configuration.

        Args:
            **config: Schema configuration

        Returns:
            TimelinessSchema instance
        """
        name = config.get("name", "unnamed_schema")
        settings_config = config.get("settings")
        settings = TimelinessSettings.from_dict(settings_config) if settings_config else None

        logger.info(f"Creating timeliness schema: {name}")

        schema = TimelinessSchema(name, settings)
        description = config.get("description")
        if description:
            schema.with_description(description)

        for field_config in config.get("fields", []):
            self._add_field_to_schema(schema, dict(field_config))

        return schema

    def _add_field_to_schema(self, schema: TimelinessSchema, field_config: dict[str, Any]) -> None:
        names = field_config.pop("name", None)
        if not names:
            logger.warning("Field configuration missing 'name', skipping")
            return
        if isinstance(names, str):
            names = [names]

        kind = field_config.pop("type", "datetime")
        field_config.pop("description", None)
        schema.field(*names, kind=kind, **field_config)


timeliness_schema_factory = TimelinessSchemaFactory()


__all__ = ["TimelinessSchemaFactory", "timeliness_schema_factory"]
