"""
Validation framework for the configuration schema.
"""

import math
from typing import Any

from .config_schema import SECTION_NAMES
from .core import ConfigField, FieldType


class ValidationError(Exception):
    """Configuration validation error with context."""

    def __init__(self, field_name: str, value: Any, message: str, section: str = ""):
        self.field_name = field_name
        self.value = value
        self.message = message
        self.section = section
        super().__init__(f"[{section}.{field_name}] {message}")


class SchemaValidator:
    """Configuration validator using schema definitions."""

    def __init__(self, schema):
        self.schema = schema

    def find_field(self, field_name: str) -> ConfigField | None:
        """Look a field up by name across all sections."""
        for section_name in SECTION_NAMES:
            section = getattr(self.schema, section_name, None)
            if section is not None and field_name in section.fields:
                return section.fields[field_name]
        return None

    def validate_field(self, field: ConfigField, value: Any) -> list[ValidationError]:
        """Validate a single field value against its schema definition."""
        errors = []

        if field.required and (value is None or value == ""):
            errors.append(ValidationError(field.name, value, "Required field cannot be empty", field.section))
            return errors

        # Empty optional fields fall back to the schema default
        if not field.required and (value is None or value == ""):
            return errors

        type_valid, type_error = self._validate_type(field, value)
        if not type_valid:
            errors.append(ValidationError(field.name, value, type_error, field.section))
            return errors

        if field.valid_values and str(value) not in field.valid_values:
            errors.append(
                ValidationError(
                    field.name,
                    value,
                    f"Invalid value '{value}'. Valid options: {', '.join(field.valid_values)}",
                    field.section,
                )
            )

        if field.is_numeric:
            number = float(value)
            if not math.isfinite(number):
                errors.append(
                    ValidationError(field.name, value, f"Expected a finite number, got '{value}'", field.section)
                )
            elif field.min_value is not None and number < field.min_value:
                errors.append(
                    ValidationError(
                        field.name, value, f"Value {value} is below the minimum of {field.min_value:g}", field.section
                    )
                )
            elif field.max_value is not None and number > field.max_value:
                errors.append(
                    ValidationError(
                        field.name, value, f"Value {value} is above the maximum of {field.max_value:g}", field.section
                    )
                )

        if field.validator and not field.validator(value):
            errors.append(
                ValidationError(field.name, value, f"Custom validation failed for value '{value}'", field.section)
            )

        return errors

    def _validate_type(self, field: ConfigField, value: Any) -> tuple[bool, str]:
        """Validate field type."""
        if field.field_type in (FieldType.STRING, FieldType.PATH):
            if not isinstance(value, str):
                return False, f"Expected string, got {type(value).__name__}"

        elif field.field_type == FieldType.INTEGER:
            if isinstance(value, bool):
                return False, f"Expected integer, got '{value}'"
            try:
                int(value)
            except (ValueError, TypeError):
                return False, f"Expected integer, got '{value}'"

        elif field.field_type == FieldType.FLOAT:
            if isinstance(value, bool):
                return False, f"Expected number, got '{value}'"
            try:
                float(value)
            except (ValueError, TypeError):
                return False, f"Expected number, got '{value}'"

        elif field.field_type == FieldType.BOOLEAN:
            if not isinstance(value, bool) and str(value).lower() not in ["true", "false", "1", "0", "yes", "no"]:
                return False, f"Expected boolean, got '{value}'"

        return True, ""

    def validate_config(self, config_dict: dict[str, dict[str, Any]]) -> list[ValidationError]:
        """Validate entire configuration dictionary."""
        all_errors = []

        for section_name, section_config in config_dict.items():
            if hasattr(self.schema, section_name):
                section = getattr(self.schema, section_name)
                for field_name, value in section_config.items():
                    if field_name in section.fields:
                        all_errors.extend(self.validate_field(section.fields[field_name], value))

        return all_errors

    def validate_cli_argument(self, field_name: str, value: Any) -> list[ValidationError]:
        """Validate a single CLI argument by field name."""
        field = self.find_field(field_name)
        if field is None:
            return [ValidationError(field_name, value, f"Unknown configuration field '{field_name}'", "")]
        return self.validate_field(field, value)
