"""
Core infrastructure for the Story Weaver configuration schema.
Provides base classes for defining configuration fields with rich metadata.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldType(Enum):
    """Supported configuration field types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    PATH = "path"


@dataclass
class ConfigField:
    """
    Metadata for a single configuration field.

    One definition drives value validation, the generated CLI option, the
    config file template and the form checks applied before a request is sent.
    """

    name: str
    field_type: FieldType
    default: Any
    section: str
    description: str
    cli_help: str

    # Validation
    valid_values: list[str] | None = None
    min_value: float | None = None
    max_value: float | None = None
    required: bool = False
    validator: Callable[[Any], bool] | None = None

    # CLI Integration
    cli_short: str | None = None
    cli_long: str | None = None
    cli_flag_name: str | None = None

    # Documentation
    example_values: list[str] | None = None

    # INI file generation
    ini_comment: str | None = None

    def __post_init__(self):
        """Generate derived fields after initialization."""
        if self.cli_flag_name is None:
            self.cli_flag_name = self.name.replace("_", "-")

        if self.cli_long is None:
            self.cli_long = f"--{self.cli_flag_name}"

        if self.ini_comment is None:
            comment_parts = []
            if self.description:
                comment_parts.append(self.description)
            if self.min_value is not None and self.max_value is not None:
                comment_parts.append(f"Range: {self.min_value:g}-{self.max_value:g}")
            if self.example_values:
                comment_parts.append(f"Examples: {', '.join(self.example_values)}")
            self.ini_comment = " | ".join(comment_parts) if comment_parts else ""

    @property
    def is_numeric(self) -> bool:
        return self.field_type in (FieldType.INTEGER, FieldType.FLOAT)


@dataclass
class ConfigSection:
    """Base class for configuration sections."""

    name: str
    description: str
    fields: dict[str, ConfigField] = field(default_factory=dict)

    def add_field(self, field_obj: ConfigField) -> None:
        """Add a field to this section."""
        field_obj.section = self.name
        self.fields[field_obj.name] = field_obj
