"""
CLI integration utilities for automatic option generation from schema.
"""

from typing import Any

import typer

from .config_schema import STORYWEAVER_SCHEMA
from .validation import SchemaValidator

_validator = SchemaValidator(STORYWEAVER_SCHEMA)


def get_field_by_name(field_name: str):
    """Get a field by name from any section."""
    return _validator.find_field(field_name)


def generate_cli_option(field_name: str):
    """Generate a single CLI option from schema field."""
    field = get_field_by_name(field_name)
    if not field:
        raise ValueError(f"Field '{field_name}' not found in schema")

    option_args = [field.cli_long]
    if field.cli_short:
        option_args.append(field.cli_short)

    return typer.Option(None, *option_args, help=field.cli_help)


def generate_boolean_cli_option(field_name: str, flag_format: str | None = None):
    """Generate a boolean CLI option, optionally with a --flag/--no-flag format."""
    field = get_field_by_name(field_name)
    if not field:
        raise ValueError(f"Field '{field_name}' not found in schema")

    if flag_format:
        return typer.Option(None, flag_format, help=field.cli_help)
    return generate_cli_option(field_name)


def validate_cli_arguments(**kwargs: Any) -> list[str]:
    """
    Validate CLI arguments using schema.

    Args:
        **kwargs: CLI argument values

    Returns:
        List of validation error messages
    """
    errors = []

    for field_name, value in kwargs.items():
        if value is not None:
            field_errors = _validator.validate_cli_argument(field_name, value)
            errors.extend([str(error) for error in field_errors])

    return errors
