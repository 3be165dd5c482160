"""
Configuration management for Story Weaver.

Handles loading, parsing, and merging configuration from:
1. Configuration files (INI format)
2. Environment variables
3. Command line arguments (highest priority)

Configuration file priority:
1. STORYWEAVER_CONFIG environment variable path
2. XDG config directory: ~/.config/storyweaver/storyweaver.ini
3. Home directory: ~/.storyweaver.ini
4. Current directory: ./storyweaver.ini
"""

import os
from configparser import ConfigParser
from configparser import Error as ConfigParserError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from .console import console
from .schema import SECTION_NAMES, STORYWEAVER_SCHEMA, FieldType, SchemaValidator
from .shared.errors import ConfigError

CONFIG_FILENAME = "storyweaver.ini"


def _format_default(field) -> str:
    if field.field_type == FieldType.BOOLEAN:
        return "true" if field.default else "false"
    return str(field.default) if field.default is not None else ""


def _generate_config_template_from_schema() -> str:
    """Generate configuration template directly from schema."""
    lines = [
        "# Story Weaver Configuration File",
        "# This file contains default values for story generation parameters",
        "# Command line arguments will override these settings",
        "",
    ]

    for section_name in SECTION_NAMES:
        section = getattr(STORYWEAVER_SCHEMA, section_name)
        lines.append(f"[{section_name}]")

        for field_name, field in section.fields.items():
            if field.ini_comment:
                lines.append(f"# {field.ini_comment}")
            lines.append(f"{field_name} = {_format_default(field)}")
            lines.append("")

        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


class Config:
    """Configuration manager for Story Weaver."""

    def __init__(self):
        self.config = ConfigParser()
        self.config_path: Path | None = None
        self.validator = SchemaValidator(STORYWEAVER_SCHEMA)
        self._load_defaults()

    def _load_defaults(self):
        """Load default configuration values from schema."""
        self.config.read_string(_generate_config_template_from_schema())

    def get_config_paths(self) -> list[Path]:
        """Return configuration file paths in priority order."""
        paths = []

        env_config = os.environ.get("STORYWEAVER_CONFIG")
        if env_config:
            paths.append(Path(env_config))

        paths.append(self.get_default_config_path())
        paths.append(Path.home() / f".{CONFIG_FILENAME}")
        paths.append(Path(f"./{CONFIG_FILENAME}"))

        return paths

    def find_config_file(self) -> Path | None:
        """Find the first existing configuration file."""
        for path in self.get_config_paths():
            if path.exists() and path.is_file():
                return path
        return None

    def load_config(self, verbose: bool = False) -> bool:
        """
        Load configuration from file.

        Returns:
            bool: True if config file was found and loaded, False otherwise.
        """
        config_path = self.find_config_file()
        if not config_path:
            if verbose:
                console.print("[dim]No configuration file found, using defaults[/dim]")
            return False

        try:
            self.config.read(config_path, encoding="utf-8")
        except ConfigParserError as e:
            raise ConfigError(f"Error reading configuration file {config_path}: {e}") from e

        self.config_path = config_path
        if verbose:
            console.print(f"[dim]Loaded configuration from: {config_path}[/dim]")
        return True

    def validate_config(self) -> list[str]:
        """
        Validate configuration values using schema.

        Returns:
            List[str]: List of validation errors, empty if valid.
        """
        return [str(error) for error in self.validator.validate_config(self.to_dict())]

    def get_default_config_path(self) -> Path:
        """Get the default configuration file path (XDG config directory)."""
        return Path(user_config_dir("storyweaver", "storyweaver")) / CONFIG_FILENAME

    def create_default_config(self, path: Path | None = None) -> Path:
        """
        Create a default configuration file.

        Args:
            path: Path to create config file. If None, uses default location.

        Returns:
            Path: The path where the config file was created.
        """
        if path is None:
            path = self.get_default_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(_generate_config_template_from_schema())

        return path

    def get_field_value(self, section_name: str, field_name: str) -> Any:
        """Get a configuration value converted to its schema type."""
        section = getattr(STORYWEAVER_SCHEMA, section_name)
        field = section.fields.get(field_name)
        if not field:
            raise ValueError(f"Unknown field: {section_name}.{field_name}")

        raw_value = self.config.get(section_name, field_name, fallback="").strip()
        if not raw_value:
            return field.default

        try:
            if field.field_type == FieldType.BOOLEAN:
                return raw_value.lower() in ("true", "1", "yes", "on")
            if field.field_type == FieldType.INTEGER:
                return int(raw_value)
            if field.field_type == FieldType.FLOAT:
                return float(raw_value)
        except ValueError:
            # validate_config reports the bad value; callers get the default
            return field.default
        return raw_value

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Convert configuration to dictionary format."""
        result: dict[str, dict[str, Any]] = {}
        for section_name in self.config.sections():
            result[section_name] = dict(self.config[section_name].items())
        return result


def load_config(verbose: bool = False) -> Config:
    """
    Load configuration from file system.

    Args:
        verbose: Enable verbose output

    Returns:
        Config: Loaded configuration object

    Raises:
        ConfigError: If configuration file is malformed or holds invalid values
    """
    config = Config()
    config.load_config(verbose=verbose)

    errors = config.validate_config()
    if errors:
        raise ConfigError("validation failed:\n" + "\n".join(f"  - {error}" for error in errors))

    return config
