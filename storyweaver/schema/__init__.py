"""
Story Weaver configuration schema package.
Provides schema-driven validation and CLI integration.
"""

from .config_schema import SECTION_NAMES, STORYWEAVER_SCHEMA, SUPPORTED_LANGUAGES
from .core import ConfigField, ConfigSection, FieldType
from .validation import SchemaValidator, ValidationError

__all__ = [
    "SECTION_NAMES",
    "STORYWEAVER_SCHEMA",
    "SUPPORTED_LANGUAGES",
    "SchemaValidator",
    "ValidationError",
    "ConfigField",
    "ConfigSection",
    "FieldType",
]
