"""Shared types and error definitions for Story Weaver."""

from .errors import (
    AudioGenerationError,
    BackendUnavailableError,
    ConfigError,
    ExportError,
    FormValidationError,
    GenerationFailedError,
    ImageGenerationError,
    ShareError,
    StoryWeaverError,
)
from .types import ErrorCode, Notification, NotificationVariant

__all__ = [
    "AudioGenerationError",
    "BackendUnavailableError",
    "ConfigError",
    "ErrorCode",
    "ExportError",
    "FormValidationError",
    "GenerationFailedError",
    "ImageGenerationError",
    "Notification",
    "NotificationVariant",
    "ShareError",
    "StoryWeaverError",
]
