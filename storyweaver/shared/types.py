"""Shared type definitions for Story Weaver."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Error codes carried by every StoryWeaverError."""

    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"
    IMAGE_GENERATION_FAILED = "IMAGE_GENERATION_FAILED"
    AUDIO_GENERATION_FAILED = "AUDIO_GENERATION_FAILED"
    EXPORT_FAILED = "EXPORT_FAILED"
    SHARE_FAILED = "SHARE_FAILED"
    CONFIG_ERROR = "CONFIG_ERROR"


class NotificationVariant(Enum):
    """Visual weight of a user notification."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A transient message for the user (the CLI prints these as they arrive)."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant is NotificationVariant.DESTRUCTIVE
