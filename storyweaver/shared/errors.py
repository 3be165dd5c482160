"""Story Weaver error handling."""

from typing import Any

from .types import ErrorCode


class StoryWeaverError(Exception):
    """Base exception for Story Weaver errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        recovery_hint: str | None = None,
    ) -> None:
        """Initialize error."""
        super().__init__(message)
        self.code = code.value
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint


class BackendUnavailableError(StoryWeaverError):
    """LLM backend not available."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.BACKEND_UNAVAILABLE,
            message=f"Backend '{backend}' is not available or not configured",
            details=details,
            recoverable=True,
            recovery_hint="Set GEMINI_API_KEY or run with --debug for the offline backend",
        )


class FormValidationError(StoryWeaverError):
    """A form field holds an unacceptable value; nothing was sent to the model."""

    def __init__(self, field: str, message: str) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={"field": field},
            recoverable=True,
            recovery_hint=f"Fix the '{field}' value and submit again",
        )
        self.field = field


class GenerationFailedError(StoryWeaverError):
    """Story text generation failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.GENERATION_FAILED,
            message=f"Generation failed: {message}",
            details=details,
            recoverable=True,
            recovery_hint="Retry the operation or check backend status",
        )


class ImageGenerationError(StoryWeaverError):
    """Illustration pipeline failed at either stage."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.IMAGE_GENERATION_FAILED,
            message="Image generation failed.",
            details=details,
            recoverable=True,
            recovery_hint="The story is kept; request the illustration again later",
        )


class AudioGenerationError(StoryWeaverError):
    """Narration request returned no audio or failed upstream."""

    def __init__(self, message: str = "no media returned", details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.AUDIO_GENERATION_FAILED,
            message=f"Audio generation failed: {message}",
            details=details,
            recoverable=True,
            recovery_hint="Retry the narration request",
        )


class ExportError(StoryWeaverError):
    """PDF export failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.EXPORT_FAILED,
            message=f"Export failed: {message}",
            details=details,
            recoverable=True,
            recovery_hint="Check the output path and disk space",
        )


class ShareError(StoryWeaverError):
    """Sharing through a given target failed."""

    def __init__(self, target: str, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.SHARE_FAILED,
            message=message,
            details={"target": target, **(details or {})},
            recoverable=True,
            recovery_hint="Try another share target",
        )
        self.target = target


class ConfigError(StoryWeaverError):
    """Configuration error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error."""
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=f"Configuration error: {message}",
            details=details,
            recoverable=True,
            recovery_hint="Check configuration file syntax and values",
        )
