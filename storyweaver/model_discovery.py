"""Dynamic model discovery for the Gemini API.

Lists the models available to the API key once and picks a model for each
task (story text, illustration, narration) by name priority.
"""

import logging
import os
from typing import Any

from google import genai

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"

TEXT_MODEL_PATTERNS = ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.5-pro", "gemini-pro"]
IMAGE_MODEL_PATTERNS = ["gemini-2.5-flash-image", "gemini-2.0-flash-preview-image-generation", "imagen-"]
TTS_MODEL_PATTERNS = ["gemini-2.5-flash-preview-tts", "gemini-2.5-pro-preview-tts", "-tts"]
# Models sharing a text model name prefix but producing other modalities
NON_TEXT_MARKERS = ("image", "tts", "audio", "live", "embedding")


def list_gemini_models(api_key: str | None = None) -> list[dict[str, Any]]:
    """List all available Gemini models.

    Args:
        api_key: Optional API key. If not provided, uses GEMINI_API_KEY env var.

    Returns:
        List of model information dictionaries with keys: name, display_name,
        supported_generation_methods, description.

    Raises:
        RuntimeError: If API key is not provided and not found in environment.
    """
    key = api_key or os.environ.get("GEMINI_API_KEY")
    if not key:
        raise RuntimeError("GEMINI_API_KEY environment variable not set.")

    client = genai.Client(api_key=key)
    models = []

    for model in client.models.list():
        models.append(
            {
                "name": getattr(model, "name", "") or "",
                "display_name": getattr(model, "display_name", "") or "",
                # The SDK exposes this as supported_actions; older payloads used supported_generation_methods
                "supported_generation_methods": getattr(model, "supported_actions", None)
                or getattr(model, "supported_generation_methods", None)
                or [],
                "description": getattr(model, "description", "") or "",
            }
        )

    return models


def _strip_prefix(name: str) -> str:
    return name[len("models/") :] if name.startswith("models/") else name


def _find_model(
    models: list[dict[str, Any]],
    patterns: list[str],
    default: str,
    allow_preview: bool = False,
    exclude: tuple[str, ...] = (),
) -> str:
    for pattern in patterns:
        for model in models:
            name = model.get("name", "")
            if any(marker in name for marker in exclude):
                continue
            methods = model.get("supported_generation_methods", [])

            # Preview models hit tighter quotas on the free tier
            if not allow_preview and "preview" in name.lower():
                logger.debug("Skipping preview model for stability: %s", name)
                continue

            if pattern in name and "generateContent" in methods:
                return _strip_prefix(name)

    return default


def find_text_generation_model(models: list[dict[str, Any]] | None) -> str:
    """Pick the story text model, falling back to ``DEFAULT_TEXT_MODEL``."""
    return _find_model(models or [], TEXT_MODEL_PATTERNS, DEFAULT_TEXT_MODEL, exclude=NON_TEXT_MARKERS)


def find_image_generation_model(models: list[dict[str, Any]] | None) -> str:
    """Pick the illustration model, falling back to ``DEFAULT_IMAGE_MODEL``."""
    return _find_model(models or [], IMAGE_MODEL_PATTERNS, DEFAULT_IMAGE_MODEL, allow_preview=True)


def find_tts_model(models: list[dict[str, Any]] | None) -> str:
    """Pick the narration model. Speech models only ship as previews."""
    return _find_model(models or [], TTS_MODEL_PATTERNS, DEFAULT_TTS_MODEL, allow_preview=True)
