"""
LLM Backend Factory and Abstract Base Class.

This module provides:
1. LLMBackend abstract base class defining the interface for all backends
2. get_backend() factory function for backend selection
3. The fixed safety thresholds used for creative generation

Supported backends:
- Gemini (Google AI): requires GEMINI_API_KEY
- Debug: offline canned responses, no API key needed
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from .shared.errors import BackendUnavailableError

if TYPE_CHECKING:
    from .media import DataUri
    from .prompt import PromptContent

# Harm category -> block threshold. Loose enough for creative writing while
# still blocking severe hate speech, harassment and explicit content.
CREATIVE_SAFETY_THRESHOLDS: dict[str, str] = {
    "HARM_CATEGORY_HATE_SPEECH": "BLOCK_ONLY_HIGH",
    "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_NONE",
    "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_LOW_AND_ABOVE",
}


class LLMBackend(ABC):
    """
    Abstract base class for generative model backends.

    Backends are thin: they send what they are given and return what the
    model produced. An empty result is returned as-is (empty string or None);
    transport and quota failures propagate as exceptions. Interpreting either
    is left to the calling flow.
    """

    name: str

    @abstractmethod
    async def generate_text(
        self,
        contents: Sequence["PromptContent"],
        *,
        temperature: float | None = None,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> str:
        """
        Generate text from a prompt.

        Args:
            contents: Instruction strings and inline media, in order.
            temperature: Sampling temperature; None keeps the model default.
            safety_thresholds: Harm category to threshold overrides.

        Returns:
            str: The generated text, possibly empty.
        """
        raise NotImplementedError("Subclass must implement generate_text method")

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        *,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> "DataUri | None":
        """
        Render a single image for a text prompt.

        Returns:
            DataUri | None: The image, or None if the model returned none.
        """
        raise NotImplementedError("Subclass must implement generate_image method")

    @abstractmethod
    async def generate_speech(self, text: str) -> bytes | None:
        """
        Synthesize speech for ``text``.

        Returns:
            bytes | None: Raw 16-bit little-endian mono PCM at 24 kHz, or None if no audio came back.
        """
        raise NotImplementedError("Subclass must implement generate_speech method")


def get_backend(
    backend_name: str | None = None,
    *,
    text_model: str | None = None,
    image_model: str | None = None,
    tts_model: str | None = None,
    voice: str | None = None,
) -> LLMBackend:
    """
    Factory function to get a backend instance.

    Args:
        backend_name: "gemini" or "debug". If None, LLM_BACKEND is consulted,
            then the presence of GEMINI_API_KEY.
        text_model, image_model, tts_model, voice: Gemini overrides; empty
            values fall back to environment variables and model discovery.

    Raises:
        BackendUnavailableError: If no backend can be selected or its API key is missing.
    """
    if backend_name is None:
        backend_name = os.environ.get("LLM_BACKEND", "").lower()

    if not backend_name:
        if os.environ.get("GEMINI_API_KEY"):
            backend_name = "gemini"
        else:
            raise BackendUnavailableError(
                "gemini",
                details={"reason": "GEMINI_API_KEY environment variable not set"},
            )

    if backend_name == "gemini":
        from .gemini_backend import GeminiBackend

        return GeminiBackend(
            text_model=text_model or None,
            image_model=image_model or None,
            tts_model=tts_model or None,
            voice=voice or None,
        )

    if backend_name == "debug":
        from .debug_backend import DebugBackend

        return DebugBackend()

    raise BackendUnavailableError(backend_name, details={"supported": ["gemini", "debug"]})
