"""Gemini backend for Story Weaver.

Uses the async client of the ``google-genai`` SDK for story text,
illustrations and narration. Models are discovered once per process; each can
be pinned through the constructor or the ``GEMINI_TEXT_MODEL``,
``GEMINI_IMAGE_MODEL`` and ``GEMINI_TTS_MODEL`` environment variables.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from google import genai
from google.genai import types

from .llm_backend import LLMBackend
from .media import DataUri
from .model_discovery import (
    find_image_generation_model,
    find_text_generation_model,
    find_tts_model,
    list_gemini_models,
)
from .prompt import PromptContent
from .shared.errors import BackendUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_VOICE = "Algenib"


def _safety_settings(thresholds: Mapping[str, str] | None) -> list[types.SafetySetting] | None:
    if not thresholds:
        return None
    return [
        types.SafetySetting(category=category, threshold=threshold) for category, threshold in thresholds.items()
    ]


def _to_part(item: PromptContent) -> Any:
    if isinstance(item, DataUri):
        return types.Part.from_bytes(data=item.data, mime_type=item.mime_type)
    return item


def _response_parts(response: Any) -> list[Any]:
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    if not content:
        return []
    return list(getattr(content, "parts", None) or [])


class GeminiBackend(LLMBackend):
    name = "gemini"
    _cached_models: ClassVar[list[dict[str, Any]] | None] = None

    def __init__(
        self,
        text_model: str | None = None,
        image_model: str | None = None,
        tts_model: str | None = None,
        voice: str | None = None,
    ) -> None:
        api_key = os.environ.get("GEMINI_API_KEY")
        if not api_key:
            raise BackendUnavailableError("gemini", details={"reason": "GEMINI_API_KEY environment variable not set"})
        self.client = genai.Client(api_key=api_key)

        text_model = text_model or os.environ.get("GEMINI_TEXT_MODEL")
        image_model = image_model or os.environ.get("GEMINI_IMAGE_MODEL")
        tts_model = tts_model or os.environ.get("GEMINI_TTS_MODEL")

        # Only hit the model list when something is left to discover
        if not (text_model and image_model and tts_model) and GeminiBackend._cached_models is None:
            try:
                GeminiBackend._cached_models = list_gemini_models(api_key)
            except Exception as e:
                logger.warning("Model discovery failed, using default models: %s", e)
                GeminiBackend._cached_models = []

        models = GeminiBackend._cached_models
        self.text_model = text_model or find_text_generation_model(models)
        self.image_model = image_model or find_image_generation_model(models)
        self.tts_model = tts_model or find_tts_model(models)
        self.voice = voice or DEFAULT_VOICE
        logger.debug(
            "Gemini models: text=%s image=%s tts=%s voice=%s",
            self.text_model,
            self.image_model,
            self.tts_model,
            self.voice,
        )

    async def generate_text(
        self,
        contents: Sequence[PromptContent],
        *,
        temperature: float | None = None,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> str:
        config = types.GenerateContentConfig(
            temperature=temperature,
            safety_settings=_safety_settings(safety_thresholds),
        )
        response = await self.client.aio.models.generate_content(
            model=self.text_model,
            contents=[_to_part(item) for item in contents],
            config=config,
        )
        texts = [part.text for part in _response_parts(response) if isinstance(getattr(part, "text", None), str)]
        return "".join(texts).strip()

    async def generate_image(
        self,
        prompt: str,
        *,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> DataUri | None:
        config = types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            safety_settings=_safety_settings(safety_thresholds),
        )
        response = await self.client.aio.models.generate_content(model=self.image_model, contents=prompt, config=config)

        for part in _response_parts(response):
            inline = getattr(part, "inline_data", None)
            if inline and getattr(inline, "data", None):
                mime_type = getattr(inline, "mime_type", None)
                return DataUri(mime_type=mime_type if isinstance(mime_type, str) else "image/png", data=inline.data)

        logger.warning("Image model %s returned no image", self.image_model)
        return None

    async def generate_speech(self, text: str) -> bytes | None:
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.voice),
                )
            ),
        )
        response = await self.client.aio.models.generate_content(model=self.tts_model, contents=text, config=config)

        for part in _response_parts(response):
            inline = getattr(part, "inline_data", None)
            if inline and getattr(inline, "data", None):
                data: bytes = inline.data
                return data

        logger.warning("Speech model %s returned no audio", self.tts_model)
        return None
