"""
Request flows: the contracts between the application and the model backend.

Each flow takes a small input record, makes one or two backend calls and
returns an output record. Upstream failures (transport, quota, empty output)
are turned into the matching StoryWeaverError; nothing is retried here.

- generate_story_continuation: prompt/photo -> story
- adjust_story_length: story -> shorter story (standalone utility)
- adjust_story_randomness: story start -> continuation at a given temperature
- generate_story_image: story -> illustration brief -> image data URI
- generate_story_audio: story -> PCM -> WAV data URI
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .audio import WAV_MIME_TYPE, pcm_to_wav
from .form import GenerationRequest
from .llm_backend import CREATIVE_SAFETY_THRESHOLDS, LLMBackend
from .media import build_data_uri
from .prompt import (
    adjust_length_prompt,
    build_continuation_prompt,
    illustration_brief_prompt,
    randomness_prompt,
)
from .schema import STORYWEAVER_SCHEMA, SchemaValidator
from .shared.errors import (
    AudioGenerationError,
    FormValidationError,
    GenerationFailedError,
    ImageGenerationError,
    StoryWeaverError,
)

logger = logging.getLogger(__name__)

_validator = SchemaValidator(STORYWEAVER_SCHEMA)


@contextmanager
def _upstream(error_factory: Callable[[Exception], StoryWeaverError]) -> Iterator[None]:
    """Convert any non-domain exception raised by a backend call."""
    try:
        yield
    except StoryWeaverError:
        raise
    except Exception as e:
        logger.warning("Backend call failed: %s", e)
        raise error_factory(e) from e


def _failure_details(exc: Exception) -> dict[str, str]:
    return {"type": type(exc).__name__, "error": str(exc)}


def _require_range(field_name: str, value: float) -> None:
    errors = _validator.validate_cli_argument(field_name, value)
    if errors:
        raise FormValidationError(field_name, errors[0].message)


# -- story continuation --------------------------------------------------------


@dataclass(frozen=True)
class GenerateStoryInput:
    prompt: str | None = None
    max_length: int = 100
    temperature: float = 0.8
    language: str = "English"
    photo_data_uri: str | None = None

    @classmethod
    def from_request(cls, request: GenerationRequest) -> "GenerateStoryInput":
        return cls(
            prompt=request.prompt_text,
            max_length=request.max_words,
            temperature=request.randomness,
            language=request.language,
            photo_data_uri=request.image_data_uri,
        )


@dataclass(frozen=True)
class GenerateStoryOutput:
    story: str


async def generate_story_continuation(backend: LLMBackend, data: GenerateStoryInput) -> GenerateStoryOutput:
    """
    Write a story from a prompt, a photo, or both.

    With a photo the story is built around the people in it and the prompt is
    only a secondary theme. ``temperature`` is passed straight to the model.

    Raises:
        GenerationFailedError: On any upstream failure or an empty story.
    """
    try:
        prompt = build_continuation_prompt(data.prompt, data.photo_data_uri, data.language, data.max_length)
    except ValueError as e:
        raise GenerationFailedError(str(e)) from e

    logger.info("Generating %s-grounded story (%s, <=%d words)", prompt.kind, data.language, data.max_length)
    with _upstream(lambda e: GenerationFailedError(str(e), details=_failure_details(e))):
        story = await backend.generate_text(prompt.contents(), temperature=data.temperature)

    if not story or not story.strip():
        raise GenerationFailedError("the model returned an empty story")
    return GenerateStoryOutput(story=story.strip())


# -- length adjustment -------------------------------------------------------------


@dataclass(frozen=True)
class AdjustStoryLengthInput:
    story: str
    max_length: int = 100


@dataclass(frozen=True)
class AdjustStoryLengthOutput:
    adjusted_story: str


async def adjust_story_length(backend: LLMBackend, data: AdjustStoryLengthInput) -> AdjustStoryLengthOutput:
    """Rewrite a story to at most ``max_length`` words without cutting it off mid-thought."""
    with _upstream(lambda e: GenerationFailedError(str(e), details=_failure_details(e))):
        adjusted = await backend.generate_text([adjust_length_prompt(data.story, data.max_length)])

    if not adjusted:
        raise GenerationFailedError("the model returned an empty story")
    return AdjustStoryLengthOutput(adjusted_story=adjusted)


# -- randomness-tuned continuation ---------------------------------------------------


@dataclass(frozen=True)
class AdjustStoryRandomnessInput:
    prompt: str
    temperature: float
    max_length: int

    def __post_init__(self) -> None:
        _require_range("temperature", self.temperature)
        _require_range("max_length", self.max_length)


@dataclass(frozen=True)
class AdjustStoryRandomnessOutput:
    story: str


async def adjust_story_randomness(
    backend: LLMBackend, data: AdjustStoryRandomnessInput
) -> AdjustStoryRandomnessOutput:
    """Continue a story at an explicit temperature under the creative safety thresholds."""
    with _upstream(lambda e: GenerationFailedError(str(e), details=_failure_details(e))):
        story = await backend.generate_text(
            [randomness_prompt(data.prompt, data.max_length)],
            temperature=data.temperature,
            safety_thresholds=CREATIVE_SAFETY_THRESHOLDS,
        )

    if not story:
        raise GenerationFailedError("the model returned an empty story")
    return AdjustStoryRandomnessOutput(story=story)


# -- illustration ----------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateStoryImageInput:
    story: str


@dataclass(frozen=True)
class GenerateStoryImageOutput:
    image_data_uri: str


async def generate_story_image(backend: LLMBackend, data: GenerateStoryImageInput) -> GenerateStoryImageOutput:
    """
    Illustrate a story in two steps: a short storybook-style brief, then the image.

    Raises:
        ImageGenerationError: If either step fails. No partial result is returned.
    """
    with _upstream(lambda e: ImageGenerationError(details={"stage": "brief", **_failure_details(e)})):
        brief = await backend.generate_text([illustration_brief_prompt(data.story)])
    if not brief:
        raise ImageGenerationError(details={"stage": "brief", "error": "empty illustration prompt"})

    logger.info("Illustration brief: %s", brief)
    with _upstream(lambda e: ImageGenerationError(details={"stage": "image", **_failure_details(e)})):
        image = await backend.generate_image(brief, safety_thresholds=CREATIVE_SAFETY_THRESHOLDS)
    if image is None or not image.data:
        raise ImageGenerationError(details={"stage": "image", "error": "no image returned"})

    return GenerateStoryImageOutput(image_data_uri=image.to_uri())


# -- narration ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateStoryAudioInput:
    story: str


@dataclass(frozen=True)
class GenerateStoryAudioOutput:
    audio_data_uri: str


async def generate_story_audio(backend: LLMBackend, data: GenerateStoryAudioInput) -> GenerateStoryAudioOutput:
    """
    Narrate a story and return it as a ``data:audio/wav`` URI.

    Raises:
        AudioGenerationError: If the call fails or no audio comes back.
    """
    with _upstream(lambda e: AudioGenerationError(str(e), details=_failure_details(e))):
        pcm = await backend.generate_speech(data.story)
    if not pcm:
        raise AudioGenerationError()

    return GenerateStoryAudioOutput(audio_data_uri=build_data_uri(WAV_MIME_TYPE, pcm_to_wav(pcm)))
