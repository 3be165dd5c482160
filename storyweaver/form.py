"""
Input form for story generation.

Collects prompt text, an optional image, target language, length cap and
randomness, and turns them into a GenerationRequest. Numeric ranges and the
language list come from the configuration schema so the form, the config file
and the CLI agree on what is acceptable.
"""

from dataclasses import dataclass

from .media import parse_data_uri
from .schema import STORYWEAVER_SCHEMA, SchemaValidator
from .shared.errors import FormValidationError

DEFAULT_PROMPT = "Once upon a time, in a land of towering crystal mountains..."
MIN_PROMPT_CHARS = 10
MAX_PROMPT_CHARS = 500

_validator = SchemaValidator(STORYWEAVER_SCHEMA)


@dataclass(frozen=True)
class GenerationRequest:
    """One submit of the form. Created per submit and consumed once."""

    prompt_text: str | None
    image_data_uri: str | None
    max_words: int
    randomness: float
    language: str


def _check_schema_field(field_name: str, form_field: str, value) -> None:
    errors = _validator.validate_cli_argument(field_name, value)
    if errors:
        raise FormValidationError(form_field, errors[0].message)


def validate_form(
    prompt_text: str | None,
    image_data_uri: str | None = None,
    max_words: int = 250,
    randomness: float = 0.8,
    language: str = "English",
) -> GenerationRequest:
    """
    Validate form values and build a GenerationRequest.

    Either an image must be attached or the prompt must hold at least
    ``MIN_PROMPT_CHARS`` non-blank characters. With an image attached the
    minimum prompt length is not enforced.

    Raises:
        FormValidationError: Naming the offending field. Nothing has been sent
            to the model when this is raised.
    """
    prompt = prompt_text.strip() if prompt_text else ""
    image = image_data_uri or None
    language = language or "English"

    if len(prompt) > MAX_PROMPT_CHARS:
        raise FormValidationError("prompt", f"Prompt cannot exceed {MAX_PROMPT_CHARS} characters.")

    if image is not None:
        try:
            parsed = parse_data_uri(image)
        except ValueError as e:
            raise FormValidationError("image", str(e)) from e
        if not parsed.mime_type.startswith("image/"):
            raise FormValidationError("image", f"Expected an image, got {parsed.mime_type}")
    elif len(prompt) < MIN_PROMPT_CHARS:
        raise FormValidationError(
            "prompt",
            f"A prompt of at least {MIN_PROMPT_CHARS} characters is required if no image is uploaded.",
        )

    _check_schema_field("max_length", "max_words", max_words)
    _check_schema_field("temperature", "randomness", randomness)
    _check_schema_field("language", "language", language)

    return GenerationRequest(
        prompt_text=prompt or None,
        image_data_uri=image,
        max_words=int(max_words),
        randomness=float(randomness),
        language=language,
    )
