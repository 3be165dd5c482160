"""
Prompt builders for story, illustration and length requests.

Story continuation has two shapes, each with its own constructor:

- ``TextContinuationPrompt``: continue the story the user started.
- ``ImageContinuationPrompt``: build the story around the people in a photo,
  with the user's text (if any) as a secondary theme.

``build_continuation_prompt`` picks the variant. Each variant renders a
complete ``contents`` list (instruction text, plus the photo for the image
variant) that a backend can send as-is, so no template branching happens at
call time.
"""

from dataclasses import dataclass
from typing import ClassVar, Literal

from .media import DataUri, parse_data_uri

ILLUSTRATION_BRIEF_MAX_WORDS = 30

PromptContent = str | DataUri


def _writer_preamble(language: str, max_words: int) -> str:
    return (
        f"You are a creative story writer. Your task is to write a story in {language}, "
        f"with a maximum length of {max_words} words. Be creative and ensure that each story "
        "you generate is unique, even if the starting prompt is the same. Use simple and clear "
        "language that is easy for a new language learner to understand."
    )


@dataclass(frozen=True)
class TextContinuationPrompt:
    """Continue a story from the user's opening text."""

    kind: ClassVar[Literal["text"]] = "text"

    prompt_text: str
    language: str
    max_words: int

    @property
    def instructions(self) -> str:
        return (
            f"{_writer_preamble(self.language, self.max_words)}\n\n"
            f"Continue the following story based on the prompt given by the user: {self.prompt_text}"
        )

    def contents(self) -> list[PromptContent]:
        return [self.instructions]


@dataclass(frozen=True)
class ImageContinuationPrompt:
    """Write a story grounded in the people shown in a photo."""

    kind: ClassVar[Literal["image"]] = "image"

    photo: DataUri
    language: str
    max_words: int
    prompt_text: str | None = None

    @property
    def instructions(self) -> str:
        parts = [
            _writer_preamble(self.language, self.max_words),
            "",
            "Your primary inspiration for the story MUST come from the provided image. Analyze it carefully.",
            "Specifically, focus on the people present. Describe their apparent emotions based on their "
            "facial expressions and body language.",
            "What is the relationship between them? What might have just happened, or what is about to happen?",
            "The core of the story must revolve around the people in the image.",
        ]
        if self.prompt_text:
            parts.append(
                "The user's text prompt should serve as a secondary theme or a starting sentence, "
                "but it is less important than the image."
            )
            parts.append(f"User's Prompt: {self.prompt_text}")
        parts.append("Photo:")
        return "\n".join(parts)

    def contents(self) -> list[PromptContent]:
        return [self.instructions, self.photo]


ContinuationPrompt = TextContinuationPrompt | ImageContinuationPrompt


def build_continuation_prompt(
    prompt_text: str | None,
    photo_data_uri: str | None,
    language: str,
    max_words: int,
) -> ContinuationPrompt:
    """
    Choose and build the continuation variant.

    Raises:
        ValueError: If neither a prompt nor a photo is given, or the photo is not a data URI.
    """
    text = prompt_text.strip() if prompt_text else None
    if photo_data_uri:
        return ImageContinuationPrompt(
            photo=parse_data_uri(photo_data_uri),
            language=language,
            max_words=max_words,
            prompt_text=text or None,
        )
    if not text:
        raise ValueError("A story prompt or a photo is required")
    return TextContinuationPrompt(prompt_text=text, language=language, max_words=max_words)


def illustration_brief_prompt(story: str) -> str:
    """Ask for a short image-model prompt describing the story."""
    return (
        "You are an expert at creating prompts for an image generation AI. Based on the following "
        f"story, create a short, descriptive prompt (no more than {ILLUSTRATION_BRIEF_MAX_WORDS} words) "
        "for a whimsical, storybook style illustration. The prompt should capture the main visual "
        "elements and mood of the story.\n\n"
        f"Story: {story}"
    )


def adjust_length_prompt(story: str, max_length: int) -> str:
    return (
        f"Adjust the following story to be no more than {max_length} words long. Make sure that you "
        "do not cut off the story abruptly, and that it makes sense. Ensure proper sentence structure.\n\n"
        f"Story: {story}"
    )


def randomness_prompt(story_start: str, max_length: int) -> str:
    return (
        f"Continue the following story. The story should have a maximum length of {max_length} words. "
        "Be creative.\n\n"
        f"Story Start: {story_start}"
    )
