"""Offline backend used by ``--debug``.

Returns a canned story, a drawn placeholder illustration and a second of
silence, so the whole workflow (history, export, narration) can be exercised
without an API key.
"""

from collections.abc import Mapping, Sequence
from io import BytesIO

from PIL import Image, ImageDraw

from .audio import SAMPLE_RATE, SAMPLE_WIDTH
from .llm_backend import LLMBackend
from .media import DataUri
from .prompt import PromptContent

DEBUG_STORY = (
    "The lighthouse keeper rubbed his eyes. Far out on the dark water, a small green light "
    "blinked three times and then went still.\n\n"
    "He took his lantern and walked down to the rocks. A little boat was waiting there, "
    "and in the boat sat a girl with a map. \"I am lost,\" she said. \"Can your light show me home?\"\n\n"
    "The keeper smiled. He climbed back up the tower and turned the great lamp toward the sea. "
    "The beam showed a path across the waves, and the girl followed it all the way home."
)

DEBUG_PHOTO_STORY = (
    "Two friends stand close together and laugh at something only they can see. "
    "One holds a small gift behind her back. Today is the day she finally says thank you."
)


class DebugBackend(LLMBackend):
    name = "debug"

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def generate_text(
        self,
        contents: Sequence[PromptContent],
        *,
        temperature: float | None = None,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> str:
        self.calls.append("text")
        instructions = " ".join(item for item in contents if isinstance(item, str))
        if "prompts for an image generation AI" in instructions:
            return "A whimsical lighthouse on a rocky shore at night, a tiny boat following a warm golden beam."
        if any(isinstance(item, DataUri) for item in contents):
            return DEBUG_PHOTO_STORY
        return DEBUG_STORY

    async def generate_image(
        self,
        prompt: str,
        *,
        safety_thresholds: Mapping[str, str] | None = None,
    ) -> DataUri | None:
        self.calls.append("image")
        img = Image.new("RGB", (640, 360), (32, 48, 96))
        draw = ImageDraw.Draw(img)
        draw.ellipse((500, 40, 580, 120), fill=(250, 230, 140))
        draw.rectangle((80, 160, 120, 330), fill=(235, 235, 235))
        draw.polygon([(70, 160), (130, 160), (100, 120)], fill=(200, 40, 40))
        buffer = BytesIO()
        img.save(buffer, format="PNG")
        return DataUri(mime_type="image/png", data=buffer.getvalue())

    async def generate_speech(self, text: str) -> bytes | None:
        self.calls.append("speech")
        return b"\x00" * (SAMPLE_RATE * SAMPLE_WIDTH)
