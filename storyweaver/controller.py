"""
Story Weaver session controller.

Runs the user-facing workflows on top of the state transitions in
``storyweaver.state``: submit (story, then illustration), narration on demand,
history selection, editing, PDF export and sharing. Failures are reported as
``Notification``s rather than raised; only the failed step is reported and
everything already produced is kept.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from . import state as transitions
from .export import DEFAULT_PDF_FILENAME, ExportReport, export_story_pdf
from .flows import (
    GenerateStoryAudioInput,
    GenerateStoryImageInput,
    GenerateStoryInput,
    generate_story_audio,
    generate_story_continuation,
    generate_story_image,
)
from .form import GenerationRequest
from .history import HistoryStore
from .llm_backend import LLMBackend
from .share import CLIPBOARD_DESTINATIONS, ShareTarget, StorySharer
from .shared.errors import (
    AudioGenerationError,
    ExportError,
    ImageGenerationError,
    ShareError,
    StoryWeaverError,
)
from .shared.types import Notification, NotificationVariant
from .state import AppState

logger = logging.getLogger(__name__)

_CLIPBOARD_TARGETS = {target.value for target in CLIPBOARD_DESTINATIONS}


class StoryController:
    """
    Owns the current ``AppState`` and moves it forward one action at a time.

    Args:
        backend: Model backend used by the flows; None for sessions that only read, export or share.
        history_store: Where the history is loaded from and saved to.
        sharer: Share dispatcher; a default ``StorySharer`` if omitted.
        notify: Called with every notification as it is emitted.
        generate_images: Illustrate each new story after it is generated.
    """

    def __init__(
        self,
        backend: LLMBackend | None,
        history_store: HistoryStore,
        sharer: StorySharer | None = None,
        notify: Callable[[Notification], None] | None = None,
        generate_images: bool = True,
    ) -> None:
        self.backend = backend
        self.history_store = history_store
        self.sharer = sharer or StorySharer()
        self.notify = notify
        self.generate_images = generate_images
        self.notifications: list[Notification] = []
        self.state = AppState(history=history_store.load())

    def _emit(self, title: str, description: str, destructive: bool = False) -> Notification:
        variant = NotificationVariant.DESTRUCTIVE if destructive else NotificationVariant.DEFAULT
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications.append(notification)
        if self.notify:
            self.notify(notification)
        return notification

    def _refuse_unless(self, allowed: bool) -> bool:
        """Emit the reason an action on the current story is unavailable; return ``allowed``."""
        if allowed:
            return True
        if self.state.story is None:
            self._emit("No Story", "Generate a story or pick one from your history first.", destructive=True)
        elif self.state.editing:
            self._emit("Editing", "Save your changes before using the story.", destructive=True)
        else:
            self._emit("Please Wait", "The story is still being prepared.", destructive=True)
        return False

    def _require_backend(self) -> LLMBackend | None:
        if self.backend is None:
            self._emit("No Model Backend", "Set GEMINI_API_KEY or use --debug to generate content.", destructive=True)
        return self.backend

    @property
    def story_text(self) -> str | None:
        return self.state.story.text if self.state.story else None

    # -- generation ----------------------------------------------------------

    async def submit(self, request: GenerationRequest) -> bool:
        """
        Generate a story for ``request`` and then illustrate it.

        Returns:
            bool: True if a story was produced, even if the illustration failed.
        """
        if self.state.busy:
            if self.state.story_loading:
                self._emit("Please Wait", "A story is already being generated.", destructive=True)
            else:
                self._emit("Please Wait", "The current story is still being illustrated or narrated.", destructive=True)
            return False

        backend = self._require_backend()
        if backend is None:
            return False

        self.state = transitions.start_generation(self.state)
        try:
            result = await generate_story_continuation(backend, GenerateStoryInput.from_request(request))
        except StoryWeaverError as e:
            logger.error("Story generation failed: %s", e.message)
            self.state = transitions.story_failed(self.state)
            self._emit("Error", "Failed to generate story. Please try again.", destructive=True)
            return False

        self.state = transitions.story_generated(self.state, result.story)
        self.history_store.save(self.state.history)

        if self.generate_images:
            await self.illustrate()
        return True

    async def illustrate(self) -> bool:
        """Illustrate the current story. A failure keeps the story and history as they are."""
        story = self.state.story
        if story is None:
            return False
        backend = self._require_backend()
        if backend is None:
            return False

        self.state = transitions.start_illustration(self.state)
        try:
            result = await generate_story_image(backend, GenerateStoryImageInput(story=story.text))
        except ImageGenerationError as e:
            logger.error("Image generation failed: %s", e.details)
            self.state = transitions.illustration_failed(self.state)
            self._emit(
                "Image Generation Failed",
                "The story was created, but the image could not be generated.",
                destructive=True,
            )
            return False

        if self.state.story != story:
            logger.info("Story changed while illustrating; discarding image")
            self.state = transitions.illustration_failed(self.state)
            return False

        self.state = transitions.illustration_ready(self.state, result.image_data_uri)
        return True

    async def listen(self) -> bool:
        """Narrate the current story."""
        if not self._refuse_unless(self.state.can_listen):
            return False
        backend = self._require_backend()
        if backend is None:
            return False

        story = self.state.story
        self.state = transitions.start_narration(self.state)
        try:
            result = await generate_story_audio(backend, GenerateStoryAudioInput(story=story.text))
        except AudioGenerationError as e:
            logger.error("Error generating audio: %s", e.message)
            self.state = transitions.narration_failed(self.state)
            self._emit(
                "Audio Generation Failed",
                "Something went wrong while generating the audio.",
                destructive=True,
            )
            return False

        self.state = transitions.narration_ready(self.state, result.audio_data_uri)
        return True

    # -- history and editing ------------------------------------------------

    def select_story(self, index: int) -> str:
        """
        Make history entry ``index`` (0 is newest) the current story.

        Raises:
            IndexError: If there is no such entry.
        """
        self.state = transitions.select_from_history(self.state, index)
        return self.state.story.text

    def attach_illustration(self, image_data_uri: str) -> None:
        """Use an existing image as the illustration of the current story."""
        if self.state.story is not None:
            self.state = transitions.illustration_ready(self.state, image_data_uri)

    def clear_history(self) -> None:
        self.state = transitions.clear_history(self.state)
        self.history_store.clear()
        self._emit("History Cleared", "Your story history has been cleared.")

    def toggle_edit(self) -> bool:
        """Enter or leave edit mode. Returns True while editing."""
        was_editing = self.state.editing
        self.state = transitions.toggle_edit(self.state)
        if was_editing and not self.state.editing:
            self._emit("Story Saved", "Your changes are available for sharing or downloading.")
        return self.state.editing

    def update_draft(self, text: str) -> None:
        self.state = transitions.update_draft(self.state, text)

    def edit_story(self, text: str) -> None:
        """Replace the current story text in one step (enter edit mode, set the draft, save)."""
        if self.state.story is None:
            self._refuse_unless(False)
            return
        if not self.state.editing:
            self.toggle_edit()
        self.update_draft(text)
        self.toggle_edit()

    # -- export and sharing -------------------------------------------------

    def export_pdf(
        self,
        output_path: Path | str = DEFAULT_PDF_FILENAME,
        font_path: Path | str | None = None,
    ) -> ExportReport | None:
        """Write the current story and illustration to a PDF; returns None if nothing was written."""
        if not self._refuse_unless(self.state.can_export):
            return None

        illustration = self.state.illustration
        try:
            report = export_story_pdf(
                self.state.story.text,
                output_path,
                image_data_uri=illustration.image_data_uri if illustration else None,
                font_path=font_path,
            )
        except ExportError as e:
            logger.error("PDF export failed: %s", e.details)
            self._emit("Download Failed", "There was an error trying to download the story.", destructive=True)
            return None

        for warning in report.warnings:
            self._emit("PDF Image Error", warning, destructive=True)
        self._emit("Download Complete", f"Your story was saved as {report.path}.")
        return report

    def share(self, target: ShareTarget | str) -> bool:
        """Share the current story through ``target``. Returns False if sharing failed or was refused."""
        if not self._refuse_unless(self.state.can_share):
            return False

        try:
            notification = self.sharer.share(self.state.story.text, target)
        except ShareError as e:
            title = "Copy Failed" if e.target in _CLIPBOARD_TARGETS else "Share Failed"
            self._emit(title, e.message, destructive=True)
            return False

        if notification:
            self.notifications.append(notification)
            if self.notify:
                self.notify(notification)
        return True