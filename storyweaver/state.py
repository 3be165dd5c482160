"""
Application state for a Story Weaver session.

``AppState`` is a frozen snapshot; every user action has a transition function
here that takes the current state and returns the next one. Nothing in this
module talks to a backend or the filesystem, the controller does that and
feeds the outcomes back through these transitions.

Derived results (illustration, narration) belong to the story they were made
from and are dropped whenever the story is replaced.
"""

from dataclasses import dataclass, replace

from .history import HISTORY_LIMIT, prepend_story


@dataclass(frozen=True)
class StoryResult:
    text: str


@dataclass(frozen=True)
class IllustrationResult:
    image_data_uri: str


@dataclass(frozen=True)
class NarrationResult:
    audio_data_uri: str


@dataclass(frozen=True)
class AppState:
    story: StoryResult | None = None
    history: tuple[str, ...] = ()
    illustration: IllustrationResult | None = None
    narration: NarrationResult | None = None

    # In-flight flags, independent of each other
    story_loading: bool = False
    image_loading: bool = False
    audio_loading: bool = False

    editing: bool = False
    draft: str = ""

    @property
    def busy(self) -> bool:
        return self.story_loading or self.image_loading or self.audio_loading

    @property
    def can_listen(self) -> bool:
        return self.story is not None and not self.editing and not self.image_loading and not self.audio_loading

    @property
    def can_share(self) -> bool:
        return self.story is not None and not self.editing

    @property
    def can_export(self) -> bool:
        return self.story is not None and not self.editing and not self.image_loading


# -- generation --------------------------------------------------------------


def start_generation(state: AppState) -> AppState:
    """Drop the current story and everything derived from it, then mark the story request in flight."""
    return replace(
        state,
        story=None,
        illustration=None,
        narration=None,
        editing=False,
        draft="",
        story_loading=True,
    )


def story_generated(state: AppState, text: str, limit: int = HISTORY_LIMIT) -> AppState:
    return replace(
        state,
        story=StoryResult(text),
        history=prepend_story(state.history, text, limit),
        story_loading=False,
    )


def story_failed(state: AppState) -> AppState:
    return replace(state, story_loading=False)


# -- illustration ------------------------------------------------------------


def start_illustration(state: AppState) -> AppState:
    return replace(state, illustration=None, image_loading=True)


def illustration_ready(state: AppState, image_data_uri: str) -> AppState:
    return replace(state, illustration=IllustrationResult(image_data_uri), image_loading=False)


def illustration_failed(state: AppState) -> AppState:
    return replace(state, image_loading=False)


# -- narration ---------------------------------------------------------------


def start_narration(state: AppState) -> AppState:
    return replace(state, narration=None, audio_loading=True)


def narration_ready(state: AppState, audio_data_uri: str) -> AppState:
    return replace(state, narration=NarrationResult(audio_data_uri), audio_loading=False)


def narration_failed(state: AppState) -> AppState:
    return replace(state, audio_loading=False)


# -- history -----------------------------------------------------------------


def select_from_history(state: AppState, index: int) -> AppState:
    """
    Make history entry ``index`` (0 is newest) the current story.

    Raises:
        IndexError: If there is no such entry.
    """
    if not 0 <= index < len(state.history):
        raise IndexError(f"No story at history position {index}")
    return replace(
        state,
        story=StoryResult(state.history[index]),
        illustration=None,
        narration=None,
        editing=False,
        draft="",
    )


def clear_history(state: AppState) -> AppState:
    return replace(state, history=())


# -- editing -----------------------------------------------------------------


def toggle_edit(state: AppState) -> AppState:
    """
    Enter edit mode, or leave it and commit the draft as the current story.

    Leaving edit mode does not touch the history. If the committed text differs
    from the story, the illustration and narration no longer match it and are dropped.
    """
    if state.story is None:
        return state

    if not state.editing:
        return replace(state, editing=True, draft=state.story.text)

    if state.draft == state.story.text:
        return replace(state, editing=False, draft="")

    return replace(
        state,
        story=StoryResult(state.draft),
        illustration=None,
        narration=None,
        editing=False,
        draft="",
    )


def update_draft(state: AppState, text: str) -> AppState:
    if not state.editing:
        return state
    return replace(state, draft=text)
