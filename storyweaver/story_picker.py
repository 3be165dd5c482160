"""Interactive TUI history picker using Textual.

Provides a full-screen picker over the saved story history with arrow-key
navigation, a live preview panel, and a full-story reading view.
"""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, OptionList, Static

LABEL_CHARS = 48
PREVIEW_CHARS = 400


def story_label(index: int, story: str, width: int = LABEL_CHARS) -> str:
    """One-line list label: position plus the start of the story's first line."""
    first_line = story.strip().splitlines()[0] if story.strip() else "(empty story)"
    if len(first_line) > width:
        first_line = first_line[: width - 3].rstrip() + "..."
    return f"{index + 1}. {first_line}"


def story_preview(story: str, limit: int = PREVIEW_CHARS) -> str:
    text = story.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


class StoryPicker(App[int | None]):
    """Full-screen history picker with live preview and full-story view.

    Modes:
    - **Picker**: OptionList on the left, word count + preview on the right.
      Press Enter to open the full story.  Press Escape / q to cancel.
    - **Full story**: Scrollable full story text.
      Press Enter to confirm selection.  Press Escape to go back to the picker.

    Returns the selected history index (0 is newest) or None if cancelled.
    """

    TITLE = "Story Weaver - Story History"

    CSS = """
    #picker-layout {
        height: 1fr;
    }

    #story-list {
        width: 1fr;
        min-width: 30;
        border: solid $primary;
    }

    #story-list:focus {
        border: solid $accent;
    }

    #preview-panel {
        width: 2fr;
        border: solid $primary;
        padding: 1 2;
        overflow-y: auto;
    }

    #full-story-view {
        display: none;
        height: 1fr;
        border: solid $accent;
        padding: 1 2;
    }

    #full-story-view.visible {
        display: block;
    }

    #picker-layout.hidden {
        display: none;
    }
    """

    BINDINGS = [
        Binding("escape", "back_or_cancel", "Back / Cancel", show=True),
        Binding("enter", "confirm", "Select", show=True),
        Binding("q", "quit_app", "Quit", show=True, priority=True),
    ]

    def __init__(self, stories: Sequence[str]) -> None:
        """Initialize the picker with history entries, newest first."""
        super().__init__()
        self._stories = list(stories)
        self._viewing_full_story = False
        self._highlighted_index: int | None = None

    def compose(self) -> ComposeResult:
        """Build the picker layout: header, list + preview, full-story container, footer."""
        yield Header()
        with Horizontal(id="picker-layout"):
            options = [story_label(idx, story) for idx, story in enumerate(self._stories)]
            yield OptionList(*options, id="story-list")
            yield Static("Select a story to see its preview.", id="preview-panel")
        yield VerticalScroll(Static("", id="full-story-content", markup=False), id="full-story-view")
        yield Footer()

    def on_mount(self) -> None:
        """Focus the list and show the newest story's preview."""
        option_list = self.query_one("#story-list", OptionList)
        option_list.focus()
        if self._stories:
            self._highlighted_index = 0
            self._update_preview(0)

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        self._highlighted_index = event.option_index
        self._update_preview(event.option_index)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """When Enter is pressed on a list item, show the full story view."""
        self._highlighted_index = event.option_index
        self._show_full_story()

    # -- actions ---------------------------------------------------------------

    def action_back_or_cancel(self) -> None:
        """Escape: return to picker from full-story view, or cancel entirely."""
        if self._viewing_full_story:
            self._show_picker()
        else:
            self.exit(None)

    def action_confirm(self) -> None:
        """Enter: in full-story view, confirm the selection."""
        if self._viewing_full_story and self._highlighted_index is not None:
            self.exit(self._highlighted_index)
        # In picker mode OptionList handles Enter natively (fires OptionSelected).

    def action_quit_app(self) -> None:
        self.exit(None)

    # -- view switching --------------------------------------------------------

    def _show_full_story(self) -> None:
        if self._highlighted_index is None:
            return

        story = self._stories[self._highlighted_index]
        content = (
            f"Story {self._highlighted_index + 1} of {len(self._stories)}\n"
            "Enter: use this story  -  Esc: back to list\n\n"
            f"{story}"
        )

        self.query_one("#full-story-content", Static).update(content)
        self.query_one("#picker-layout").add_class("hidden")
        self.query_one("#full-story-view").add_class("visible")
        self.query_one("#full-story-view").focus()
        self._viewing_full_story = True

    def _show_picker(self) -> None:
        self.query_one("#full-story-view").remove_class("visible")
        self.query_one("#picker-layout").remove_class("hidden")
        self.query_one("#story-list", OptionList).focus()
        self._viewing_full_story = False

    # -- helpers ---------------------------------------------------------------

    def _update_preview(self, index: int) -> None:
        if index < 0 or index >= len(self._stories):
            return

        story = self._stories[index]
        position = "newest" if index == 0 else f"{index + 1} of {len(self._stories)}"
        lines = [
            f"[bold cyan]Story {index + 1}[/bold cyan] [dim]({position})[/dim]",
            "",
            f"[bold]Words:[/bold] {len(story.split())}",
            "",
            "[bold]Preview:[/bold]",
            story_preview(story).replace("[", r"\["),
            "",
            "[dim]Press Enter to read full story[/dim]",
        ]

        panel = self.query_one("#preview-panel", Static)
        panel.update("\n".join(lines))


def pick_story(stories: Sequence[str]) -> int | None:
    """Run the interactive history picker and return the selected index (0 is newest) or None.

    Returns:
        Selected index or None if cancelled or the history is empty.
    """
    if not stories:
        return None
    app = StoryPicker(stories)
    return app.run()
