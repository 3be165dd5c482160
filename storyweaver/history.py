"""
Story history persistence.

The history is a newest-first list of story texts capped at ``HISTORY_LIMIT``
entries, stored as a JSON array in the user data directory. Entries are only
ever prepended or cleared wholesale. An empty history has no file on disk.
"""

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from platformdirs import user_data_dir

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
HISTORY_FILENAME = "story_history.json"


def prepend_story(history: Sequence[str], story: str, limit: int = HISTORY_LIMIT) -> tuple[str, ...]:
    """Return a new history with ``story`` first, dropping the oldest entries past ``limit``."""
    return (story, *history)[:limit]


def default_history_path() -> Path:
    """History file location; ``STORYWEAVER_HISTORY`` overrides the data directory."""
    env_path = os.environ.get("STORYWEAVER_HISTORY")
    if env_path:
        return Path(env_path)
    return Path(user_data_dir("storyweaver", "storyweaver")) / HISTORY_FILENAME


class HistoryStore:
    """Loads and saves the story history file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_history_path()

    def load(self) -> tuple[str, ...]:
        """
        Read the history.

        A missing file is an empty history. A file that does not hold a JSON
        array of strings is logged, removed and treated as empty.
        """
        if not self.path.exists():
            return ()

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
                raise ValueError("expected a JSON array of strings")
        except (OSError, ValueError) as e:
            logger.error("Failed to parse story history from %s: %s", self.path, e)
            self._remove()
            return ()

        return tuple(data[:HISTORY_LIMIT])

    def save(self, history: Sequence[str]) -> None:
        """Write the history, or remove the file when it is empty. Write failures are logged."""
        if not history:
            self._remove()
            return

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(list(history[:HISTORY_LIMIT]), f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("Failed to save story history to %s: %s", self.path, e)

    def clear(self) -> None:
        self._remove()

    def _remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove story history %s: %s", self.path, e)
