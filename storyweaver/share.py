"""
Sharing a story.

Messaging and email targets are reached through deep links opened with the
system URL handler. Networks that only accept media (Instagram, Snapchat) get
the text on the clipboard with a hint to paste it there. A platform share
sheet can be plugged in as ``native_share``; the CLI has none.
"""

import logging
import webbrowser
from collections.abc import Callable
from enum import Enum
from urllib.parse import quote

import pyperclip

from .shared.errors import ShareError
from .shared.types import Notification

logger = logging.getLogger(__name__)

SHARE_TITLE = "A story from Story Weaver"

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


class ShareTarget(str, Enum):
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    COPY = "copy"
    INSTAGRAM = "instagram"
    SNAPCHAT = "snapchat"
    NATIVE = "native"


# Where the user is told to paste the copied story
CLIPBOARD_DESTINATIONS = {
    ShareTarget.COPY: "your clipboard",
    ShareTarget.INSTAGRAM: "Instagram",
    ShareTarget.SNAPCHAT: "Snapchat",
}


class ShareAborted(Exception):
    """Raised by a native share callable when the user dismisses the share sheet."""


def encode_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def whatsapp_url(story: str) -> str:
    return f"whatsapp://send?text={encode_component(story)}"


def mailto_url(story: str, subject: str = SHARE_TITLE) -> str:
    return f"mailto:?subject={encode_component(subject)}&body={encode_component(story)}"


class StorySharer:
    """
    Dispatches a story to a share target.

    Args:
        open_url: Opens a URL; returns False if nothing could open it. Defaults to ``webbrowser.open``.
        copy: Puts text on the clipboard. Defaults to ``pyperclip.copy``.
        native_share: Optional ``(title, text)`` callable for a platform share sheet.
    """

    def __init__(
        self,
        open_url: Callable[[str], bool] | None = None,
        copy: Callable[[str], None] | None = None,
        native_share: Callable[[str, str], None] | None = None,
    ) -> None:
        self.open_url = open_url or webbrowser.open
        self.copy = copy or pyperclip.copy
        self.native_share = native_share

    def share(self, story: str, target: ShareTarget | str) -> Notification | None:
        """
        Share ``story`` through ``target``.

        Returns:
            Notification | None: A confirmation for clipboard targets, None otherwise.
            A dismissed native share sheet also returns None.

        Raises:
            ShareError: If the target is unknown or the share could not be carried out.
        """
        try:
            target = ShareTarget(target)
        except ValueError as e:
            raise ShareError(str(target), f"Unknown share target '{target}'") from e

        if target is ShareTarget.WHATSAPP:
            self._open(target, whatsapp_url(story))
            return None

        if target is ShareTarget.EMAIL:
            self._open(target, mailto_url(story))
            return None

        if target is ShareTarget.NATIVE:
            self._share_natively(story)
            return None

        destination = CLIPBOARD_DESTINATIONS[target]
        try:
            self.copy(story)
        except (pyperclip.PyperclipException, OSError) as e:
            logger.error("Failed to copy story to clipboard for %s: %s", destination, e)
            raise ShareError(target.value, "Could not copy the story to your clipboard.") from e

        return Notification(
            title="Story Copied",
            description=f"The story has been copied. You can now paste it in {destination}.",
        )

    def _open(self, target: ShareTarget, url: str) -> None:
        logger.info("Opening %s share link", target.value)
        if not self.open_url(url):
            raise ShareError(target.value, f"No application is registered to open {target.value} links.")

    def _share_natively(self, story: str) -> None:
        if self.native_share is None:
            raise ShareError(ShareTarget.NATIVE.value, "Native sharing is not available on this platform.")
        try:
            self.native_share(SHARE_TITLE, story)
        except ShareAborted:
            logger.debug("Native share dismissed")
        except Exception as e:
            logger.error("Error sharing story: %s", e)
            raise ShareError(ShareTarget.NATIVE.value, "There was an error trying to share the story.") from e
