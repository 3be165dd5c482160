"""Shared Rich console instance for Story Weaver.

All modules should import console from here instead of creating their own
Console() instances, ensuring consistent output behavior.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route library logging through Rich; quiet unless verbose or debug."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=debug, show_path=debug)],
        force=True,
    )
    # The SDK's HTTP layer is chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
