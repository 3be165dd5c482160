"""Entry point for ``python -m storyweaver``."""

from .StoryWeaver import cli_entry

if __name__ == "__main__":
    cli_entry()
