"""
Story Weaver: AI-assisted short story writer.

A CLI tool that continues a story from a text prompt or a photo using Google
Gemini, illustrates it, narrates it on request and keeps a rolling history of
the last 20 stories.

Main Features:
- Story continuation from a prompt, a photo, or both
- Storybook-style illustration for every new story
- Text-to-speech narration saved as WAV
- PDF export and sharing (deep links or clipboard)
- Schema-driven configuration

CLI Usage:
    $ storyweaver "The old lighthouse keeper saw a strange light"
    $ storyweaver --image family.jpg --listen
    $ python -m storyweaver history list
"""

# Main CLI interface
from .StoryWeaver import app

# Version info
__version__ = "0.1.0"

# Main exports
__all__ = [
    "app",  # Main CLI application
]
