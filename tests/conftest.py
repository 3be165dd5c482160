"""Pytest configuration for Story Weaver tests."""

from io import BytesIO

import pytest
from PIL import Image

from storyweaver.media import build_data_uri


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep config, history and API keys of the developer machine out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("STORYWEAVER_HISTORY", str(tmp_path / "story_history.json"))
    for name in (
        "STORYWEAVER_CONFIG",
        "GEMINI_API_KEY",
        "LLM_BACKEND",
        "GEMINI_TEXT_MODEL",
        "GEMINI_IMAGE_MODEL",
        "GEMINI_TTS_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def make_png(width: int = 4, height: int = 2) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes):
    return build_data_uri("image/png", png_bytes)


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "story_history.json"


@pytest.fixture
def png_uri_factory():
    def _make(width: int = 4, height: int = 2) -> str:
        return build_data_uri("image/png", make_png(width, height))

    return _make
