import os
from unittest.mock import MagicMock, patch

import pytest

from storyweaver.debug_backend import DebugBackend
from storyweaver.llm_backend import CREATIVE_SAFETY_THRESHOLDS, LLMBackend, get_backend
from storyweaver.shared.errors import BackendUnavailableError

pytestmark = pytest.mark.anyio


class DummyBackend(LLMBackend):
    name = "dummy"

    async def generate_text(self, contents, *, temperature=None, safety_thresholds=None):
        return await super().generate_text(contents, temperature=temperature, safety_thresholds=safety_thresholds)

    async def generate_image(self, prompt, *, safety_thresholds=None):
        return await super().generate_image(prompt, safety_thresholds=safety_thresholds)

    async def generate_speech(self, text):
        return await super().generate_speech(text)


async def test_generate_text_not_implemented():
    with pytest.raises(NotImplementedError):
        await DummyBackend().generate_text(["prompt"])


async def test_generate_image_not_implemented():
    with pytest.raises(NotImplementedError):
        await DummyBackend().generate_image("prompt")


async def test_generate_speech_not_implemented():
    with pytest.raises(NotImplementedError):
        await DummyBackend().generate_speech("story")


def test_creative_safety_thresholds():
    assert CREATIVE_SAFETY_THRESHOLDS == {
        "HARM_CATEGORY_HATE_SPEECH": "BLOCK_ONLY_HIGH",
        "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_NONE",
        "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_LOW_AND_ABOVE",
    }


class TestGetBackend:
    """Test the get_backend factory function."""

    @patch.dict(os.environ, {"GEMINI_API_KEY": "test_key"}, clear=True)
    @patch("storyweaver.gemini_backend.GeminiBackend")
    def test_get_backend_auto_detect_gemini(self, mock_gemini):
        """Test auto-detection of Gemini backend via API key."""
        mock_instance = MagicMock()
        mock_gemini.return_value = mock_instance

        backend = get_backend()

        mock_gemini.assert_called_once_with(text_model=None, image_model=None, tts_model=None, voice=None)
        assert backend == mock_instance

    @patch.dict(os.environ, {"GEMINI_API_KEY": "test_key"}, clear=True)
    @patch("storyweaver.gemini_backend.GeminiBackend")
    def test_get_backend_passes_model_overrides(self, mock_gemini):
        get_backend("gemini", text_model="t", image_model="", tts_model="s", voice="Kore")
        mock_gemini.assert_called_once_with(text_model="t", image_model=None, tts_model="s", voice="Kore")

    @patch.dict(os.environ, {}, clear=True)
    def test_get_backend_no_api_key(self):
        with pytest.raises(BackendUnavailableError) as exc_info:
            get_backend()
        assert "GEMINI_API_KEY" in exc_info.value.details["reason"]

    @patch.dict(os.environ, {"LLM_BACKEND": "debug"}, clear=True)
    def test_get_backend_from_environment(self):
        assert isinstance(get_backend(), DebugBackend)

    @patch.dict(os.environ, {"GEMINI_API_KEY": "test_key"}, clear=True)
    def test_get_backend_explicit_debug(self):
        assert isinstance(get_backend("debug"), DebugBackend)

    @patch.dict(os.environ, {}, clear=True)
    def test_get_backend_unknown_backend(self):
        with pytest.raises(BackendUnavailableError) as exc_info:
            get_backend("openai")
        assert exc_info.value.details["supported"] == ["gemini", "debug"]


class TestDebugBackend:
    async def test_story(self):
        backend = DebugBackend()
        story = await backend.generate_text(["Continue the story"])
        assert "lighthouse" in story
        assert backend.calls == ["text"]

    async def test_image_is_png(self):
        image = await DebugBackend().generate_image("a lighthouse")
        assert image.mime_type == "image/png"
        assert image.data.startswith(b"\x89PNG")

    async def test_speech_is_pcm(self):
        pcm = await DebugBackend().generate_speech("story")
        assert len(pcm) == 48000
