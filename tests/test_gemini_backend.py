import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from storyweaver.gemini_backend import DEFAULT_VOICE, GeminiBackend
from storyweaver.llm_backend import CREATIVE_SAFETY_THRESHOLDS
from storyweaver.media import DataUri
from storyweaver.shared.errors import BackendUnavailableError

pytestmark = pytest.mark.anyio

PINNED_MODELS = {
    "GEMINI_API_KEY": "test_key",
    "GEMINI_TEXT_MODEL": "text-model",
    "GEMINI_IMAGE_MODEL": "image-model",
    "GEMINI_TTS_MODEL": "tts-model",
}


@pytest.fixture(autouse=True)
def reset_model_cache():
    GeminiBackend._cached_models = None
    yield
    GeminiBackend._cached_models = None


def make_response(*parts):
    response = MagicMock()
    response.candidates = [MagicMock(content=MagicMock(parts=list(parts)))]
    return response


def inline_part(data, mime_type="image/png"):
    part = MagicMock()
    part.text = None
    part.inline_data = MagicMock(data=data, mime_type=mime_type)
    return part


def make_backend(response=None, side_effect=None, **kwargs):
    backend = GeminiBackend(**kwargs)
    backend.client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
    return backend


@patch.dict(os.environ, {}, clear=True)
def test_missing_api_key():
    with pytest.raises(BackendUnavailableError) as exc_info:
        GeminiBackend()
    assert exc_info.value.details["reason"] == "GEMINI_API_KEY environment variable not set"


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.list_gemini_models")
@patch("storyweaver.gemini_backend.genai.Client")
def test_pinned_models_skip_discovery(mock_client, mock_list):
    backend = GeminiBackend()

    mock_client.assert_called_once_with(api_key="test_key")
    mock_list.assert_not_called()
    assert backend.text_model == "text-model"
    assert backend.image_model == "image-model"
    assert backend.tts_model == "tts-model"
    assert backend.voice == DEFAULT_VOICE


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
def test_constructor_overrides_environment(mock_client):
    backend = GeminiBackend(text_model="my-text", voice="Kore")
    assert backend.text_model == "my-text"
    assert backend.image_model == "image-model"
    assert backend.voice == "Kore"


@patch.dict(os.environ, {"GEMINI_API_KEY": "test_key"}, clear=True)
@patch("storyweaver.gemini_backend.list_gemini_models")
@patch("storyweaver.gemini_backend.genai.Client")
def test_discovery_runs_once(mock_client, mock_list):
    mock_list.return_value = [
        {"name": "models/gemini-2.0-flash", "supported_generation_methods": ["generateContent"]},
        {"name": "models/gemini-2.5-flash-image", "supported_generation_methods": ["generateContent"]},
    ]

    first = GeminiBackend()
    second = GeminiBackend()

    mock_list.assert_called_once_with("test_key")
    assert first.text_model == second.text_model == "gemini-2.0-flash"
    assert first.image_model == "gemini-2.5-flash-image"
    assert first.tts_model == "gemini-2.5-flash-preview-tts"


@patch.dict(os.environ, {"GEMINI_API_KEY": "test_key"}, clear=True)
@patch("storyweaver.gemini_backend.list_gemini_models", side_effect=RuntimeError("offline"))
@patch("storyweaver.gemini_backend.genai.Client")
def test_discovery_failure_uses_defaults(mock_client, mock_list):
    backend = GeminiBackend()
    assert backend.text_model == "gemini-2.5-flash"
    assert backend.image_model == "gemini-2.5-flash-image"
    assert GeminiBackend._cached_models == []


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_text_success(mock_client):
    backend = make_backend(make_response(MagicMock(text="A story "), MagicMock(text="continues.\n")))

    result = await backend.generate_text(["Continue this"], temperature=0.5)

    assert result == "A story continues."
    call = backend.client.aio.models.generate_content.call_args
    assert call.kwargs["model"] == "text-model"
    assert call.kwargs["contents"] == ["Continue this"]
    assert call.kwargs["config"].temperature == 0.5
    assert call.kwargs["config"].safety_settings is None


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_text_sends_safety_settings(mock_client):
    backend = make_backend(make_response(MagicMock(text="ok")))

    await backend.generate_text(["Riff"], safety_thresholds=CREATIVE_SAFETY_THRESHOLDS)

    settings = backend.client.aio.models.generate_content.call_args.kwargs["config"].safety_settings
    assert len(settings) == len(CREATIVE_SAFETY_THRESHOLDS)


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_text_sends_inline_image(mock_client):
    backend = make_backend(make_response(MagicMock(text="ok")))

    await backend.generate_text(["Describe", DataUri(mime_type="image/png", data=b"png-bytes")])

    contents = backend.client.aio.models.generate_content.call_args.kwargs["contents"]
    assert contents[0] == "Describe"
    assert contents[1].inline_data.data == b"png-bytes"
    assert contents[1].inline_data.mime_type == "image/png"


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_text_empty_response(mock_client):
    response = MagicMock()
    response.candidates = []
    backend = make_backend(response)

    assert await backend.generate_text(["Continue"]) == ""


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_text_error_propagates(mock_client):
    backend = make_backend(side_effect=Exception("quota exceeded"))

    with pytest.raises(Exception, match="quota exceeded"):
        await backend.generate_text(["Continue"])


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_image_success(mock_client):
    backend = make_backend(make_response(MagicMock(text="Here you go"), inline_part(b"bytes", "image/jpeg")))

    image = await backend.generate_image("a lighthouse", safety_thresholds=CREATIVE_SAFETY_THRESHOLDS)

    assert image == DataUri(mime_type="image/jpeg", data=b"bytes")
    call = backend.client.aio.models.generate_content.call_args
    assert call.kwargs["model"] == "image-model"
    assert call.kwargs["contents"] == "a lighthouse"
    assert call.kwargs["config"].response_modalities == ["TEXT", "IMAGE"]


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_image_none(mock_client):
    part = MagicMock()
    part.inline_data = None
    backend = make_backend(make_response(part))

    assert await backend.generate_image("a lighthouse") is None


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_speech_success(mock_client):
    backend = make_backend(make_response(inline_part(b"\x00\x01" * 10, "audio/L16;rate=24000")), voice="Kore")

    pcm = await backend.generate_speech("Once upon a time")

    assert pcm == b"\x00\x01" * 10
    call = backend.client.aio.models.generate_content.call_args
    assert call.kwargs["model"] == "tts-model"
    assert call.kwargs["contents"] == "Once upon a time"
    voice = call.kwargs["config"].speech_config.voice_config.prebuilt_voice_config.voice_name
    assert voice == "Kore"


@patch.dict(os.environ, PINNED_MODELS)
@patch("storyweaver.gemini_backend.genai.Client")
async def test_generate_speech_none(mock_client):
    response = MagicMock()
    response.candidates = [MagicMock(content=None)]
    backend = make_backend(response)

    assert await backend.generate_speech("Once upon a time") is None
