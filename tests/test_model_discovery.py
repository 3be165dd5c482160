"""Tests for Gemini model discovery functionality."""

import os
from unittest.mock import MagicMock, patch

import pytest

from storyweaver.model_discovery import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    DEFAULT_TTS_MODEL,
    find_image_generation_model,
    find_text_generation_model,
    find_tts_model,
    list_gemini_models,
)


def model(name, methods=("generateContent",)):
    return {
        "name": f"models/{name}",
        "display_name": name,
        "supported_generation_methods": list(methods),
        "description": "",
    }


def test_find_image_generation_model_with_gemini_2_5():
    """Test finding gemini-2.5-flash-image model."""
    models = [model("gemini-2.5-pro"), model("gemini-2.5-flash-image")]
    assert find_image_generation_model(models) == "gemini-2.5-flash-image"


def test_find_image_generation_model_fallback():
    """Test fallback when no image model found."""
    assert find_image_generation_model([model("gemini-2.5-pro")]) == DEFAULT_IMAGE_MODEL


def test_find_image_generation_model_with_imagen():
    """Test finding legacy imagen model."""
    assert find_image_generation_model([model("imagen-4.0-generate-001")]) == "imagen-4.0-generate-001"


def test_find_image_generation_model_accepts_preview():
    models = [model("gemini-2.0-flash-preview-image-generation")]
    assert find_image_generation_model(models) == "gemini-2.0-flash-preview-image-generation"


def test_find_text_generation_model():
    models = [model("gemini-2.5-pro"), model("gemini-2.0-flash")]
    # Pattern priority wins over list order
    assert find_text_generation_model(models) == "gemini-2.0-flash"


def test_find_text_generation_model_skips_preview():
    models = [model("gemini-2.5-flash-preview-05-20"), model("gemini-2.5-pro")]
    assert find_text_generation_model(models) == "gemini-2.5-pro"


def test_find_text_generation_model_skips_other_modalities():
    models = [model("gemini-2.5-flash-image"), model("gemini-2.5-flash-live-001"), model("gemini-2.0-flash")]
    assert find_text_generation_model(models) == "gemini-2.0-flash"


def test_find_text_generation_model_requires_generate_content():
    models = [model("gemini-2.5-flash", methods=("embedContent",))]
    assert find_text_generation_model(models) == DEFAULT_TEXT_MODEL


def test_find_text_generation_model_fallback():
    assert find_text_generation_model([]) == DEFAULT_TEXT_MODEL
    assert find_text_generation_model(None) == DEFAULT_TEXT_MODEL


def test_find_tts_model():
    models = [model("gemini-2.5-flash"), model("gemini-2.5-pro-preview-tts")]
    assert find_tts_model(models) == "gemini-2.5-pro-preview-tts"


def test_find_tts_model_fallback():
    assert find_tts_model([model("gemini-2.5-flash")]) == DEFAULT_TTS_MODEL


@patch("storyweaver.model_discovery.genai.Client")
def test_list_gemini_models(mock_client_class):
    """Test listing Gemini models from API."""
    mock_client = MagicMock()
    mock_client_class.return_value = mock_client

    mock_model1 = MagicMock()
    mock_model1.name = "models/gemini-2.5-pro"
    mock_model1.display_name = "Gemini 2.5 Pro"
    mock_model1.supported_actions = ["generateContent"]
    mock_model1.description = "Text model"

    mock_model2 = MagicMock()
    mock_model2.name = "models/gemini-2.5-flash-image"
    mock_model2.display_name = "Gemini 2.5 Flash Image"
    mock_model2.supported_actions = ["generateContent"]
    mock_model2.description = None

    mock_client.models.list.return_value = [mock_model1, mock_model2]

    models = list_gemini_models("fake-api-key")

    mock_client_class.assert_called_once_with(api_key="fake-api-key")
    assert len(models) == 2
    assert models[0]["name"] == "models/gemini-2.5-pro"
    assert models[1]["name"] == "models/gemini-2.5-flash-image"
    assert models[1]["description"] == ""
    assert "generateContent" in models[0]["supported_generation_methods"]


@patch("storyweaver.model_discovery.genai.Client")
def test_list_gemini_models_error_propagates(mock_client_class):
    mock_client_class.return_value.models.list.side_effect = Exception("API error")

    with pytest.raises(Exception, match="API error"):
        list_gemini_models("fake-api-key")


@patch.dict(os.environ, {}, clear=True)
def test_list_gemini_models_no_api_key():
    """Test that list_gemini_models raises error when no API key provided."""
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        list_gemini_models()
