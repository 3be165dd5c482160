"""Tests for the story input form."""

import pytest

from storyweaver.form import DEFAULT_PROMPT, MAX_PROMPT_CHARS, validate_form
from storyweaver.shared.errors import FormValidationError

LIGHTHOUSE = "The old lighthouse keeper saw a strange light"


def test_default_prompt_is_accepted():
    request = validate_form(DEFAULT_PROMPT)
    assert request.prompt_text == DEFAULT_PROMPT
    assert request.max_words == 250
    assert request.randomness == 0.8
    assert request.language == "English"
    assert request.image_data_uri is None


def test_short_prompt_without_image_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form("Too short")
    assert exc_info.value.field == "prompt"
    assert "at least 10 characters" in exc_info.value.message


def test_prompt_length_counts_trimmed_text():
    with pytest.raises(FormValidationError):
        validate_form("    a b c     ")


def test_image_without_prompt_is_accepted(png_data_uri):
    request = validate_form("", image_data_uri=png_data_uri)
    assert request.image_data_uri == png_data_uri
    assert request.prompt_text is None


def test_image_lifts_minimum_prompt_length(png_data_uri):
    request = validate_form("Hi", image_data_uri=png_data_uri)
    assert request.prompt_text == "Hi"


def test_prompt_maximum_applies_even_with_image(png_data_uri):
    with pytest.raises(FormValidationError) as exc_info:
        validate_form("x" * (MAX_PROMPT_CHARS + 1), image_data_uri=png_data_uri)
    assert exc_info.value.field == "prompt"


def test_non_image_attachment_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(LIGHTHOUSE, image_data_uri="data:text/plain;base64,aGVsbG8=")
    assert exc_info.value.field == "image"


def test_malformed_image_uri_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(LIGHTHOUSE, image_data_uri="not-a-data-uri")
    assert exc_info.value.field == "image"


@pytest.mark.parametrize("max_words", [49, 501])
def test_max_words_out_of_range(max_words):
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(LIGHTHOUSE, max_words=max_words)
    assert exc_info.value.field == "max_words"


@pytest.mark.parametrize("randomness", [-0.1, 1.5, float("nan"), float("inf")])
def test_randomness_out_of_range(randomness):
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(LIGHTHOUSE, randomness=randomness)
    assert exc_info.value.field == "randomness"


def test_unknown_language_is_rejected():
    with pytest.raises(FormValidationError) as exc_info:
        validate_form(LIGHTHOUSE, language="Klingon")
    assert exc_info.value.field == "language"


def test_french_request():
    request = validate_form(LIGHTHOUSE, max_words=120, randomness=0.3, language="French")
    assert request.max_words == 120
    assert request.randomness == 0.3
    assert request.language == "French"
