"""Tests for data URI helpers."""

import pytest

from storyweaver.media import (
    DataUri,
    build_data_uri,
    guess_extension,
    image_file_to_data_uri,
    parse_data_uri,
    save_data_uri,
)


def test_build_and_parse():
    uri = build_data_uri("image/png", b"\x89PNG")
    assert uri == "data:image/png;base64,iVBORw=="
    assert parse_data_uri(uri) == DataUri(mime_type="image/png", data=b"\x89PNG")


def test_parse_normalises_mime_type():
    assert parse_data_uri("data:Image/PNG;base64,AA==").mime_type == "image/png"


@pytest.mark.parametrize(
    "uri",
    ["", "hello", "data:image/png,AAAA", "data:;base64,AAAA", "data:image/png;base64,@@@"],
)
def test_parse_rejects_malformed(uri):
    with pytest.raises(ValueError):
        parse_data_uri(uri)


def test_guess_extension():
    assert guess_extension("audio/wav") == ".wav"
    assert guess_extension("image/png") == ".png"
    assert guess_extension("application/x-unknown-thing") == ".bin"


def test_image_file_to_data_uri_sniffs_type(tmp_path, png_bytes):
    path = tmp_path / "photo.dat"
    path.write_bytes(png_bytes)

    uri = image_file_to_data_uri(path)

    assert uri.startswith("data:image/png;base64,")
    assert parse_data_uri(uri).data == png_bytes


def test_image_file_to_data_uri_rejects_non_images(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image")
    with pytest.raises(ValueError):
        image_file_to_data_uri(path)


def test_save_data_uri_adds_extension(tmp_path, png_bytes, png_data_uri):
    saved = save_data_uri(png_data_uri, tmp_path / "out" / "illustration")
    assert saved == tmp_path / "out" / "illustration.png"
    assert saved.read_bytes() == png_bytes
