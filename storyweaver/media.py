"""Data URI helpers.

Images and audio travel between components as ``data:<mime>;base64,<data>``
strings. This module parses and builds them and bridges them to files.
"""

import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(;[^;,]+)*);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class DataUri:
    """Decoded form of a base64 data URI."""

    mime_type: str
    data: bytes

    def to_uri(self) -> str:
        return build_data_uri(self.mime_type, self.data)

    @property
    def extension(self) -> str:
        return guess_extension(self.mime_type)


def build_data_uri(mime_type: str, data: bytes) -> str:
    """Encode ``data`` as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str) -> DataUri:
    """
    Parse a ``data:<mime>;base64,<data>`` string.

    Raises:
        ValueError: If the string is not a base64 data URI or the payload is not valid base64.
    """
    match = _DATA_URI_RE.match(uri.strip()) if uri else None
    if match is None:
        raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Data URI payload is not valid base64: {e}") from e

    return DataUri(mime_type=match.group("mime").lower(), data=data)


def guess_extension(mime_type: str) -> str:
    """Return a file extension (with dot) for a MIME type."""
    if mime_type == "audio/wav":
        return ".wav"
    return mimetypes.guess_extension(mime_type) or ".bin"


def image_file_to_data_uri(path: Path | str) -> str:
    """
    Read an image file and return it as a data URI.

    The MIME type comes from the decoded image, not the file name.

    Raises:
        ValueError: If the file is not an image Pillow can read.
    """
    raw = Path(path).read_bytes()
    try:
        with Image.open(BytesIO(raw)) as img:
            image_format = img.format
    except UnidentifiedImageError as e:
        raise ValueError(f"{path} is not a readable image") from e

    mime_type = Image.MIME.get(image_format or "", "application/octet-stream")
    return build_data_uri(mime_type, raw)


def save_data_uri(uri: str, path: Path | str) -> Path:
    """Decode a data URI to ``path``; a missing extension is filled in from the MIME type."""
    decoded = parse_data_uri(uri)
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(decoded.extension)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(decoded.data)
    return target
