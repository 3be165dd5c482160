"""PCM to WAV repackaging for narration audio.

The text-to-speech model returns bare 16-bit little-endian PCM samples. Players
need a container, so the samples are wrapped in a canonical 44-byte RIFF/WAVE
header (mono, 24 kHz, 16-bit). The transform is pure: the same PCM always
yields the same bytes, and the output is exactly ``WAV_HEADER_SIZE`` bytes
longer than the input.
"""

import wave
from io import BytesIO

CHANNELS = 1
SAMPLE_RATE = 24000
SAMPLE_WIDTH = 2  # bytes per sample
WAV_HEADER_SIZE = 44
WAV_MIME_TYPE = "audio/wav"


def pcm_to_wav(
    pcm_data: bytes,
    channels: int = CHANNELS,
    rate: int = SAMPLE_RATE,
    sample_width: int = SAMPLE_WIDTH,
) -> bytes:
    """Wrap raw PCM samples in a WAV container."""
    buffer = BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sample_width)
        writer.setframerate(rate)
        writer.writeframes(pcm_data)
    return buffer.getvalue()


def wav_to_pcm(wav_data: bytes) -> bytes:
    """Return the sample frames of a WAV container."""
    with wave.open(BytesIO(wav_data), "rb") as reader:
        return reader.readframes(reader.getnframes())


def wav_duration_seconds(wav_data: bytes) -> float:
    with wave.open(BytesIO(wav_data), "rb") as reader:
        return reader.getnframes() / reader.getframerate()
