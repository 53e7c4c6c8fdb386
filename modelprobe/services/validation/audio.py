"""Minimal audio payloads for speech-to-text probes."""

import io
import wave
from functools import lru_cache

SAMPLE_RATE = 16000


@lru_cache(maxsize=1)
def minimal_wav() -> bytes:
    """Return a valid mono 16-bit PCM WAV holding a single silent sample."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(SAMPLE_RATE)
        wav.writeframes(b"\x00\x00")
    return buffer.getvalue()
