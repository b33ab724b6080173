"""WAV header parsing for mono 16-bit PCM input."""

import logging
import wave
from typing import BinaryIO

from ..errors import InvalidWavError
from ..models.audio import SAMPLE_WIDTH, AudioFormat

logger = logging.getLogger(__name__)


def read_wav_header(stream: BinaryIO) -> AudioFormat:
    """Consume a WAV header from `stream` up to the start of the PCM data.

    `wave` skips unknown chunks by reading when the stream cannot seek, so
    standard input works. The stream itself is left open.

    Raises:
        InvalidWavError: The stream is not a mono, 16-bit PCM WAV
    """
    try:
        wav_file = wave.open(stream, "rb")
    except wave.Error as e:
        raise InvalidWavError(f"Invalid WAV format ({e})") from e
    except EOFError as e:
        raise InvalidWavError("Truncated WAV header") from e

    try:
        channels = wav_file.getnchannels()
        sample_width = wav_file.getsampwidth()
        sample_rate = wav_file.getframerate()
    finally:
        # detaches the reader without closing a caller-owned stream
        wav_file.close()

    if channels != 1:
        raise InvalidWavError(f"Only mono audio is accepted, got {channels} channels")
    if sample_width != SAMPLE_WIDTH:
        raise InvalidWavError(f"Invalid sample size {sample_width * 8}, expected 16 bits")
    if sample_rate <= 0:
        raise InvalidWavError(f"Invalid sample rate {sample_rate}")

    audio_format = AudioFormat(sample_rate=sample_rate, channels=channels,
                               bits_per_sample=sample_width * 8)
    logger.info(f"WAV input: {audio_format.sample_rate}Hz, {audio_format.channels} channel(s), "
                f"{audio_format.bits_per_sample} bits, encoding {audio_format.encoding}")
    return audio_format
