"""Exception types raised by wavscribe."""


class WavScribeError(Exception):
    """Base class for wavscribe errors."""


class InvalidWavError(WavScribeError):
    """Input is not a mono 16-bit PCM WAV stream."""


class BufferOverflowError(WavScribeError):
    """An append would write past the end of the accumulation buffer."""


class TranscriptionServiceError(WavScribeError):
    """The transcription service call failed (transport, auth, quota...)."""
