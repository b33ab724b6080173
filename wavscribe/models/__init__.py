"""Data models for wavscribe."""

from .audio import AudioFormat, Frame
from .transcription import RecognitionSettings, TranscriptionRequest, TranscriptionResult

__all__ = [
    "AudioFormat",
    "Frame",
    "RecognitionSettings",
    "TranscriptionRequest",
    "TranscriptionResult",
]
