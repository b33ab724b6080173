"""Transcription module for wavscribe."""

from .base import AbstractTranscriptionBackend
from ..models.transcription import TranscriptionRequest, TranscriptionResult
from .google_backend import GoogleSpeechBackend
from .dispatcher import TranscriptionDispatcher
from .publisher import TranscriptionPublisher
from .printer import TranscriptPrinter

__all__ = [
    "AbstractTranscriptionBackend",
    "TranscriptionRequest",
    "TranscriptionResult",
    "GoogleSpeechBackend",
    "TranscriptionDispatcher",
    "TranscriptionPublisher",
    "TranscriptPrinter",
]
