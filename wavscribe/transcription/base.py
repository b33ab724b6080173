"""Abstract base classes for transcription backends."""

from abc import ABC, abstractmethod
import logging

from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class AbstractTranscriptionBackend(ABC):
    """Abstract base class for transcription backends."""

    def __init__(self, language: str = "en-US", sample_rate: int = 16000):
        """Initialize backend with language preference and input sample rate."""
        self.language = language
        self.sample_rate = sample_rate

    @abstractmethod
    def transcribe_chunk(self, chunk_id: str, audio_chunk: bytes) -> TranscriptionResult:
        """Transcribe an audio chunk and return result.

        Implementations block until the service answers; the dispatcher runs them
        off the event loop.

        Args:
            chunk_id: Identifier of the segment, for logging
            audio_chunk: Raw 16-bit PCM bytes

        Returns:
            TranscriptionResult with transcription and metadata

        Raises:
            TranscriptionServiceError: The service call failed
        """
        pass

    @abstractmethod
    def initialize(self) -> bool:
        """Initialize backend resources and verify configuration.

        Returns:
            True if initialization successful, False otherwise
        """
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Clean up backend resources."""
        pass
