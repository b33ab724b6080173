"""Transcription-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List


def format_timestamp(seconds: float) -> str:
    """Format a stream offset in seconds as HH:MM:SS (fractions truncated)."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class RecognitionSettings:
    """Codec config sent along with every payload."""
    encoding: str
    sample_rate_hertz: int
    language_code: str = "en-US"


@dataclass(frozen=True)
class TranscriptionRequest:
    """Immutable snapshot of one flushed segment.

    The payload is a private copy of the accumulation buffer; the driver is free
    to reset and refill its buffer while the request is in flight.
    """
    sequence_number: int
    start_seconds: float
    payload: bytes
    settings: RecognitionSettings

    @property
    def timestamp(self) -> str:
        return format_timestamp(self.start_seconds)

    @property
    def chunk_id(self) -> str:
        return f"segment_{self.sequence_number}@{self.timestamp}"


@dataclass
class TranscriptionResult:
    """Result of a transcription operation."""
    text: str
    processing_time: float
    service: str
    language: str = "en-US"
    confidence: float = 0.0
    alternatives: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    chunk_id: Optional[str] = None
    # Filled in by the dispatcher from the originating request
    sequence_number: Optional[int] = None
    audio_start_time: Optional[float] = None

    @property
    def has_speech(self) -> bool:
        return bool(self.text.strip())
