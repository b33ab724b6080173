"""Audio-related data models."""

from dataclasses import dataclass

SAMPLE_WIDTH = 2  # 16-bit little-endian signed


@dataclass(frozen=True)
class AudioFormat:
    """Format of the PCM payload that follows a WAV header."""
    sample_rate: int
    channels: int = 1
    bits_per_sample: int = 16

    @property
    def sample_size(self) -> int:
        """Bytes per sample."""
        return self.bits_per_sample // 8

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.channels * self.sample_size

    @property
    def encoding(self) -> str:
        return f"LINEAR{self.bits_per_sample}"

    def seconds(self, byte_count: int) -> float:
        """Duration in seconds of `byte_count` bytes of PCM."""
        return byte_count / self.bytes_per_second

    def byte_count(self, seconds: float) -> int:
        """Number of bytes covering `seconds` of audio, aligned to whole samples."""
        samples = int(seconds * self.sample_rate) * self.channels
        return samples * self.sample_size


@dataclass(frozen=True)
class Frame:
    """PCM bytes read in a single driver tick, with their classification."""
    data: bytes
    energy: int
    is_silent: bool

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def sample_count(self) -> int:
        return len(self.data) // SAMPLE_WIDTH
