"""Fixed-capacity accumulation buffer for audio not yet sent for transcription."""

import logging

from ..errors import BufferOverflowError

logger = logging.getLogger(__name__)


class SegmentAccumulator:
    """Fixed-capacity buffer holding the audio collected since the last flush.

    `offset` is the number of valid bytes; `0 <= offset <= capacity` always holds.
    """

    def __init__(self, capacity: int):
        """Initialize the accumulator.

        Args:
            capacity: Buffer size in bytes (max audio duration * sample rate * sample size)
        """
        if capacity <= 0:
            raise ValueError(f"Accumulator capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.offset = 0

        logger.info(f"SegmentAccumulator initialized: {capacity} bytes capacity")

    def append(self, source: bytes, count: int = None) -> None:
        """Copy `count` bytes of `source` in at the current offset and advance it."""
        if count is None:
            count = len(source)
        if count < 0 or count > len(source):
            raise ValueError(f"Invalid append count {count} for {len(source)} source bytes")
        if self.offset + count > self.capacity:
            raise BufferOverflowError(
                f"Append of {count} bytes at offset {self.offset} exceeds capacity {self.capacity}"
            )

        self.buffer[self.offset:self.offset + count] = source[:count]
        self.offset += count
        logger.debug(f"Appended {count} bytes, offset now {self.offset}/{self.capacity}")

    def reset(self) -> None:
        """Zero the buffer contents and rewind the offset."""
        self.buffer[:] = bytes(self.capacity)
        self.offset = 0

    def snapshot(self, trim: bool = True) -> bytes:
        """Return an independent copy of the buffer.

        With `trim`, only the valid prefix ``[0, offset)`` is returned; otherwise the
        whole capacity-sized buffer, zero padding included.
        """
        if trim:
            return bytes(self.buffer[:self.offset])
        return bytes(self.buffer)

    def view(self) -> memoryview:
        """Read-only view of the valid prefix, for in-place analysis."""
        return memoryview(self.buffer)[:self.offset].toreadonly()

    @property
    def is_empty(self) -> bool:
        return self.offset == 0

    @property
    def remaining(self) -> int:
        return self.capacity - self.offset
