"""Byte source wrapper around a file or standard input."""

import logging
import sys
from typing import BinaryIO

logger = logging.getLogger(__name__)


class AudioSource:
    """Reads PCM bytes from a stream, returning whole samples only.

    `read(n)` returns whatever is currently available up to `n` bytes, possibly
    nothing. A trailing partial sample is held back and prepended to the next read.
    """

    def __init__(self, stream: BinaryIO, sample_size: int = 2, name: str = "<stream>",
                 close_stream: bool = True):
        self.stream = stream
        self.close_stream = close_stream
        self.sample_size = sample_size
        self.name = name
        self.closed = False
        self._pending = b""
        # read1 returns partial data instead of blocking for the full count
        self._read = getattr(stream, "read1", stream.read)

    @classmethod
    def open(cls, path: str = None, sample_size: int = 2) -> "AudioSource":
        """Open `path`, or standard input when no path is given."""
        if path is None:
            logger.info("Reading audio from standard input")
            return cls(sys.stdin.buffer, sample_size, name="<stdin>", close_stream=False)
        logger.info(f"Reading audio from: {path}")
        return cls(open(path, "rb"), sample_size, name=path)

    def read(self, count: int) -> bytes:
        if self.closed:
            return b""
        wanted = max(0, count - len(self._pending))
        chunk = self._read(wanted) if wanted else b""
        data = self._pending + (chunk or b"")

        usable = len(data) - len(data) % self.sample_size
        self._pending = data[usable:]
        return data[:usable]

    def close(self) -> None:
        """Release the underlying stream once. Standard input is left open."""
        if self.closed:
            return
        self.closed = True
        if self._pending:
            logger.warning(f"Dropping {len(self._pending)} byte(s) of incomplete sample data")
            self._pending = b""
        if self.close_stream:
            self.stream.close()
        logger.debug(f"Audio source {self.name} closed")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
