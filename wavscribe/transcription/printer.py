"""Console output of transcription results.

Subscribes to the result topic and prints one ``[HH:MM:SS] : text`` line per
transcribed segment. Results normally print as they arrive, which may be out of
stream order; with `ordered` they are held back and released by sequence number.
"""

import logging
import threading
from typing import Dict, List, Optional
from pubsub import pub
from rich.console import Console

from ..models.transcription import TranscriptionResult, format_timestamp
from .publisher import RESULT_TOPIC, SKIPPED_TOPIC

logger = logging.getLogger(__name__)


class TranscriptPrinter:
    """Prints transcription results to the console, optionally in dispatch order."""

    def __init__(self,
                 console: Optional[Console] = None,
                 ordered: bool = False,
                 topic: str = RESULT_TOPIC,
                 skipped_topic: str = SKIPPED_TOPIC):
        """Initialize transcript printer.

        Args:
            console: Rich console to print on (stdout by default)
            ordered: Hold results back until all earlier sequence numbers are settled
            topic: Topic for transcription results
            skipped_topic: Topic for sequence numbers that will never produce a result
        """
        self.console = console or Console(soft_wrap=True)
        self.ordered = ordered
        self.topic = topic
        self.skipped_topic = skipped_topic

        self.lines: List[str] = []
        self.lock = threading.RLock()
        # sequence number -> result, or None for a skipped request
        self._held: Dict[int, Optional[TranscriptionResult]] = {}
        self._next_sequence = 0

        pub.subscribe(self._on_result, topic)
        pub.subscribe(self._on_skipped, skipped_topic)
        logger.info(f"TranscriptPrinter initialized - subscribed to {topic} (ordered={ordered})")

    def _on_result(self, result: TranscriptionResult) -> None:
        if not self.ordered or result.sequence_number is None:
            self._print(result)
            return
        with self.lock:
            self._held[result.sequence_number] = result
            self._release()

    def _on_skipped(self, sequence_number: int) -> None:
        if not self.ordered:
            return
        with self.lock:
            self._held[sequence_number] = None
            self._release()

    def _release(self) -> None:
        while self._next_sequence in self._held:
            result = self._held.pop(self._next_sequence)
            self._next_sequence += 1
            if result is not None:
                self._print(result)

    def _print(self, result: TranscriptionResult) -> None:
        if not result.has_speech:
            logger.debug(f"No speech in {result.chunk_id}, nothing to print")
            return
        line = format_line(result)
        with self.lock:
            self.lines.append(line)
        self.console.print(line, markup=False, highlight=False, emoji=False)

    def flush(self) -> None:
        """Print anything still held back, in sequence order, skipping gaps."""
        with self.lock:
            for sequence in sorted(self._held):
                result = self._held.pop(sequence)
                if result is not None:
                    self._print(result)

    def shutdown(self) -> None:
        self.flush()
        try:
            pub.unsubscribe(self._on_result, self.topic)
            pub.unsubscribe(self._on_skipped, self.skipped_topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")
        logger.info(f"TranscriptPrinter shutdown complete, {len(self.lines)} line(s) printed")


def format_line(result: TranscriptionResult) -> str:
    return f"[{format_timestamp(result.audio_start_time or 0.0)}] : {result.text}"
