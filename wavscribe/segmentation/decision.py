"""Flush decisions for the segment accumulator."""

import logging
from enum import Enum

from ..audio.accumulator import SegmentAccumulator
from ..audio.energy import EnergyClassifier

logger = logging.getLogger(__name__)


class FlushAction(Enum):
    """What to do with the accumulated audio after a tick."""
    CONTINUE = "continue"
    FORCE_FLUSH = "force_flush"
    SILENCE_FLUSH = "silence_flush"
    DISCARD = "discard"


class FlushDecisionEngine:
    """Decides when the accumulated audio is sent, kept, or thrown away.

    Evaluated in two phases around the append of each frame:

    * before the append, `check_capacity` forces a flush when the new frame would
      push the buffer past `max_bytes`; the new frame then starts the next segment.
    * after the append, `check_silence` flushes once a run of silent frames follows
      at least `min_bytes` of audio, unless the buffer as a whole is mostly silent,
      in which case it is discarded.
    """

    def __init__(self,
                 classifier: EnergyClassifier,
                 min_bytes: int,
                 max_bytes: int,
                 frame_step: int,
                 silence_run_frames: int = 4,
                 silence_percent_threshold: float = 90.0):
        if min_bytes > max_bytes:
            raise ValueError(f"min_bytes ({min_bytes}) must not exceed max_bytes ({max_bytes})")
        self.classifier = classifier
        self.min_bytes = min_bytes
        self.max_bytes = max_bytes
        self.frame_step = frame_step
        self.silence_run_frames = silence_run_frames
        self.silence_percent_threshold = silence_percent_threshold

    def check_capacity(self, offset_before_append: int, bytes_read: int) -> FlushAction:
        if offset_before_append + bytes_read > self.max_bytes:
            return FlushAction.FORCE_FLUSH
        return FlushAction.CONTINUE

    def check_silence(self,
                      accumulator: SegmentAccumulator,
                      offset_before_append: int,
                      bytes_read: int,
                      silence_run_count: int) -> FlushAction:
        if silence_run_count <= self.silence_run_frames:
            return FlushAction.CONTINUE
        if offset_before_append + bytes_read <= self.min_bytes:
            return FlushAction.CONTINUE

        if self.is_mostly_silent(accumulator):
            return FlushAction.DISCARD
        return FlushAction.SILENCE_FLUSH

    def is_mostly_silent(self, accumulator: SegmentAccumulator) -> bool:
        """True when the whole accumulated buffer is at or above the silence percentage."""
        with accumulator.view() as accumulated:
            percentage = self.classifier.silence_percentage(accumulated, self.frame_step)
        return percentage >= self.silence_percent_threshold

    def decide(self,
               accumulator: SegmentAccumulator,
               offset_before_append: int,
               bytes_read: int,
               silence_run_count: int) -> FlushAction:
        """Single-shot decision, assuming the frame was already appended.

        Mirrors the order the driver applies the two phases in; useful for
        evaluating an arbitrary state snapshot.
        """
        action = self.check_capacity(offset_before_append, bytes_read)
        if action is FlushAction.FORCE_FLUSH:
            return action
        return self.check_silence(accumulator, offset_before_append, bytes_read, silence_run_count)
