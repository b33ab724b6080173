"""Amplitude-energy voice activity classification for 16-bit PCM."""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from ..models.audio import SAMPLE_WIDTH, Frame

logger = logging.getLogger(__name__)


def frame_energy(frame: bytes, frame_step: Optional[int] = None) -> int:
    """Mean absolute sample magnitude of `frame`, rounded half up.

    Only the first `frame_step` bytes are considered (the whole frame when None).
    A trailing odd byte is ignored. An empty span has energy 0.
    """
    span = len(frame) if frame_step is None else min(frame_step, len(frame))
    span -= span % SAMPLE_WIDTH
    if span <= 0:
        return 0

    samples = np.frombuffer(frame, dtype="<i2", count=span // SAMPLE_WIDTH)
    # int16 -> int32 so that abs(-32768) does not wrap
    mean = np.abs(samples.astype(np.int32)).mean()
    return int(math.floor(float(mean) + 0.5))


class EnergyClassifier:
    """Classifies PCM frames as silent or not against an energy threshold."""

    def __init__(self, silence_threshold: int = 100):
        self.silence_threshold = silence_threshold

    def classify(self, frame: bytes, frame_step: Optional[int] = None) -> Tuple[int, bool]:
        """Return (energy, is_silent) for a frame; an empty frame is silent."""
        energy = frame_energy(frame, frame_step)
        if len(frame) < SAMPLE_WIDTH:
            return energy, True
        return energy, energy < self.silence_threshold

    def frame(self, data: bytes) -> Frame:
        energy, is_silent = self.classify(data)
        return Frame(data=data, energy=energy, is_silent=is_silent)

    def silence_percentage(self, buffer: bytes, frame_step: int) -> float:
        """Percentage of `frame_step`-sized slices of `buffer` that are silent.

        The last slice may be shorter than `frame_step`. An empty buffer counts as
        entirely silent.
        """
        if frame_step <= 0:
            raise ValueError("frame_step must be positive")
        total = 0
        silent = 0
        for start in range(0, len(buffer), frame_step):
            _, is_silent = self.classify(buffer[start:start + frame_step])
            total += 1
            if is_silent:
                silent += 1
        if total == 0:
            return 100.0
        percentage = silent * 100.0 / total
        logger.debug(f"Silence percentage: {percentage:.1f}% ({silent}/{total} slices)")
        return percentage
