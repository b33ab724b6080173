"""Audio input and classification."""

from .accumulator import SegmentAccumulator
from .energy import EnergyClassifier, frame_energy
from .source import AudioSource
from .wav import read_wav_header

__all__ = [
    'SegmentAccumulator',
    'EnergyClassifier',
    'frame_energy',
    'AudioSource',
    'read_wav_header',
]
