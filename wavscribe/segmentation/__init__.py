"""Streaming segmentation of PCM audio into transcription requests."""

from .decision import FlushAction, FlushDecisionEngine
from .driver import DriverPhase, DriverState, DriverStats, StreamDriver

__all__ = [
    "FlushAction",
    "FlushDecisionEngine",
    "DriverPhase",
    "DriverState",
    "DriverStats",
    "StreamDriver",
]
