"""Typed segmentation settings."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

MAX_AUDIO_SECONDS_LIMIT = 60


@dataclass(frozen=True)
class SegmenterSettings:
    """Parameters of the stream driver and flush decision engine."""
    language_code: str = "en-US"
    silence_threshold: int = 100
    eof_retries: int = 5
    min_audio_seconds: float = 2.0
    max_audio_seconds: float = 10.0
    frame_ms: int = 200
    tick_interval: float = 0.2
    silence_run_frames: int = 4
    silence_percent_threshold: float = 90.0
    trim_payload: bool = True
    ordered_output: bool = False
    max_concurrent_requests: int = 8
    shutdown_grace_seconds: float = 30.0

    def __post_init__(self):
        if self.max_audio_seconds <= 0 or self.max_audio_seconds > MAX_AUDIO_SECONDS_LIMIT:
            raise ValueError(
                f"max_audio_seconds must be in (0, {MAX_AUDIO_SECONDS_LIMIT}], got {self.max_audio_seconds}"
            )
        if self.min_audio_seconds < 0:
            raise ValueError(f"min_audio_seconds must not be negative, got {self.min_audio_seconds}")
        if self.min_audio_seconds > self.max_audio_seconds:
            raise ValueError(
                f"min_audio_seconds ({self.min_audio_seconds}) exceeds max_audio_seconds ({self.max_audio_seconds})"
            )
        if self.frame_ms <= 0:
            raise ValueError(f"frame_ms must be positive, got {self.frame_ms}")
        if self.frame_ms > self.max_audio_seconds * 1000:
            raise ValueError("A single frame must fit in the accumulation buffer")
        if self.tick_interval < 0:
            raise ValueError(f"tick_interval must not be negative, got {self.tick_interval}")
        if self.eof_retries < 0:
            raise ValueError(f"eof_retries must not be negative, got {self.eof_retries}")
        if not 0 < self.silence_percent_threshold <= 100:
            raise ValueError("silence_percent_threshold must be in (0, 100]")
        if self.max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")

    @classmethod
    def from_mapping(cls, values: Dict[str, Any], **overrides: Any) -> "SegmenterSettings":
        """Build settings from a config mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        merged = {k: v for k, v in overrides.items() if v is not None}
        merged.update({k: v for k, v in values.items() if k in known and v is not None})
        return cls(**merged)

    def with_overrides(self, **overrides: Any) -> "SegmenterSettings":
        """Copy with the non-None overrides applied (e.g. from the command line)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
