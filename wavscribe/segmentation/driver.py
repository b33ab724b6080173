"""Stream driver: the tick loop that turns a PCM stream into transcription requests."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..audio.accumulator import SegmentAccumulator
from ..audio.energy import EnergyClassifier
from ..audio.source import AudioSource
from ..config.settings import SegmenterSettings
from ..errors import BufferOverflowError
from ..models.audio import AudioFormat
from ..models.transcription import RecognitionSettings, TranscriptionRequest, format_timestamp
from .decision import FlushAction, FlushDecisionEngine

logger = logging.getLogger(__name__)


class DriverPhase(Enum):
    AWAITING_FRAME = "awaiting_frame"
    FRAME_READ = "frame_read"
    ACCUMULATE = "accumulate"
    FLUSH = "flush"
    DISCARD = "discard"
    DRAINING = "draining"
    STOPPED = "stopped"


@dataclass
class DriverState:
    """Mutable per-stream counters, owned by a single StreamDriver."""
    total_bytes_read: int = 0
    silence_run_count: int = 0
    empty_reads: int = 0
    next_sequence: int = 0
    phase: DriverPhase = DriverPhase.AWAITING_FRAME


@dataclass
class DriverStats:
    frames_read: int = 0
    empty_reads: int = 0
    dispatches: int = 0
    forced_flushes: int = 0
    silence_flushes: int = 0
    discards: int = 0


class StreamDriver:
    """Reads fixed-duration frames on a fixed cadence and flushes segments for transcription.

    Each tick reads up to one frame, classifies it, and lets the FlushDecisionEngine
    decide whether the accumulated audio is kept, dispatched or discarded. When the
    input yields nothing for more than `eof_retries` consecutive ticks, whatever audio
    remains is flushed and the driver stops.
    """

    def __init__(self,
                 source: AudioSource,
                 audio_format: AudioFormat,
                 settings: SegmenterSettings,
                 dispatcher):
        """Initialize the driver.

        Args:
            source: Input positioned at the first PCM byte
            audio_format: Format of the PCM data (mono, 16-bit)
            settings: Segmentation parameters
            dispatcher: Object exposing `dispatch(request)` and `async drain(timeout)`
        """
        self.source = source
        self.audio_format = audio_format
        self.settings = settings
        self.dispatcher = dispatcher

        self.frame_bytes = audio_format.byte_count(settings.frame_ms / 1000.0)
        self.min_bytes = audio_format.byte_count(settings.min_audio_seconds)
        self.max_bytes = audio_format.byte_count(settings.max_audio_seconds)
        if self.frame_bytes <= 0:
            raise ValueError(f"Frame of {settings.frame_ms}ms holds no samples at {audio_format.sample_rate}Hz")
        if self.frame_bytes > self.max_bytes:
            raise ValueError(
                f"Frame size ({self.frame_bytes} bytes) exceeds the accumulation buffer ({self.max_bytes} bytes)"
            )

        self.classifier = EnergyClassifier(settings.silence_threshold)
        self.accumulator = SegmentAccumulator(self.max_bytes)
        self.engine = FlushDecisionEngine(
            classifier=self.classifier,
            min_bytes=self.min_bytes,
            max_bytes=self.max_bytes,
            frame_step=self.frame_bytes,
            silence_run_frames=settings.silence_run_frames,
            silence_percent_threshold=settings.silence_percent_threshold,
        )
        self.recognition = RecognitionSettings(
            encoding=audio_format.encoding,
            sample_rate_hertz=audio_format.sample_rate,
            language_code=settings.language_code,
        )
        self.state = DriverState()
        self.stats = DriverStats()

        logger.info(f"StreamDriver initialized: frame={self.frame_bytes} bytes, "
                    f"min={self.min_bytes} bytes, max={self.max_bytes} bytes, "
                    f"threshold={settings.silence_threshold}")

    @property
    def is_stopped(self) -> bool:
        return self.state.phase is DriverPhase.STOPPED

    def tick(self) -> DriverPhase:
        """Run one tick synchronously and return the phase it ended in."""
        if self.is_stopped:
            return self.state.phase

        try:
            self.state.phase = DriverPhase.AWAITING_FRAME
            data = self.source.read(self.frame_bytes)
            if not data:
                self._on_empty_read()
            else:
                self._on_frame(data)
        except (OSError, BufferOverflowError):
            logger.error("Unrecoverable error in stream driver, stopping", exc_info=True)
            self._stop()
            raise
        return self.state.phase

    def _on_empty_read(self) -> None:
        self.state.empty_reads += 1
        self.stats.empty_reads += 1
        logger.debug(f"Empty read {self.state.empty_reads}/{self.settings.eof_retries}")
        if self.state.empty_reads > self.settings.eof_retries:
            logger.info("End of stream reached, flushing remaining audio")
            self._finish()

    def _on_frame(self, data: bytes) -> None:
        state = self.state
        bytes_read = len(data)
        offset_before_append = self.accumulator.offset

        state.empty_reads = 0
        state.total_bytes_read += bytes_read
        state.phase = DriverPhase.FRAME_READ
        self.stats.frames_read += 1

        frame = self.classifier.frame(data)
        if frame.is_silent:
            state.silence_run_count += 1
        else:
            state.silence_run_count = 0

        logger.debug(f"[{format_timestamp(self.audio_format.seconds(state.total_bytes_read))}] "
                     f"read={bytes_read} energy={frame.energy} silent={frame.is_silent} "
                     f"run={state.silence_run_count} offset={offset_before_append}")

        start_seconds = self.audio_format.seconds(
            state.total_bytes_read - offset_before_append - bytes_read)

        action = self.engine.check_capacity(offset_before_append, bytes_read)
        if action is FlushAction.FORCE_FLUSH:
            logger.debug("Buffer full, forcing flush")
            self.stats.forced_flushes += 1
            self._flush(start_seconds)
            self.accumulator.append(data, bytes_read)
            return

        self.accumulator.append(data, bytes_read)
        action = self.engine.check_silence(
            self.accumulator, offset_before_append, bytes_read, state.silence_run_count)

        if action is FlushAction.SILENCE_FLUSH:
            logger.debug("Silence after speech, flushing")
            self.stats.silence_flushes += 1
            self._flush(start_seconds)
        elif action is FlushAction.DISCARD:
            logger.debug(f"Discarding {self.accumulator.offset} bytes of silence")
            self.stats.discards += 1
            self.accumulator.reset()
            state.phase = DriverPhase.DISCARD
        else:
            state.phase = DriverPhase.ACCUMULATE

    def _flush(self, start_seconds: float) -> None:
        """Snapshot the accumulator into a request, reset it, and dispatch."""
        request = TranscriptionRequest(
            sequence_number=self.state.next_sequence,
            start_seconds=start_seconds,
            payload=self.accumulator.snapshot(trim=self.settings.trim_payload),
            settings=self.recognition,
        )
        self.state.next_sequence += 1
        self.accumulator.reset()
        self.state.phase = DriverPhase.FLUSH

        logger.info(f"Dispatching segment {request.sequence_number} at {request.timestamp} "
                    f"({len(request.payload)} bytes)")
        self.stats.dispatches += 1
        self.dispatcher.dispatch(request)

    def _finish(self) -> None:
        self.state.phase = DriverPhase.DRAINING
        if not self.accumulator.is_empty:
            start_seconds = self.audio_format.seconds(
                self.state.total_bytes_read - self.accumulator.offset)
            if self.engine.is_mostly_silent(self.accumulator):
                logger.debug(f"Dropping {self.accumulator.offset} trailing bytes of silence")
                self.stats.discards += 1
                self.accumulator.reset()
            else:
                self._flush(start_seconds)
        self._stop()

    def _stop(self) -> None:
        self.source.close()
        self.state.phase = DriverPhase.STOPPED

    async def run(self, drain_timeout: Optional[float] = None) -> DriverStats:
        """Tick on a fixed cadence until the stream ends, then wait for in-flight requests."""
        loop = asyncio.get_running_loop()
        interval = self.settings.tick_interval
        if drain_timeout is None:
            drain_timeout = self.settings.shutdown_grace_seconds

        try:
            while not self.is_stopped:
                started = loop.time()
                self.tick()
                if self.is_stopped:
                    break
                await asyncio.sleep(max(0.0, interval - (loop.time() - started)))
        finally:
            if not self.is_stopped:
                self._stop()

        await self.dispatcher.drain(drain_timeout)
        logger.info(f"Stream driver stopped: {self.stats}")
        return self.stats
