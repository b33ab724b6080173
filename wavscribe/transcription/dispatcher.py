"""Fire-and-forget dispatch of transcription requests onto the event loop."""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Set

from ..models.transcription import TranscriptionRequest, TranscriptionResult
from .base import AbstractTranscriptionBackend
from .publisher import TranscriptionPublisher

logger = logging.getLogger(__name__)


class TranscriptionDispatcher:
    """Runs blocking backend calls on a thread pool, one asyncio task per request.

    `dispatch` never waits for the service: requests overlap freely and their
    results are published in completion order. Failures are logged and reported
    as skipped; they never reach the caller.
    """

    def __init__(self,
                 backend: AbstractTranscriptionBackend,
                 publisher: TranscriptionPublisher,
                 max_concurrent_requests: int = 8):
        self.backend = backend
        self.publisher = publisher
        self.max_concurrent_requests = max_concurrent_requests
        self.executor = ThreadPoolExecutor(max_workers=max_concurrent_requests,
                                           thread_name_prefix="transcribe")
        self.pending: Set[asyncio.Task] = set()
        self.completed = 0
        self.failed = 0

        logger.info(f"TranscriptionDispatcher initialized with {max_concurrent_requests} workers")

    def dispatch(self, request: TranscriptionRequest) -> asyncio.Task:
        """Schedule `request` on the running loop and return without waiting."""
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._transcribe(request), name=request.chunk_id)
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        return task

    async def _transcribe(self, request: TranscriptionRequest) -> Optional[TranscriptionResult]:
        loop = asyncio.get_running_loop()
        started = time.time()
        logger.debug(f"Transcribing {request.chunk_id} ({len(request.payload)} bytes)")
        try:
            result = await loop.run_in_executor(
                self.executor, self.backend.transcribe_chunk, request.chunk_id, request.payload)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failed += 1
            logger.error(f"Transcription failed for segment at {request.timestamp}: {e}")
            self.publisher.publish_skipped(request.sequence_number)
            return None

        result.chunk_id = request.chunk_id
        result.sequence_number = request.sequence_number
        result.audio_start_time = request.start_seconds
        self.completed += 1
        logger.info(f"Segment {request.sequence_number} at {request.timestamp} transcribed "
                    f"in {time.time() - started:.2f}s")
        self.publisher.publish_transcription_result(result)
        return result

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for outstanding requests; True when all of them finished in time.

        Abandoned tasks are cancelled but their executor threads run until the
        backend call returns, so the backend request timeout bounds how long exit
        can still block.
        """
        still_pending = set()
        if self.pending:
            logger.info(f"Waiting up to {timeout}s for {len(self.pending)} transcription(s) in flight...")
            _, still_pending = await asyncio.wait(set(self.pending), timeout=timeout)
            if still_pending:
                logger.warning(f"Timeout reached, abandoning {len(still_pending)} transcription(s)")
                for task in still_pending:
                    task.cancel()
        self.executor.shutdown(wait=False)
        logger.info(f"Dispatcher drained: {self.completed} completed, {self.failed} failed")
        return not still_pending
