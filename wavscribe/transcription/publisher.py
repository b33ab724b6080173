"""Transcription publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

RESULT_TOPIC = "transcription.result"
SKIPPED_TOPIC = "transcription.skipped"


class TranscriptionPublisher:
    """Publishes transcription outcomes using pubsub.pub."""

    def __init__(self, topic: str = RESULT_TOPIC, skipped_topic: str = SKIPPED_TOPIC):
        """Initialize transcription publisher.

        Args:
            topic: Pub/sub topic name for transcription results
            skipped_topic: Topic announcing sequence numbers that produced no result
        """
        self.topic = topic
        self.skipped_topic = skipped_topic
        logger.info(f"TranscriptionPublisher initialized with topic: {topic}")

    def publish_transcription_result(self, result: TranscriptionResult) -> None:
        """Publish a transcription result to the pub/sub topic."""
        pub.sendMessage(self.topic, result=result)
        logger.debug(f"Published transcription result: {result.chunk_id}")

    def publish_skipped(self, sequence_number: int) -> None:
        """Announce that a request failed, so ordered listeners do not wait for it."""
        pub.sendMessage(self.skipped_topic, sequence_number=sequence_number)
        logger.debug(f"Published skipped sequence: {sequence_number}")
