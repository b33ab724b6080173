"""Google Speech-to-Text transcription backend."""

import time
import logging
from typing import Optional

from .base import AbstractTranscriptionBackend
from ..errors import TranscriptionServiceError
from ..models.transcription import TranscriptionResult

from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class GoogleSpeechBackend(AbstractTranscriptionBackend):
    """Google Speech-to-Text API backend for transcription."""

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 sample_rate: int = 16000,
                 language: str = "en-US",
                 encoding: str = "LINEAR16",
                 request_timeout: Optional[float] = 60.0):
        """Initialize Google Speech backend.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            sample_rate: Sample rate of the PCM payloads in Hz
            language: Language code (e.g., 'en-US', 'fr-FR')
            encoding: RecognitionConfig encoding name
            request_timeout: Per-request timeout in seconds
        """
        super().__init__(language, sample_rate)
        self.credentials_path = credentials_path
        if not self.credentials_path:
            raise ValueError("Google credentials path is required - cannot initialize without credentials")
        self.request_timeout = request_timeout
        self.client = None
        self.project_id = None
        self.service_name = "Google Speech-to-Text"
        self.config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[encoding],
            sample_rate_hertz=sample_rate,
            language_code=self.language,
        )

    def initialize(self) -> bool:
        """Initialize Google Speech client and verify credentials."""
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)

        self.client = speech.SpeechClient(credentials=credentials)
        self.project_id = credentials.project_id
        logger.info(f"Using Google Cloud project: {self.project_id}")

        logger.info("Google Speech-to-Text backend initialized successfully")
        return True

    def transcribe_chunk(self, chunk_id: str, audio_chunk: bytes) -> TranscriptionResult:
        """Transcribe audio chunk using Google Speech-to-Text."""
        if self.client is None:
            raise RuntimeError("GoogleSpeechBackend.initialize() must be called first")

        start_time = time.time()
        logger.debug(f"Chunk ID: {chunk_id}; Audio chunk size: {len(audio_chunk)} bytes; Language: {self.language}")

        # The client library takes raw bytes and handles the base64 transport encoding
        audio = speech.RecognitionAudio(content=audio_chunk)
        try:
            response = self.client.recognize(config=self.config, audio=audio, timeout=self.request_timeout)
        except gax_exceptions.DeadlineExceeded as e:
            logger.error("Google STT recognize deadline exceeded for chunk %s", chunk_id)
            raise TranscriptionServiceError(f"Google Speech recognize timeout (chunk={chunk_id}): {e}") from e
        except gax_exceptions.ServiceUnavailable as e:
            logger.error("Google STT service unavailable for chunk %s", chunk_id)
            raise TranscriptionServiceError(f"Google Speech service unavailable (chunk={chunk_id}): {e}") from e
        except gax_exceptions.GoogleAPICallError as e:
            logger.error("Google STT API call error for chunk %s: %s", chunk_id, e)
            raise TranscriptionServiceError(f"Google Speech API error (chunk={chunk_id}): {e}") from e
        processing_time = time.time() - start_time

        return self.__extract_transcription_result(response, processing_time, chunk_id)

    def __extract_transcription_result(self, response, processing_time: float, chunk_id: str) -> TranscriptionResult:
        # First alternative of every result, in order
        transcripts = []
        confidences = []
        for recognition_result in response.results:
            if not recognition_result.alternatives:
                continue
            alternative = recognition_result.alternatives[0]
            transcripts.append(alternative.transcript)
            confidences.append(alternative.confidence)

        if not transcripts:
            logger.debug(f"--- NO SPEECH DETECTED ({chunk_id}) ---")
        else:
            logger.debug(f"--- SPEECH DETECTED ({chunk_id}): {len(transcripts)} result(s), "
                         f"processing_time: {processing_time:.3f}s ---")

        return TranscriptionResult(
            text="\n".join(transcripts),
            processing_time=processing_time,
            service=self.service_name,
            language=self.language,
            confidence=sum(confidences) / len(confidences) if confidences else 0.0,
            alternatives=transcripts,
            chunk_id=chunk_id,
        )

    def cleanup(self) -> None:
        """Close the transport of the Google Speech client."""
        if self.client is not None:
            self.client.transport.close()
            self.client = None
