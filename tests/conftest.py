"""Pytest configuration and fixtures for wavscribe tests."""

import io
import logging
import wave

import numpy as np
import pytest



# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_RATE = 16000


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests spanning several components")


def constant_energy_pcm(energy: int, seconds: float, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Mono 16-bit PCM whose samples alternate +energy/-energy, so every frame has that energy."""
    samples = int(round(seconds * sample_rate))
    signs = np.where(np.arange(samples) % 2 == 0, 1, -1)
    return (signs * energy).astype("<i2").tobytes()


def wav_bytes(pcm: bytes, sample_rate: int = SAMPLE_RATE, channels: int = 1, sample_width: int = 2) -> bytes:
    """Wrap raw PCM in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


class ScriptedStream:
    """Binary stream returning a scripted sequence of reads.

    Each entry is returned by one read (split if larger than requested); b"" entries
    simulate a read with no data available yet. Once exhausted, reads return b"".
    """

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False
        self.reads = 0

    def read1(self, count: int = -1) -> bytes:
        self.reads += 1
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if 0 <= count < len(chunk):
            self.chunks.insert(0, chunk[count:])
            chunk = chunk[:count]
        return chunk

    read = read1

    def close(self) -> None:
        self.closed = True


class RecordingDispatcher:
    """Stands in for TranscriptionDispatcher, keeping every request it is given."""

    def __init__(self):
        self.requests = []
        self.drained = False

    def dispatch(self, request):
        self.requests.append(request)

    async def drain(self, timeout=None):
        self.drained = True
        return True


@pytest.fixture
def pcm():
    return constant_energy_pcm


class ScriptedBackend:
    """Transcription backend double answering from a callable of the payload.

    Not an AbstractTranscriptionBackend subclass on purpose: it also stands in for the
    GoogleSpeechBackend constructor (`ScriptedBackend.factory(...)`).
    """

    def __init__(self, answer=None, **_):
        self.answer = answer or (lambda payload: f"{len(payload)} bytes")
        self.calls = []
        self.cleaned_up = False

    @classmethod
    def factory(cls, answer=None):
        def build(**kwargs):
            backend = cls(answer)
            backend.kwargs = kwargs
            build.instances.append(backend)
            return backend
        build.instances = []
        return build

    def initialize(self) -> bool:
        return True

    def transcribe_chunk(self, chunk_id: str, audio_chunk: bytes):
        from wavscribe.models.transcription import TranscriptionResult
        self.calls.append(chunk_id)
        return TranscriptionResult(text=self.answer(audio_chunk), processing_time=0.0, service="scripted")

    def cleanup(self) -> None:
        self.cleaned_up = True
