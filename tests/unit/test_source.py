"""Unit tests for AudioSource."""

import io

import pytest

from conftest import ScriptedStream
from wavscribe.audio.source import AudioSource


@pytest.mark.unit
class TestAudioSource:
    """Test cases for AudioSource."""

    def test_read_up_to_count(self):
        source = AudioSource(io.BytesIO(b"\x01\x02" * 10))
        assert source.read(6) == b"\x01\x02" * 3
        assert len(source.read(100)) == 14
        assert source.read(6) == b""

    def test_partial_sample_carried_to_next_read(self):
        stream = ScriptedStream([b"\x01\x02\x03", b"", b"\x04\x05\x06"])
        source = AudioSource(stream)
        assert source.read(4) == b"\x01\x02"
        assert source.read(4) == b""
        assert source.read(4) == b"\x03\x04\x05\x06"

    def test_never_returns_more_than_requested(self):
        source = AudioSource(ScriptedStream([b"\x01", b"\x02\x03\x04\x05\x06"]))
        assert source.read(4) == b""
        assert source.read(4) == b"\x01\x02\x03\x04"
        assert source.read(4) == b"\x05\x06"

    def test_close_once(self):
        stream = ScriptedStream([b"\x00\x00"])
        source = AudioSource(stream)
        source.close()
        source.close()
        assert stream.closed
        assert source.read(2) == b""

    def test_context_manager_closes(self):
        stream = ScriptedStream([])
        with AudioSource(stream):
            pass
        assert stream.closed

    def test_open_file(self, tmp_path):
        path = tmp_path / "audio.raw"
        path.write_bytes(b"\x00\x01" * 4)
        with AudioSource.open(str(path)) as source:
            assert source.read(8) == b"\x00\x01" * 4
        assert source.stream.closed
