"""Unit tests for the energy classifier."""

import numpy as np
import pytest

from wavscribe.audio.energy import EnergyClassifier, frame_energy
from wavscribe.models.audio import SAMPLE_WIDTH


def samples(*values) -> bytes:
    return np.array(values, dtype="<i2").tobytes()


@pytest.mark.unit
class TestFrameEnergy:
    """Test cases for frame_energy."""

    def test_mean_absolute_magnitude(self):
        assert frame_energy(samples(100, -100, 300, -300)) == 200

    def test_rounds_half_up(self):
        assert frame_energy(samples(1, 2)) == 2
        assert frame_energy(samples(1, 1, 2)) == 1

    def test_empty_frame_has_zero_energy(self):
        assert frame_energy(b"") == 0

    def test_most_negative_sample_does_not_wrap(self):
        assert frame_energy(samples(-32768)) == 32768

    def test_frame_step_limits_span(self):
        frame = samples(10, 10, 1000, 1000)
        assert frame_energy(frame, frame_step=4) == 10

    def test_frame_step_larger_than_frame(self):
        assert frame_energy(samples(50, -50), frame_step=6400) == 50

    def test_trailing_odd_byte_ignored(self):
        assert frame_energy(samples(40, -40) + b"\x7f") == 40

    def test_deterministic(self, pcm):
        frame = pcm(321, 0.2)
        assert frame_energy(frame) == frame_energy(bytes(frame)) == 321


@pytest.mark.unit
class TestEnergyClassifier:
    """Test cases for EnergyClassifier."""

    @pytest.mark.parametrize("threshold", [0, 1, 99, 100, 101, 5000])
    def test_silent_iff_below_threshold(self, pcm, threshold):
        classifier = EnergyClassifier(silence_threshold=threshold)
        energy, is_silent = classifier.classify(pcm(100, 0.2))
        assert energy == 100
        assert is_silent == (energy < threshold)

    def test_empty_frame_is_silent(self):
        classifier = EnergyClassifier(silence_threshold=0)
        assert classifier.classify(b"") == (0, True)

    def test_frame_model(self, pcm):
        frame = EnergyClassifier(100).frame(pcm(500, 0.2))
        assert frame.energy == 500
        assert frame.is_silent is False
        assert frame.length == 6400
        assert frame.sample_count == 3200

    def test_frame_sample_count_ignores_trailing_byte(self):
        frame = EnergyClassifier(100).frame(samples(1, 2, 3) + b"\x7f")
        assert frame.length == 7
        assert frame.sample_count == 3 == frame.length // SAMPLE_WIDTH

    def test_silence_percentage(self, pcm):
        classifier = EnergyClassifier(silence_threshold=100)
        buffer = pcm(500, 0.2) * 3 + pcm(10, 0.2)
        assert classifier.silence_percentage(buffer, 6400) == 25.0

    def test_silence_percentage_counts_partial_last_slice(self, pcm):
        classifier = EnergyClassifier(silence_threshold=100)
        buffer = pcm(500, 0.2) + pcm(10, 0.1)
        assert classifier.silence_percentage(buffer, 6400) == 50.0

    def test_silence_percentage_of_empty_buffer(self):
        assert EnergyClassifier(100).silence_percentage(b"", 6400) == 100.0

    def test_silence_percentage_rejects_bad_step(self, pcm):
        with pytest.raises(ValueError):
            EnergyClassifier(100).silence_percentage(pcm(10, 0.2), 0)
