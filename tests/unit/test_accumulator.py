"""Unit tests for SegmentAccumulator."""

import pytest

from wavscribe.audio.accumulator import SegmentAccumulator
from wavscribe.errors import BufferOverflowError


@pytest.mark.unit
class TestSegmentAccumulator:
    """Test cases for SegmentAccumulator."""

    def test_initialization(self):
        accumulator = SegmentAccumulator(1000)
        assert accumulator.capacity == 1000
        assert accumulator.offset == 0
        assert accumulator.is_empty
        assert accumulator.remaining == 1000

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SegmentAccumulator(0)

    def test_offset_is_sum_of_appends(self):
        accumulator = SegmentAccumulator(100)
        for size in (10, 0, 32, 58):
            accumulator.append(b"\x01" * size, size)
        assert accumulator.offset == 100
        assert accumulator.remaining == 0

    def test_append_partial_count(self):
        accumulator = SegmentAccumulator(10)
        accumulator.append(b"abcdef", 3)
        assert accumulator.snapshot() == b"abc"

    def test_append_defaults_to_whole_source(self):
        accumulator = SegmentAccumulator(10)
        accumulator.append(b"abcd")
        assert accumulator.offset == 4

    def test_append_count_larger_than_source(self):
        accumulator = SegmentAccumulator(10)
        with pytest.raises(ValueError):
            accumulator.append(b"ab", 3)

    def test_overflow_fails_without_truncating(self):
        accumulator = SegmentAccumulator(8)
        accumulator.append(b"\x01" * 6)
        with pytest.raises(BufferOverflowError):
            accumulator.append(b"\x02" * 4)
        assert accumulator.offset == 6
        assert accumulator.snapshot() == b"\x01" * 6

    def test_reset_clears_contents(self):
        accumulator = SegmentAccumulator(8)
        accumulator.append(b"\xff" * 8)
        accumulator.reset()
        assert accumulator.offset == 0
        assert accumulator.snapshot(trim=False) == bytes(8)

    def test_reset_is_idempotent(self):
        accumulator = SegmentAccumulator(8)
        accumulator.append(b"\xff" * 5)
        accumulator.reset()
        once = (accumulator.offset, accumulator.snapshot(trim=False))
        accumulator.reset()
        assert (accumulator.offset, accumulator.snapshot(trim=False)) == once

    def test_snapshot_trimmed_and_padded(self):
        accumulator = SegmentAccumulator(6)
        accumulator.append(b"abc")
        assert accumulator.snapshot() == b"abc"
        assert accumulator.snapshot(trim=False) == b"abc\x00\x00\x00"

    def test_snapshot_is_independent_copy(self):
        accumulator = SegmentAccumulator(6)
        accumulator.append(b"abc")
        snapshot = accumulator.snapshot()
        accumulator.reset()
        accumulator.append(b"xyz")
        assert snapshot == b"abc"

    def test_view_covers_valid_prefix(self):
        accumulator = SegmentAccumulator(6)
        accumulator.append(b"abcd")
        with accumulator.view() as view:
            assert bytes(view) == b"abcd"
            assert view.readonly
        accumulator.reset()
        assert accumulator.is_empty
