"""Tests for the fixed-capacity output buffer."""

import pytest

from sqzunpack.core.buffer import OutputBuffer
from sqzunpack.core.errors import CorruptStreamError, LengthMismatchError


class TestOutputBuffer:
    def test_append_and_extend(self):
        buf = OutputBuffer(4)
        buf.append(0x41)
        buf.extend(b"BC")
        buf.repeat(0x44, 1)
        assert buf.getvalue() == b"ABCD"
        assert len(buf) == 4

    def test_overflow_raises(self):
        buf = OutputBuffer(2)
        buf.extend(b"AB")
        with pytest.raises(LengthMismatchError, match="exceeds declared size") as exc_info:
            buf.append(0x43)
        assert exc_info.value.expected == 2
        assert buf.getvalue() == b"AB"

    def test_repeat_overflow(self):
        buf = OutputBuffer(3)
        with pytest.raises(LengthMismatchError):
            buf.repeat(0, 4)

    def test_copy_back_overlapping_distance_one(self):
        buf = OutputBuffer(11)
        buf.append(ord("x"))
        buf.copy_back(1, 10)
        assert buf.getvalue() == b"x" * 11

    def test_copy_back_overlapping_pattern(self):
        buf = OutputBuffer(9)
        buf.extend(b"abc")
        buf.copy_back(3, 6)
        assert buf.getvalue() == b"abcabcabc"

    def test_copy_back_non_overlapping(self):
        buf = OutputBuffer(6)
        buf.extend(b"hell")
        buf.copy_back(4, 2)
        assert buf.getvalue() == b"hellhe"

    def test_copy_back_before_start(self):
        buf = OutputBuffer(10)
        buf.extend(b"ab")
        with pytest.raises(CorruptStreamError):
            buf.copy_back(3, 2)

    def test_copy_back_zero_distance(self):
        buf = OutputBuffer(10)
        buf.extend(b"ab")
        with pytest.raises(CorruptStreamError):
            buf.copy_back(0, 2)
