"""Decoder for DIET packed data files.

The payload is an LZ77-style stream: control bits come from a 16-bit word
buffer (see WordBitReader), literal bytes and offset low bytes are read raw
from the stream between them. Each back-reference is a negative 16-bit
offset into the output produced so far. The stream ends with a short-form
reference whose offset is 0xFFFF.
"""

from __future__ import annotations

from typing import BinaryIO

from sqzunpack.core.bitstream import WordBitReader
from sqzunpack.core.buffer import OutputBuffer

_SHORT_REPEAT = 2


def _read_short_offset_high(bits: WordBitReader) -> int | None:
    """High offset byte of a short reference; None means 0xFF (no extra bits)."""
    if bits.read_bit():
        return (0xF8 | bits.read_bits(3)) - 1
    return None


def _read_long_offset_high(bits: WordBitReader) -> int:
    """High offset byte of a long reference, 0xE2..0xFF."""
    high = ((0xFF << 1) | bits.read_bit()) & 0xFF
    if bits.read_bit():
        return high
    correction = 0
    step = 2
    for extra in range(3):
        high = ((high << 1) | bits.read_bit()) & 0xFF
        correction += step
        step <<= 1
        if extra < 2 and bits.read_bit():
            break
    return high - correction


def _read_repeat_value(bits: WordBitReader) -> int:
    """Length code of a long reference, 1..270."""
    for value in range(1, 5):
        if bits.read_bit():
            return value
    if bits.read_bit():
        return 5 + bits.read_bit()
    if bits.read_bit():
        return 7 + bits.read_bits(3)
    return 15 + bits.read_byte()


def decode_diet(stream: BinaryIO, output: OutputBuffer) -> None:
    """Decode a DIET payload into ``output`` up to its terminator."""
    bits = WordBitReader(stream)
    while True:
        while bits.read_bit():
            output.append(bits.read_byte())

        long_form = bits.read_bit()
        low = bits.read_byte()
        if long_form:
            high = _read_long_offset_high(bits)
            repeat = 2 + _read_repeat_value(bits)
        else:
            high = _read_short_offset_high(bits)
            if high is None:
                if low == 0xFF:
                    return
                high = 0xFF
            repeat = _SHORT_REPEAT

        distance = 0x10000 - ((high << 8) | low)
        output.copy_back(distance, repeat)
