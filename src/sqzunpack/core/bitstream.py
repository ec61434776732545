"""Byte and bit readers over a binary stream.

Three bit orders are needed by the decoders:

* ``BitReader``: one byte at a time, MSB-first (Huffman codewords).
* ``WordBitReader``: little-endian 16-bit words, LSB-first (DIET). Raw bytes
  may be read from the same stream between bits.
* ``CodeWordReader``: a 24-bit shift buffer delivering 9-12 bit LZW codes
  MSB-first.

All readers raise ``EOFError`` when the input runs out under them.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO


def read_u8(stream: BinaryIO) -> int:
    """Read one unsigned byte."""
    data = stream.read(1)
    if not data:
        raise EOFError("Unexpected end of stream reading byte")
    return data[0]


def read_u16(stream: BinaryIO) -> int:
    """Read one little-endian uint16."""
    data = stream.read(2)
    if len(data) < 2:
        raise EOFError("Unexpected end of stream reading uint16")
    return struct.unpack("<H", data)[0]


def stream_size(stream: BinaryIO) -> int:
    """Total length of a seekable stream, leaving the position untouched."""
    pos = stream.tell()
    size = stream.seek(0, io.SEEK_END)
    stream.seek(pos)
    return size


class BitReader:
    """Per-byte bit reader. Bits are taken MSB-first unless ``msb_first`` is False."""

    def __init__(self, stream: BinaryIO, msb_first: bool = True) -> None:
        self._stream = stream
        self._size = stream_size(stream)
        self._msb_first = msb_first
        self._bit = 8
        self._byte = 0

    def at_end(self) -> bool:
        """True once the current byte is used up and no input remains."""
        return self._bit == 8 and self._stream.tell() >= self._size

    def read_bit(self) -> int:
        if self._bit == 8:
            self._byte = read_u8(self._stream)
            self._bit = 0
        shift = 7 - self._bit if self._msb_first else self._bit
        self._bit += 1
        return (self._byte >> shift) & 1


class WordBitReader:
    """DIET bit buffer: 16-bit little-endian words consumed LSB-first.

    The next word is fetched as soon as the last bit of the current one is
    taken, so raw bytes read through ``read_byte`` always come after it.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._word = 0
        self._count = 0
        self._reload()

    def _reload(self) -> None:
        data = self._stream.read(2)
        if len(data) < 2:
            # The terminator may sit in the very last word; only fail if
            # another bit is actually requested.
            self._count = 0
            return
        self._word = struct.unpack("<H", data)[0]
        self._count = 16

    def read_bit(self) -> int:
        if self._count == 0:
            raise EOFError("Unexpected end of stream reading DIET bit buffer")
        bit = self._word & 1
        self._word >>= 1
        self._count -= 1
        if self._count == 0:
            self._reload()
        return bit

    def read_bits(self, count: int) -> int:
        """Read ``count`` bits, first bit read ends up most significant."""
        value = 0
        for _ in range(count):
            value = (value << 1) | self.read_bit()
        return value

    def read_byte(self) -> int:
        """Read a raw byte from the stream, bypassing the bit buffer."""
        return read_u8(self._stream)


class CodeWordReader:
    """Reads LZW code words from a 24-bit buffer fed one byte at a time."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._size = stream_size(stream)
        data = stream.read(3)
        if len(data) < 3:
            raise EOFError("Unexpected end of stream priming LZW code reader")
        self._buf = (data[0] << 16) | (data[1] << 8) | data[2]
        self._missing = 0

    def read(self, width: int) -> int:
        if width > 12:
            raise ValueError(f"Code width {width} exceeds 12 bits")
        if width > 24 - self._missing:
            raise EOFError("Unexpected end of stream reading LZW code word")
        code = self._buf >> (24 - width)
        self._buf = (self._buf << width) & 0xFFFFFF
        self._missing += width
        while self._missing >= 8 and self._stream.tell() < self._size:
            self._missing -= 8
            self._buf |= read_u8(self._stream) << self._missing
        return code
