"""Header records framing a compressed payload.

TTF container (4 bytes):
  [size_hi: u8, low nibble] [format: u8] [size_lo: u16]

DIET data file (17 bytes):
  [magic: 9] [unknown: u8] [checksum: u32] [size_hi: u8, bits 2..6] [size_lo: u16]
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from sqzunpack.core.constants import (
    CONTAINER_HEADER_SIZE,
    DIET_HEADER_SIZE,
    DIET_MAGIC,
    Compression,
    ContainerType,
)
from sqzunpack.core.errors import BadMagicError, CorruptStreamError


@dataclass(frozen=True)
class ContainerHeader:
    payload_size: int
    format_type: int

    @property
    def compression(self) -> Compression:
        if self.format_type == ContainerType.LZW:
            return Compression.lzw
        return Compression.huffman_rle

    @classmethod
    def parse(cls, data: bytes) -> ContainerHeader:
        if len(data) < CONTAINER_HEADER_SIZE:
            raise CorruptStreamError("Unexpected end of input reading container header")
        size_hi = data[0] & 0x0F  # bits 4..7 unused
        format_type = data[1]
        size_lo = struct.unpack_from("<H", data, 2)[0]
        return cls(payload_size=(size_hi << 16) | size_lo, format_type=format_type)


@dataclass(frozen=True)
class DietHeader:
    """DIET header. ``unknown`` and ``checksum`` are kept but never checked."""

    payload_size: int
    unknown: int
    checksum: int

    @classmethod
    def parse(cls, data: bytes) -> DietHeader:
        magic = bytes(data[: len(DIET_MAGIC)])
        if magic != DIET_MAGIC:
            raise BadMagicError(f"Not a DIET file: bad signature {magic.hex(' ')}")
        if len(data) < DIET_HEADER_SIZE:
            raise CorruptStreamError("Unexpected end of input reading DIET header")
        unknown = data[9]
        checksum = struct.unpack_from("<I", data, 10)[0]
        size_hi = (data[14] >> 2) & 0x1F
        size_lo = struct.unpack_from("<H", data, 15)[0]
        return cls(
            payload_size=(size_hi << 16) | size_lo,
            unknown=unknown,
            checksum=checksum,
        )
