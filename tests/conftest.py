"""Shared builders and fixtures for sqzunpack tests."""

from __future__ import annotations

import struct
from pathlib import Path

import pytest

from sqzunpack.core.constants import (
    DIET_MAGIC,
    LZW_CODE_CLEAR,
    LZW_CODE_END,
    ContainerType,
)

# ── TTF container framing ──


def make_container(payload_size: int, format_type: int, body: bytes) -> bytes:
    """Prefix ``body`` with a 4-byte TTF container header."""
    header = bytes([(payload_size >> 16) & 0x0F, format_type])
    return header + struct.pack("<H", payload_size & 0xFFFF) + body


# ── LZW ──


def pack_codes(codes: list[tuple[int, int]]) -> bytes:
    """Pack (code, width) pairs MSB-first, zero padded to at least 3 bytes."""
    bits = "".join(f"{code:0{width}b}" for code, width in codes)
    return bits_to_bytes(bits).ljust(3, b"\x00")


def lzw_literal_codes(data: bytes, alt_lzw: bool = False) -> list[tuple[int, int]]:
    """Encode ``data`` as 9-bit literal codes, clearing often enough to stay at 9 bits."""
    clear, end = (LZW_CODE_END, LZW_CODE_CLEAR) if alt_lzw else (LZW_CODE_CLEAR, LZW_CODE_END)
    codes: list[tuple[int, int]] = []
    for start in range(0, len(data), 200):
        codes.append((clear, 9))
        codes.extend((b, 9) for b in data[start:start + 200])
    codes.append((end, 9))
    return codes


def make_lzw_container(data: bytes, alt_lzw: bool = False) -> bytes:
    return make_container(len(data), ContainerType.LZW, pack_codes(lzw_literal_codes(data, alt_lzw)))


# ── Huffman ──


def leaf(symbol: int) -> int:
    return 0x8000 | symbol


def internal(child_index: int) -> int:
    # Stored as a byte offset into the node table
    return child_index << 1


def huffman_table(nodes: list[int]) -> bytes:
    return struct.pack("<H", len(nodes) * 2) + struct.pack(f"<{len(nodes)}H", *nodes)


def bits_to_bytes(bits: str) -> bytes:
    """MSB-first bit string to bytes, zero padded."""
    bits = bits.replace(" ", "")
    bits += "0" * ((-len(bits)) % 8)
    return bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))


# Codes: "1" -> 'A', "01" -> repeat last 5 times, "000" -> 'B', "001" -> count escape
RLE_TREE = [internal(2), leaf(0x41), internal(4), leaf(0x0105), leaf(0x42), leaf(0x0100)]

# Complete depth-2 tree: "00" -> 'Z', "01" -> word-count escape, "10" -> 0x01, "11" -> 0x02
WORD_COUNT_TREE = [internal(2), internal(4), leaf(0x5A), leaf(0x0101), leaf(0x01), leaf(0x02)]


# ── DIET ──


class DietWriter:
    """Builds DIET bitstreams with the same word/raw byte interleaving the reader expects."""

    def __init__(self) -> None:
        self.data = bytearray()
        self._word_pos = 0
        self._nbits = 0
        self._new_word()

    def _new_word(self) -> None:
        self._word_pos = len(self.data)
        self.data += b"\x00\x00"
        self._nbits = 0

    def bit(self, value: int) -> None:
        if value:
            word = struct.unpack_from("<H", self.data, self._word_pos)[0]
            struct.pack_into("<H", self.data, self._word_pos, word | (1 << self._nbits))
        self._nbits += 1
        if self._nbits == 16:
            self._new_word()

    def bits(self, value: int, count: int) -> None:
        for i in reversed(range(count)):
            self.bit((value >> i) & 1)

    def byte(self, value: int) -> None:
        self.data.append(value)

    def literals(self, data: bytes) -> None:
        for b in data:
            self.bit(1)
            self.byte(b)

    def short_ref(self, distance: int) -> None:
        """Back-reference of 2 bytes, distance 2..2304."""
        combined = 0x10000 - distance
        high, low = combined >> 8, combined & 0xFF
        self.bit(0)
        self.bit(0)
        self.byte(low)
        if high == 0xFF:
            self.bit(0)
        else:
            self.bit(1)
            self.bits(high + 1 - 0xF8, 3)

    def long_ref(self, distance: int, repeat: int) -> None:
        """Back-reference of 3..272 bytes, distance 1..7680."""
        combined = 0x10000 - distance
        high, low = combined >> 8, combined & 0xFF
        self.bit(0)
        self.bit(1)
        self.byte(low)
        self._long_high(high)
        self._repeat_value(repeat - 2)

    def _long_high(self, high: int) -> None:
        if high >= 0xFE:
            level = 0
        elif high >= 0xFA:
            level = 1
        elif high >= 0xF2:
            level = 2
        else:
            level = 3
        v = high + (1 << (level + 1)) - 2
        self.bit((v >> level) & 1)
        if level == 0:
            self.bit(1)
            return
        self.bit(0)
        for extra in range(level):
            self.bit((v >> (level - 1 - extra)) & 1)
            if extra < 2:
                self.bit(1 if extra == level - 1 else 0)

    def _repeat_value(self, value: int) -> None:
        if value <= 4:
            for _ in range(value - 1):
                self.bit(0)
            self.bit(1)
            return
        self.bits(0, 4)
        if value <= 6:
            self.bit(1)
            self.bit(value - 5)
        elif value <= 14:
            self.bit(0)
            self.bit(1)
            self.bits(value - 7, 3)
        else:
            self.bit(0)
            self.bit(0)
            self.byte(value - 15)

    def terminator(self) -> None:
        self.bit(0)
        self.bit(0)
        self.byte(0xFF)
        self.bit(0)

    def getvalue(self) -> bytes:
        return bytes(self.data)


def make_diet(payload_size: int, body: bytes, checksum: int = 0x1234ABCD) -> bytes:
    """Prefix ``body`` with a 17-byte DIET header."""
    header = DIET_MAGIC + b"\x00" + struct.pack("<I", checksum)
    header += bytes([((payload_size >> 16) & 0x1F) << 2])
    header += struct.pack("<H", payload_size & 0xFFFF)
    return header + body


def diet_literal_blob(data: bytes) -> bytes:
    w = DietWriter()
    w.literals(data)
    w.terminator()
    return make_diet(len(data), w.getvalue())


# ── Fixtures ──

PLAIN_TEXT = b"Prehistoric resources, unpacked byte for byte. " * 6


@pytest.fixture
def lzw_blob() -> bytes:
    return make_lzw_container(PLAIN_TEXT)


@pytest.fixture
def alt_lzw_blob() -> bytes:
    return make_lzw_container(PLAIN_TEXT, alt_lzw=True)


@pytest.fixture
def huffman_blob() -> bytes:
    """Huffman+RLE container decoding to b"AAAAAAB"."""
    return make_container(7, ContainerType.HUFFMAN_RLE, huffman_table(RLE_TREE) + bits_to_bytes("1 01 000"))


@pytest.fixture
def diet_blob() -> bytes:
    return diet_literal_blob(PLAIN_TEXT)


@pytest.fixture
def resource_dir(tmp_path: Path, lzw_blob: bytes, alt_lzw_blob: bytes, huffman_blob: bytes,
                 diet_blob: bytes) -> Path:
    """Directory with one packed file per format, plus the alternate LZW variant."""
    d = tmp_path / "data"
    d.mkdir()
    (d / "TEXT.SQZ").write_bytes(lzw_blob)
    (d / "CDRUN.SQZ").write_bytes(alt_lzw_blob)
    (d / "RUNS.SQZ").write_bytes(huffman_blob)
    (d / "MENU.SQZ").write_bytes(diet_blob)
    return d
