"""Adaptive 9-12 bit LZW decoder for TTF containers (format byte 0x10).

Code words are read MSB-first. Codes 0x100 and 0x101 are the clear and end
codes; the alternate mode swaps them, as produced by the encoder of one
historical CD-ROM release.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from sqzunpack.core.bitstream import CodeWordReader
from sqzunpack.core.buffer import OutputBuffer
from sqzunpack.core.constants import (
    LZW_CODE_CLEAR,
    LZW_CODE_END,
    LZW_DICT_LIMIT,
    LZW_FIRST_FREE_CODE,
    LZW_MAX_WIDTH,
    LZW_MIN_WIDTH,
)
from sqzunpack.core.errors import CorruptStreamError

logger = logging.getLogger(__name__)

_BASE_ENTRIES = [bytes((i,)) for i in range(256)]


def control_codes(alt_lzw: bool = False) -> tuple[int, int]:
    """Return the (clear, end) code pair for the chosen mode."""
    if alt_lzw:
        return LZW_CODE_END, LZW_CODE_CLEAR
    return LZW_CODE_CLEAR, LZW_CODE_END


class LzwDictionary:
    """One generation of the LZW table, from a clear code to the next.

    Slots 0x100 and 0x101 are placeholders for the control codes and are
    never looked up.
    """

    def __init__(self) -> None:
        self.entries: list[bytes] = _BASE_ENTRIES + [b"", b""]
        self.width = LZW_MIN_WIDTH

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def is_full(self) -> bool:
        return self.size >= LZW_DICT_LIMIT

    def __getitem__(self, code: int) -> bytes:
        return self.entries[code]

    def add(self, entry: bytes) -> None:
        self.entries.append(entry)
        if self.size == 1 << self.width and self.width < LZW_MAX_WIDTH:
            self.width += 1


def decode_lzw(stream: BinaryIO, output: OutputBuffer, alt_lzw: bool = False) -> None:
    """Decode an LZW payload into ``output``, stopping at the end code."""
    code_clear, code_end = control_codes(alt_lzw)
    reader = CodeWordReader(stream)
    table = LzwDictionary()

    prev = code_clear
    while prev != code_end:
        if prev == code_clear:
            table = LzwDictionary()
        cw = reader.read(table.width)
        if cw != code_end and cw != code_clear:
            if cw < table.size:
                new_byte = table[cw][0]
            else:
                if prev == code_clear:
                    raise CorruptStreamError(
                        f"LZW code 0x{cw:03X} right after clear code"
                    )
                if table.is_full:
                    raise CorruptStreamError(
                        f"LZW code 0x{cw:03X} with a full dictionary"
                    )
                if cw != table.size:
                    raise CorruptStreamError(
                        f"LZW code 0x{cw:03X} beyond dictionary size 0x{table.size:03X}"
                    )
                new_byte = table[prev][0]
            if prev != code_clear and not table.is_full:
                table.add(table[prev] + bytes((new_byte,)))
            output.extend(table[cw])
        elif cw == code_clear:
            logger.debug("LZW clear code after %d output bytes", len(output))
        prev = cw
