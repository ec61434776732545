"""Run-length expansion of Huffman symbols (TTF Huffman+RLE containers)."""

from __future__ import annotations

from typing import BinaryIO

from sqzunpack.core.buffer import OutputBuffer
from sqzunpack.core.huffman import HuffmanReader

# Low byte values of an escape symbol that announce explicit counts
_COUNT_BYTE = 0x00
_COUNT_WORD = 0x01


def expand_symbols(reader: HuffmanReader, output: OutputBuffer) -> None:
    """Expand symbols from ``reader`` into ``output`` until the input runs out.

    A symbol with a zero high byte is a literal. Otherwise it repeats the
    last literal: ``lo`` times, or a count taken from the next symbol
    (``lo == 0``) or the next two symbols (``lo == 1``). Running out of
    symbols while a count is pending simply ends the expansion.
    """
    last = 0
    while True:
        symbol = reader.read_symbol()
        if symbol is None:
            break
        lo = symbol & 0x00FF
        hi = symbol & 0xFF00
        if hi == 0:
            last = lo
            output.append(last)
            continue

        if lo == _COUNT_BYTE:
            count = reader.read_symbol()
            if count is None:
                return
            count &= 0xFF
        elif lo == _COUNT_WORD:
            count_hi = reader.read_symbol()
            if count_hi is None:
                return
            count_lo = reader.read_symbol()
            if count_lo is None:
                return
            count = ((count_hi & 0xFF) << 8) | (count_lo & 0xFF)
        else:
            count = lo
        output.repeat(last, count)


def decode_huffman_rle(stream: BinaryIO, output: OutputBuffer) -> None:
    """Decode a Huffman+RLE payload (tree followed by bitstream)."""
    expand_symbols(HuffmanReader(stream), output)
