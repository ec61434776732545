"""Huffman tree parsing and codeword reading for TTF containers.

Tree format (little-endian):
  [byte_count: u16] [node: u16] x (byte_count / 2)

A node with bit 15 set is a leaf carrying a 15-bit symbol. Any other node is
an internal node whose value is the byte offset of its first child; the
second child is stored in the slot right after it. The root's two children
occupy slots 0 and 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

from sqzunpack.core.bitstream import BitReader, read_u16
from sqzunpack.core.constants import HUFFMAN_LEAF_FLAG, HUFFMAN_SYMBOL_MASK
from sqzunpack.core.errors import CorruptStreamError


@dataclass(frozen=True)
class HuffmanLeaf:
    symbol: int


@dataclass(frozen=True)
class HuffmanInternal:
    child: int  # index of the first child; second child is child + 1


HuffmanNode = HuffmanLeaf | HuffmanInternal


def parse_node(raw: int) -> HuffmanNode:
    """Convert a raw 16-bit node record into a tagged node."""
    if raw & HUFFMAN_LEAF_FLAG:
        return HuffmanLeaf(symbol=raw & HUFFMAN_SYMBOL_MASK)
    # Stored as a byte offset into the table; halve it to get an index
    return HuffmanInternal(child=raw >> 1)


@dataclass
class HuffmanTree:
    """Flat array of sibling pairs; the root pair lives at index 0."""

    nodes: list[HuffmanNode] = field(default_factory=list)

    @classmethod
    def parse(cls, stream: BinaryIO) -> HuffmanTree:
        """Read the node table from the stream, leaving it positioned on the bitstream."""
        try:
            node_count = read_u16(stream) >> 1
            nodes = [parse_node(read_u16(stream)) for _ in range(node_count)]
        except EOFError as e:
            raise CorruptStreamError(f"Truncated Huffman tree: {e}") from e
        return cls(nodes=nodes)

    def node(self, index: int) -> HuffmanNode:
        if not 0 <= index < len(self.nodes):
            raise CorruptStreamError(
                f"Huffman node index {index} outside of {len(self.nodes)}-node tree"
            )
        return self.nodes[index]


class HuffmanReader:
    """Decodes symbols by walking a HuffmanTree one input bit at a time."""

    def __init__(self, stream: BinaryIO) -> None:
        self.tree = HuffmanTree.parse(stream)
        # The bit reader must start after the node table
        self._bits = BitReader(stream, msb_first=True)

    def read_symbol(self) -> int | None:
        """Return the next symbol, or None once the input is exhausted."""
        index = 0
        while not self._bits.at_end():
            second = self._bits.read_bit()
            node = self.tree.node(index + second)
            if isinstance(node, HuffmanLeaf):
                return node.symbol
            index = node.child
        return None
