"""Constants for the TTF container and DIET compressed resource formats."""

from enum import Enum, IntEnum

# Leading little-endian uint16 of every DIET packed file
DIET_SIGNATURE = 0x4CB4
DIET_MAGIC = bytes((0xB4, 0x4C, 0xCD, 0x21, 0x9D, 0x89, 0x64, 0x6C, 0x7A))

# Magic(9) + Unknown(1) + Checksum(4) + SizeHi(1) + SizeLo(2)
DIET_HEADER_SIZE = 17

# SizeHi(1, low nibble) + Type(1) + SizeLo(2)
CONTAINER_HEADER_SIZE = 4

# LZW code words
LZW_CODE_CLEAR = 0x100
LZW_CODE_END = 0x101
LZW_FIRST_FREE_CODE = 0x102
LZW_DICT_LIMIT = 0x1000
LZW_MIN_WIDTH = 9
LZW_MAX_WIDTH = 12

# Huffman node records: bit 15 set marks a leaf
HUFFMAN_LEAF_FLAG = 0x8000
HUFFMAN_SYMBOL_MASK = 0x7FFF


class ContainerType(IntEnum):
    """Format byte of a TTF container header.

    Only LZW has a dedicated value; every other byte selects Huffman+RLE.
    """
    HUFFMAN_RLE = 0x00
    LZW = 0x10


class Compression(str, Enum):
    """Decoder chosen for a resource."""
    diet = "diet"
    lzw = "lzw"
    huffman_rle = "huffman-rle"
