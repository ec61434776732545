"""sqzunpack: unpack SQZ and DIET compressed resources of legacy DOS games."""

from sqzunpack.core.errors import (
    BadMagicError,
    CorruptStreamError,
    InputNotFoundError,
    LengthMismatchError,
    SqzError,
    UnsupportedFormatError,
)
from sqzunpack.core.unpacker import ResourceInfo, decompress, inspect

__version__ = "0.3.0"

__all__ = [
    "BadMagicError",
    "CorruptStreamError",
    "InputNotFoundError",
    "LengthMismatchError",
    "ResourceInfo",
    "SqzError",
    "UnsupportedFormatError",
    "decompress",
    "inspect",
]
