"""Format dispatcher: bytes of a packed resource -> decoded payload.

The leading little-endian uint16 decides the path: 0x4CB4 starts a DIET
file, anything else is a 4-byte TTF container header whose format byte
selects LZW (0x10) or Huffman+RLE (every other value).
"""

from __future__ import annotations

import io
import logging
import os
import struct
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from sqzunpack.core.buffer import OutputBuffer
from sqzunpack.core.constants import (
    CONTAINER_HEADER_SIZE,
    DIET_HEADER_SIZE,
    DIET_SIGNATURE,
    Compression,
)
from sqzunpack.core.diet import decode_diet
from sqzunpack.core.errors import (
    InputNotFoundError,
    LengthMismatchError,
    UnsupportedFormatError,
)
from sqzunpack.core.headers import ContainerHeader, DietHeader
from sqzunpack.core.lzw import decode_lzw
from sqzunpack.core.rle import decode_huffman_rle

logger = logging.getLogger(__name__)

Source = str | os.PathLike | bytes | bytearray | memoryview | BinaryIO


@dataclass(frozen=True)
class ResourceInfo:
    """Header-level description of a packed resource."""

    compression: Compression
    payload_size: int
    header_size: int
    compressed_size: int
    format_type: int | None = None  # TTF containers only


def read_source(source: Source) -> bytes:
    """Load the whole compressed blob from a path, buffer, or binary stream."""
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        if not path.is_file():
            raise InputNotFoundError(f"No such input file: {path}")
        return path.read_bytes()
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if hasattr(source, "read"):
        return source.read()
    raise UnsupportedFormatError(f"Unsupported input source: {type(source).__name__}")


def is_diet(data: bytes) -> bool:
    """Check the leading uint16 for the DIET signature."""
    if len(data) < 2:
        raise UnsupportedFormatError("Input too short to identify its format")
    return struct.unpack_from("<H", data, 0)[0] == DIET_SIGNATURE


def inspect(source: Source) -> ResourceInfo:
    """Parse only the header of a packed resource."""
    data = read_source(source)
    if is_diet(data):
        diet = DietHeader.parse(data)
        return ResourceInfo(
            compression=Compression.diet,
            payload_size=diet.payload_size,
            header_size=DIET_HEADER_SIZE,
            compressed_size=len(data),
        )
    header = ContainerHeader.parse(data)
    return ResourceInfo(
        compression=header.compression,
        payload_size=header.payload_size,
        header_size=CONTAINER_HEADER_SIZE,
        compressed_size=len(data),
        format_type=header.format_type,
    )


def decompress(source: Source, *, alt_lzw: bool = False) -> bytes:
    """Decompress one packed resource.

    Args:
        source: File path, raw bytes, or a readable binary stream.
        alt_lzw: Use swapped LZW clear/end codes. Never detected
            automatically; retry with it when an LZW container fails.

    Returns:
        The payload, exactly as long as its header declares.
    """
    data = read_source(source)
    if is_diet(data):
        return _unpack_diet(data)
    return _unpack_container(data, alt_lzw)


def _unpack_diet(data: bytes) -> bytes:
    header = DietHeader.parse(data)
    logger.debug("DIET payload of %d bytes", header.payload_size)
    stream = io.BytesIO(data)
    stream.seek(DIET_HEADER_SIZE)
    return _run_decoder(decode_diet, stream, header.payload_size)


def _unpack_container(data: bytes, alt_lzw: bool) -> bytes:
    header = ContainerHeader.parse(data)
    logger.debug(
        "Container format 0x%02X (%s), payload of %d bytes",
        header.format_type,
        header.compression.value,
        header.payload_size,
    )
    stream = io.BytesIO(data)
    stream.seek(CONTAINER_HEADER_SIZE)

    if header.compression == Compression.lzw:
        hint = "" if alt_lzw else " (maybe try alternate LZW?)"
        return _run_decoder(
            lambda s, out: decode_lzw(s, out, alt_lzw),
            stream,
            header.payload_size,
            hint=hint,
        )
    return _run_decoder(decode_huffman_rle, stream, header.payload_size)


def _run_decoder(
    decoder: Callable[[BinaryIO, OutputBuffer], None],
    stream: BinaryIO,
    payload_size: int,
    hint: str = "",
) -> bytes:
    """Run a decoder into a pre-sized buffer and enforce the declared length."""
    output = OutputBuffer(payload_size)
    try:
        decoder(stream, output)
    except EOFError as e:
        raise LengthMismatchError(
            payload_size,
            len(output),
            f"Truncated payload after {len(output)} of {payload_size} bytes: {e}{hint}",
        ) from e
    except LengthMismatchError as e:
        if not hint:
            raise
        raise LengthMismatchError(e.expected, e.actual, f"{e}{hint}") from e

    if len(output) != payload_size:
        raise LengthMismatchError(
            payload_size,
            len(output),
            f"Invalid decoded data length: expected {payload_size} bytes, "
            f"got {len(output)}{hint}",
        )
    return output.getvalue()
