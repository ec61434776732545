"""Exception hierarchy raised by the decompression engine."""

from __future__ import annotations


class SqzError(Exception):
    """Base class for every unpacking failure."""


class InputNotFoundError(SqzError, FileNotFoundError):
    """The input file does not exist."""


class BadMagicError(SqzError):
    """A DIET file does not carry the expected 9-byte signature."""


class UnsupportedFormatError(SqzError):
    """The input cannot be identified as any known container."""


class CorruptStreamError(SqzError):
    """The compressed stream violates the structure of its format."""


class LengthMismatchError(SqzError):
    """The decoded length differs from the size declared in the header."""

    def __init__(self, expected: int, actual: int, message: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        if message is None:
            message = (
                f"Invalid decoded data length: expected {expected} bytes, got {actual}"
            )
        super().__init__(message)
