"""Fixed-capacity output buffer shared by all decoders."""

from __future__ import annotations

from sqzunpack.core.errors import CorruptStreamError, LengthMismatchError


class OutputBuffer:
    """Byte sink sized to the payload length declared by a header.

    Writing past the capacity raises LengthMismatchError: a stream that
    decodes to more bytes than declared can never pass the final check.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def _reserve(self, count: int) -> None:
        if len(self._data) + count > self.capacity:
            raise LengthMismatchError(
                self.capacity,
                len(self._data) + count,
                f"Decoded data exceeds declared size of {self.capacity} bytes",
            )

    def append(self, value: int) -> None:
        self._reserve(1)
        self._data.append(value)

    def extend(self, data: bytes) -> None:
        self._reserve(len(data))
        self._data += data

    def repeat(self, value: int, count: int) -> None:
        """Append ``value`` ``count`` times."""
        self._reserve(count)
        self._data += bytes((value,)) * count

    def copy_back(self, distance: int, count: int) -> None:
        """Copy ``count`` bytes starting ``distance`` bytes before the end.

        Source and destination may overlap: bytes are copied one at a time so
        later bytes can read bytes written earlier by the same copy.
        """
        if distance <= 0 or distance > len(self._data):
            raise CorruptStreamError(
                f"Back-reference distance {distance} outside of "
                f"{len(self._data)} decoded bytes"
            )
        self._reserve(count)
        data = self._data
        src = len(data) - distance
        for i in range(count):
            data.append(data[src + i])

    def getvalue(self) -> bytes:
        return bytes(self._data)
