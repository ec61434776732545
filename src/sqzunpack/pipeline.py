"""Shared file-level unpacking logic for single files and batches.

Used by the CLI (cli.py). Wraps the engine with output writing, the
alternate-LZW retry and callback-based progress reporting with
cancellation support.
"""

from __future__ import annotations

import logging
import time as _time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from threading import Event

from sqzunpack.core.constants import Compression
from sqzunpack.core.errors import CorruptStreamError, LengthMismatchError, SqzError
from sqzunpack.core.unpacker import decompress, inspect

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_SUFFIX = ".bin"

# Type alias for progress callback: (current, total, message)
ProgressCallback = Callable[[int, int, str], None]


@dataclass
class UnpackResult:
    """Outcome of unpacking one file."""
    source: Path
    output: Path | None = None
    compression: Compression | None = None
    payload_size: int = 0
    alt_lzw: bool = False
    data: bytes = field(default=b"", repr=False)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class BatchResult:
    """Result of a batch unpacking operation."""
    success_count: int = 0
    error_count: int = 0
    total_bytes: int = 0
    elapsed_seconds: float = 0.0
    results: list[UnpackResult] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)


class CancelledError(Exception):
    """Raised when the user cancels the operation."""


def _check_cancel(cancel_event: Event | None) -> None:
    """Raise CancelledError if the cancel event is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise CancelledError("Operation cancelled by user")


def default_output_path(path: Path, output_dir: Path | None = None) -> Path:
    """Output file for ``path``: same stem with a .bin suffix."""
    name = path.with_suffix(DEFAULT_OUTPUT_SUFFIX).name
    if output_dir is not None:
        return output_dir / name
    return path.with_name(name)


def find_resources(directory: Path, pattern: str = "*.SQZ") -> list[Path]:
    """Sorted files in ``directory`` matching ``pattern``."""
    return sorted(p for p in directory.glob(pattern) if p.is_file())


def unpack_file(
    path: str | Path,
    output_path: str | Path | None = None,
    *,
    alt_lzw: bool = False,
    retry_alt_lzw: bool = False,
) -> UnpackResult:
    """Unpack one file, optionally writing the payload to ``output_path``.

    With ``retry_alt_lzw``, an LZW container that fails with a length
    mismatch or a corrupt stream is decoded once more with the alternate
    control codes. Errors other than that retry propagate to the caller.
    """
    path = Path(path)
    info = inspect(path)
    result = UnpackResult(
        source=path,
        compression=info.compression,
        payload_size=info.payload_size,
        alt_lzw=alt_lzw,
    )

    try:
        data = decompress(path, alt_lzw=alt_lzw)
    except (LengthMismatchError, CorruptStreamError) as e:
        if not (retry_alt_lzw and not alt_lzw and info.compression == Compression.lzw):
            raise
        logger.info("Retrying %s with alternate LZW codes after: %s", path.name, e)
        data = decompress(path, alt_lzw=True)
        result.alt_lzw = True

    result.data = data
    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
        result.output = output_path
    return result


def batch_unpack(
    files: list[Path],
    *,
    output_dir: Path | None = None,
    alt_lzw: bool = False,
    retry_alt_lzw: bool = False,
    progress_callback: ProgressCallback | None = None,
    cancel_event: Event | None = None,
) -> BatchResult:
    """Unpack files sequentially. Per-file failures are collected, not raised.

    Raises:
        CancelledError: If cancel_event is set between two files.
    """
    t0 = _time.time()
    result = BatchResult()
    total = len(files)

    for i, path in enumerate(files):
        _check_cancel(cancel_event)
        if progress_callback:
            progress_callback(i, total, path.name)

        out = default_output_path(path, output_dir)
        try:
            file_result = unpack_file(
                path, out, alt_lzw=alt_lzw, retry_alt_lzw=retry_alt_lzw,
            )
        except (SqzError, OSError) as e:
            logger.warning("Failed to unpack %s: %s", path.name, e)
            file_result = UnpackResult(source=path, alt_lzw=alt_lzw, error=str(e))
            result.error_count += 1
            result.errors.append((path.name, str(e)))
        else:
            result.success_count += 1
            result.total_bytes += len(file_result.data)
            # Payloads are on disk now; keep batch memory flat
            file_result.data = b""
        result.results.append(file_result)

    if progress_callback:
        progress_callback(total, total, "done")
    result.elapsed_seconds = _time.time() - t0
    return result
