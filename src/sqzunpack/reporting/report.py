"""Unpacking report data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqzunpack.pipeline import BatchResult, UnpackResult


@dataclass
class FileEntry:
    """One unpacked (or failed) file."""

    source_file: str
    output_file: str = ""
    compression: str = ""
    payload_size: int = 0
    alt_lzw: bool = False
    error: str = ""

    @classmethod
    def from_result(cls, result: UnpackResult) -> FileEntry:
        return cls(
            source_file=str(result.source),
            output_file=str(result.output) if result.output else "",
            compression=result.compression.value if result.compression else "",
            payload_size=result.payload_size,
            alt_lzw=result.alt_lzw,
            error=result.error,
        )

    def to_dict(self) -> dict:
        return {
            "source_file": self.source_file,
            "output_file": self.output_file,
            "compression": self.compression,
            "payload_size": self.payload_size,
            "alt_lzw": self.alt_lzw,
            "error": self.error,
        }


@dataclass
class UnpackReport:
    """Collects statistics about an unpacking run."""

    source_dir: str = ""
    output_dir: str = ""
    pattern: str = ""

    files: list[FileEntry] = field(default_factory=list)
    total_bytes: int = 0

    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def files_unpacked(self) -> int:
        return sum(1 for f in self.files if not f.error)

    @property
    def files_failed(self) -> int:
        return sum(1 for f in self.files if f.error)

    @property
    def errors(self) -> list[str]:
        return [f"{f.source_file}: {f.error}" for f in self.files if f.error]

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def add_batch(self, batch: BatchResult) -> None:
        self.files.extend(FileEntry.from_result(r) for r in batch.results)
        self.total_bytes += batch.total_bytes

    def finish(self) -> None:
        self.finished_at = datetime.now()

    def to_dict(self) -> dict:
        return {
            "source_dir": self.source_dir,
            "output_dir": self.output_dir,
            "pattern": self.pattern,
            "files_unpacked": self.files_unpacked,
            "files_failed": self.files_failed,
            "total_bytes": self.total_bytes,
            "duration_seconds": self.duration_seconds,
            "files": [f.to_dict() for f in self.files],
            "errors": self.errors,
        }
