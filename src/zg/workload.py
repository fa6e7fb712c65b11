"""Workload: one discovered file and its scan state"""

from dataclasses import dataclass, field
from pathlib import Path

from zg.compression import FileKind
from zg.matcher import Matcher


@dataclass
class Workload:
    """A single file to scan.

    `file_kind` and `last_modified` are fixed at discovery time. `matches`
    starts empty and is filled once, by the executor, after this
    workload's scan has finished. From then on it is only read.
    """

    file_path: Path
    file_kind: FileKind
    last_modified: float  # seconds since epoch
    matcher: Matcher
    matches: list[str] = field(default_factory=list)

    # Diagnostics, not used for ordering or output selection
    error: str | None = None
    scan_time: float | None = None

    def any(self) -> bool:
        return len(self.matches) > 0

    @property
    def failed(self) -> bool:
        return self.error is not None

    def header(self) -> str:
        return f'{self.file_path} -- {self.file_kind}'

    def __str__(self) -> str:
        return self.header()
