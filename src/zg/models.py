"""Pydantic models for search options and JSON output"""

from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from zg.workload import Workload


class SearchOptions(BaseModel):
    """Validated search configuration, read-only for the whole run"""

    model_config = ConfigDict(frozen=True)

    source_path: str = Field(..., description='Directory to search')
    pattern: str = Field(..., description='Literal text or regex to look for in each line')
    glob: str | None = Field(None, description='Glob relative to source_path (default "*")')
    take: PositiveInt | None = Field(None, description='Only search the N most recently modified files')
    output: str | None = Field(None, description='Write the report to this file instead of stdout')
    use_regex: bool = Field(False, description='Treat pattern as a regular expression')
    verbose: bool = Field(False, description='Enable debug logging')
    max_workers: PositiveInt | None = Field(None, description='Scanner thread pool size')


class FileReport(BaseModel):
    """Scan outcome for one file"""

    path: str = Field(..., description='Scanned file')
    file_kind: str = Field(..., description='Plain, ZipArchive or GZipArchive')
    modified_at: datetime = Field(..., description='Modification time at discovery')
    matches: list[str] = Field(default_factory=list, description='Matched lines in file order')
    error: str | None = Field(None, description='Why the scan failed, if it did')
    scan_time: float | None = Field(None, description='Seconds spent scanning')

    @classmethod
    def from_workload(cls, workload: Workload) -> 'FileReport':
        return cls(
            path=str(workload.file_path),
            file_kind=str(workload.file_kind),
            modified_at=datetime.fromtimestamp(workload.last_modified, tz=UTC),
            matches=list(workload.matches),
            error=workload.error,
            scan_time=workload.scan_time,
        )


class SearchResponse(BaseModel):
    """JSON response for a completed search.

    `files` holds only files with matches, newest first, the same
    selection and order as the file report.
    """

    source_path: str
    pattern: str
    glob: str
    time: float = Field(..., description='Total seconds for discovery and scanning')
    scanned_files: int = Field(..., description='Number of files in the workload set')
    files: list[FileReport] = Field(default_factory=list)
    failed_files: list[FileReport] = Field(default_factory=list)

    @classmethod
    def from_workloads(
        cls, options: SearchOptions, workloads: Sequence[Workload], elapsed: float
    ) -> 'SearchResponse':
        return cls(
            source_path=options.source_path,
            pattern=options.pattern,
            glob=options.glob or '*',
            time=elapsed,
            scanned_files=len(workloads),
            files=[FileReport.from_workload(wl) for wl in workloads if wl.any()],
            failed_files=[FileReport.from_workload(wl) for wl in workloads if wl.failed],
        )


__all__ = ['FileReport', 'SearchOptions', 'SearchResponse']
