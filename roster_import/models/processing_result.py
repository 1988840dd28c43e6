from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .participant import ParsedRow

"""Result models for the roster import tool.

ParseResult is what one pipeline run over a text blob produces. SubmitResult
describes one create-many request. FileStat / ProcessingResult aggregate the
batch run over a directory for the SUMMARY line.
"""


@dataclass(frozen=True)
class ParseResult:
    """Outcome of tokenizing, resolving and validating one roster text.

    When ``file_error`` is set no rows were produced and no per-row validation ran.
    """
    rows: list[ParsedRow]
    file_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.file_error is None


@dataclass(frozen=True)
class SubmitResult:
    submitted: int  # 送信件数 (READY + WARNING)
    created: int  # リモートが作成を確認した件数


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    ready_rows: int
    warning_rows: int
    error_rows: int
    inserted_rows: int  # 成功時行数 (dry-run では送信予定件数)
    elapsed_seconds: float
    error: str | None = None  # Failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for a directory run, rendered as the SUMMARY line."""
    success_files: int
    failed_files: int
    total_inserted_rows: int
    ready_rows: int
    warning_rows: int
    error_rows: int
    skipped_files: int  # rosters に対応付けのない CSV
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
