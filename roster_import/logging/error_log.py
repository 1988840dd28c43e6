from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord
from ..models.participant import (
    MSG_INVALID_GENDER,
    MSG_MISSING_CHIP,
    MSG_MISSING_DATA,
    ParsedRow,
    RowStatus,
)

"""Row-error log generation & buffering.

- JSON Lines, fixed schema (no extra keys)
- one ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- records are buffered and written in one go at flush time
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "error_type_for",
    "records_for_rows",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

_TYPE_BY_MESSAGE = {
    MSG_MISSING_DATA: "MISSING_DATA",
    MSG_INVALID_GENDER: "INVALID_GENDER",
    MSG_MISSING_CHIP: "MISSING_CHIP_CODE",
}


def error_type_for(row: ParsedRow) -> str:
    if row.error_msg.startswith("Duplicate BIB"):
        return "DUPLICATE_BIB"
    return _TYPE_BY_MESSAGE.get(row.error_msg, "ROW_ERROR")


def records_for_rows(file_name: str, rows: Iterable[ParsedRow]) -> list[ErrorRecord]:
    """ErrorRecords for every ERROR / WARNING row, in row order."""
    return [
        ErrorRecord.create(file_name, r.row_num, error_type_for(r), r.error_msg)
        for r in rows
        if r.status is not RowStatus.READY
    ]


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    - flush() appends everything buffered to the run's file (created if needed)
    - the file path is fixed on first access
    - single-threaded use only
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
