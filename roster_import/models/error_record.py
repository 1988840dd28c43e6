from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the row-error log.

Supports row=-1 as a sentinel value for file-level errors (missing required
columns, unreadable file, failed submission) where no single data row applies.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Roster filename being processed
        row: Data row number (1-based). Use -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable reason (the row's error message)
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int  # 行番号。ファイル単位エラーは -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
