from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering service.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
ready={ready} warning={warning} error={error} skipped_files={skipped} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render a SUMMARY line from ProcessingResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_inserted_rows=3,
        ...     ready_rows=2, warning_rows=1, error_rows=1, skipped_files=0,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 rows=3 ready=2 warning=1 error=1 skipped_files=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_inserted_rows} "
        f"ready={result.ready_rows} "
        f"warning={result.warning_rows} "
        f"error={result.error_rows} "
        f"skipped_files={result.skipped_files} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
