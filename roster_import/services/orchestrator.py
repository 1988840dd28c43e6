from __future__ import annotations

import logging
import time
from datetime import UTC, date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from ..api.bulk_insert import BulkInsertClient, BulkInsertError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord, records_for_rows
from ..logging.init import roster_context
from ..models.config_models import ImportConfig, RosterMappingConfig
from ..models.participant import RowStatus
from ..models.processing_result import FileStat, ProcessingResult
from .progress import ProgressTracker
from .report import write_report
from .session import RosterSession

"""Service orchestration for the roster import tool.

Coordinates a directory run: scan for roster CSVs, parse each mapped file in
its own RosterSession, apply operator chip-code edits, submit (or dry-run),
buffer row errors to the JSON Lines log and aggregate a ProcessingResult.

Each file is an independent run; a failed file never affects the others.
"""

logger = logging.getLogger(__name__)

ChipEdits = dict[str, dict[int, str]]  # file name -> {row_num: chip code}


class ProcessingError(Exception):
    """Fatal error that prevents the directory run from starting."""


def scan_roster_files(directory: Path) -> list[Path]:
    """Scan directory for .csv files (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv"
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def read_roster_text(path: Path) -> str:
    # utf-8-sig: Excel 出力の BOM を除去 (ヘッダ "bib" 判定が壊れるため)
    return path.read_text(encoding="utf-8-sig")


def today_in(timezone: str) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


def _process_file(
    path: Path,
    mapping: RosterMappingConfig,
    config: ImportConfig,
    client: BulkInsertClient | None,
    edits: dict[int, str],
    error_log: ErrorLogBuffer,
    today: date,
    report_dir: Path | None,
) -> FileStat:
    started = time.perf_counter()

    def _stat(status: str, counts: dict[RowStatus, int], inserted: int, error: str | None) -> FileStat:
        return FileStat(
            file_name=path.name,
            status=status,
            ready_rows=counts[RowStatus.READY],
            warning_rows=counts[RowStatus.WARNING],
            error_rows=counts[RowStatus.ERROR],
            inserted_rows=inserted,
            elapsed_seconds=time.perf_counter() - started,
            error=error,
        )

    session = RosterSession(config.options, today=today)
    try:
        text = read_roster_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"read failed: {e}", extra=roster_context(path.name))
        error_log.append(ErrorRecord.create(path.name, -1, "READ_ERROR", str(e)))
        return _stat("failed", session.counts(), 0, f"read failed: {e}")

    result = session.load(text)
    if not result.ok:
        logger.error(result.file_error, extra=roster_context(path.name))
        error_log.append(ErrorRecord.create(path.name, -1, "MISSING_COLUMNS", result.file_error or ""))
        return _stat("failed", session.counts(), 0, result.file_error)

    for row_num, chip in edits.items():
        try:
            session.edit_chip_code(row_num, chip)
        except KeyError:
            logger.warning("chip edit ignored, no such data row", extra=roster_context(path.name, row_num))

    counts = session.counts()
    error_log.extend(records_for_rows(path.name, session.rows))
    for row in session.rows:
        if row.status is not RowStatus.READY:
            logger.debug(
                f"bib={row.bib!r} {row.status.value}: {row.error_msg}",
                extra=roster_context(path.name, row.row_num),
            )
    if report_dir is not None:
        report_path = write_report(session.rows, report_dir, path.name)
        logger.info(f"report written to {report_path}", extra=roster_context(path.name))

    importable = len(session.importable_rows())
    if client is None:
        logger.info(
            f"dry-run importable={importable} category={mapping.category}",
            extra=roster_context(path.name),
        )
        return _stat("success", counts, importable, None)

    try:
        submitted = session.submit(client, config.campaign_id, mapping.category)
    except BulkInsertError as e:
        logger.error(str(e), extra=roster_context(path.name))
        error_log.append(ErrorRecord.create(path.name, -1, "SUBMIT_FAILED", str(e)))
        return _stat("failed", counts, 0, str(e))
    return _stat("success", counts, submitted.created, None)


def process_all(
    config: ImportConfig,
    client: BulkInsertClient | None = None,
    edits: ChipEdits | None = None,
    report_dir: Path | None = None,
    today: date | None = None,
) -> ProcessingResult:
    """Process all roster files in the configured directory.

    Args:
        config: Import configuration with directory, mappings and options
        client: Bulk-insert client (None = dry-run, nothing is submitted)
        edits: Chip-code corrections keyed by file name then row number
        report_dir: When set, a CSV validation report is written per file
        today: Reference date for age groups (default: today in config.timezone)

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer()
    edits = edits or {}
    if today is None:
        today = today_in(config.timezone)

    file_paths = scan_roster_files(Path(config.source_directory))
    mapped = [p for p in file_paths if p.name in config.rosters]
    skipped = len(file_paths) - len(mapped)
    for p in file_paths:
        if p.name not in config.rosters:
            logger.info(f"skip {p.name}: no roster mapping")

    file_stats: list[FileStat] = []
    with ProgressTracker(len(mapped)) as progress:
        for path in mapped:
            progress.start_file(path)
            stat = _process_file(
                path,
                config.rosters[path.name],
                config,
                client,
                edits.get(path.name, {}),
                error_log,
                today,
                report_dir,
            )
            file_stats.append(stat)
            progress.finish_file(ready=stat.ready_rows, warn=stat.warning_rows, err=stat.error_rows)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"row errors written to {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status == "success"),
        failed_files=sum(1 for s in file_stats if s.status == "failed"),
        total_inserted_rows=sum(s.inserted_rows for s in file_stats),
        ready_rows=sum(s.ready_rows for s in file_stats),
        warning_rows=sum(s.warning_rows for s in file_stats),
        error_rows=sum(s.error_rows for s in file_stats),
        skipped_files=skipped,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
