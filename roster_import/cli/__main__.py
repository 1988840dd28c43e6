from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..api.bulk_insert import BulkInsertClient
from ..config.loader import ConfigError, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import ImportConfig
from ..services.orchestrator import (
    ChipEdits,
    ProcessingError,
    process_all,
    read_roster_text,
    scan_roster_files,
    today_in,
)
from ..services.report import rows_to_frame
from ..services.session import RosterSession
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- load .env (overrides existing environment) and config/import.yml
- scan source_directory for mapped roster CSVs
- validate each file, apply --set-chip edits, submit (or dry-run)
- print SUMMARY and exit with 0 (all ok) / 2 (some file failed) / 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_PATH = Path("config/import.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; existing variables are overridden."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_chip_edit(value: str) -> tuple[str, int, str]:
    """Parse ``FILE:ROW=CODE`` (CODE may be empty to clear the chip)."""
    try:
        target, code = value.split("=", 1)
        file_name, row = target.rsplit(":", 1)
        return file_name, int(row), code
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected FILE:ROW=CODE, got {value!r}") from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Race roster CSV -> runner bulk importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print validated rows per roster then exit")
    p.add_argument("--report", type=Path, metavar="DIR", help="Write a CSV validation report per roster")
    p.add_argument(
        "--set-chip",
        type=_parse_chip_edit,
        action="append",
        default=[],
        metavar="FILE:ROW=CODE",
        help="Set a chip code on a data row before submission (repeatable)",
    )
    return p.parse_args(argv)


def _collect_edits(raw: list[tuple[str, int, str]]) -> ChipEdits:
    edits: ChipEdits = {}
    for file_name, row, code in raw:
        edits.setdefault(file_name, {})[row] = code  # 後勝ち
    return edits


def _build_client(cfg: ImportConfig) -> BulkInsertClient | None:
    # テスト等で送信を無効化: DISABLE_API_SUBMIT=1 (dry-run)
    if os.getenv("DISABLE_API_SUBMIT") == "1":
        return None
    base_url = os.getenv("ROSTER_API_URL") or cfg.api.base_url
    return BulkInsertClient(base_url, token=os.getenv("ROSTER_API_TOKEN"), timeout=cfg.api.timeout)


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        files = scan_roster_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no .csv files")
        return EXIT_SUCCESS_ALL
    today = today_in(cfg.timezone)
    for f in files:
        mapping = cfg.rosters.get(f.name)
        print(f"FILE: {f.name} category={mapping.category if mapping else '-'}")
        try:
            text = read_roster_text(f)
        except (OSError, UnicodeDecodeError) as e:
            print(f"  file_error=read failed: {e}")
            continue
        session = RosterSession(cfg.options, today=today)
        result = session.load(text)
        if not result.ok:
            print(f"  file_error={result.file_error}")
            continue
        frame = rows_to_frame(session.rows)
        print(frame.to_string(index=False) if not frame.empty else "  (no data rows)")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(CONFIG_PATH)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    logger.info(f"Processing rosters from: {directory}")

    if args.inspect_data:
        return _inspect_data(cfg)

    client = _build_client(cfg)
    mode = "live" if client is not None else "dry-run"
    try:
        result = process_all(
            cfg,
            client=client,
            edits=_collect_edits(args.set_chip),
            report_dir=args.report,
        )
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    logger.info(f"mode={mode} total_rows={result.total_inserted_rows}")

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
