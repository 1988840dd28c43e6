from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from roster_import.api.bulk_insert import BulkInsertClient, BulkInsertError, InsertResult
from roster_import.config.loader import load_config
from roster_import.services.orchestrator import ProcessingError, process_all, scan_roster_files


@pytest.fixture()
def cfg(write_config):
    return load_config(write_config)


def _client(created=None, side_effect=None) -> MagicMock:
    client = MagicMock(spec=BulkInsertClient)
    if side_effect is not None:
        client.create_many.side_effect = side_effect
    else:
        client.create_many.side_effect = lambda campaign, records, update_existing=False: InsertResult(
            submitted=len(records), created=len(records) if created is None else created
        )
    return client


def _log_lines(workdir: Path) -> list[dict]:
    logs = list((workdir / "logs").glob("errors-*.log"))
    if not logs:
        return []
    return [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]


def test_scan_roster_files(temp_workdir: Path):
    data = temp_workdir / "data"
    (data / "b.csv").write_text("x", encoding="utf-8")
    (data / "a.CSV").write_text("x", encoding="utf-8")
    (data / "notes.txt").write_text("x", encoding="utf-8")
    assert [p.name for p in scan_roster_files(data)] == ["a.CSV", "b.csv"]


def test_scan_roster_files_missing_dir(temp_workdir: Path):
    with pytest.raises(ProcessingError):
        scan_roster_files(temp_workdir / "nope")


def test_process_all_empty_directory(cfg, today):
    result = process_all(cfg, today=today)
    assert result.success_files == 0
    assert result.failed_files == 0
    assert result.file_stats == []


def test_process_all_dry_run(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")
    (temp_workdir / "data" / "unmapped.csv").write_text(sample_roster_csv, encoding="utf-8")
    result = process_all(cfg, client=None, today=today)
    assert result.success_files == 1
    assert result.skipped_files == 1
    assert result.total_inserted_rows == 2
    assert (result.ready_rows, result.warning_rows, result.error_rows) == (1, 1, 2)
    rows = [(r["row"], r["error_type"]) for r in _log_lines(temp_workdir)]
    assert rows == [(2, "DUPLICATE_BIB"), (3, "INVALID_GENDER"), (4, "MISSING_CHIP_CODE")]


def test_process_all_submits_with_category(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "funrun.csv").write_text(sample_roster_csv, encoding="utf-8")
    client = _client()
    result = process_all(cfg, client=client, today=today)
    assert result.success_files == 1
    assert result.total_inserted_rows == 2
    campaign, records = client.create_many.call_args.args
    assert campaign == "bkk-marathon-2025"
    assert {r["category"] for r in records} == {"5K"}


def test_process_all_applies_chip_edits(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")
    client = _client()
    # row 4 warning healed, row 2 error untouched, row 99 ignored
    edits = {"marathon.csv": {4: "E2004", 2: "E2002", 99: "X"}}
    result = process_all(cfg, client=client, edits=edits, today=today)
    assert (result.ready_rows, result.warning_rows, result.error_rows) == (2, 0, 2)
    _, records = client.create_many.call_args.args
    assert [r.get("chipCode") for r in records] == ["CHIP101", "E2004"]


def test_process_all_missing_columns_fails_file(cfg, temp_workdir: Path, today):
    (temp_workdir / "data" / "marathon.csv").write_text("Number,Gender\n1,M\n", encoding="utf-8")
    client = _client()
    result = process_all(cfg, client=client, today=today)
    assert result.failed_files == 1
    assert result.file_stats[0].error.startswith("missing required columns")
    client.create_many.assert_not_called()
    (rec,) = _log_lines(temp_workdir)
    assert rec["row"] == -1
    assert rec["error_type"] == "MISSING_COLUMNS"


def test_process_all_submit_failure_is_per_file(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "funrun.csv").write_text(sample_roster_csv, encoding="utf-8")
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")

    def create_many(campaign, records, update_existing=False):
        if records[0]["category"] == "5K":
            raise BulkInsertError("bulk insert rejected: HTTP 500: boom", status_code=500)
        return InsertResult(submitted=len(records), created=len(records))

    result = process_all(cfg, client=_client(side_effect=create_many), today=today)
    assert result.success_files == 1
    assert result.failed_files == 1
    assert result.total_inserted_rows == 2
    failed = [s for s in result.file_stats if s.status == "failed"]
    assert failed[0].file_name == "funrun.csv"
    assert any(r["error_type"] == "SUBMIT_FAILED" for r in _log_lines(temp_workdir))


def test_process_all_created_count_from_response(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")
    result = process_all(cfg, client=_client(created=1), today=today)
    assert result.total_inserted_rows == 1


def test_process_all_bom_header(cfg, temp_workdir: Path, today):
    text = "\ufeffbib,name,gender,chip\n1,Ann,F,C1\n"
    (temp_workdir / "data" / "marathon.csv").write_text(text, encoding="utf-8")
    result = process_all(cfg, today=today)
    assert result.success_files == 1
    assert result.ready_rows == 1


def test_process_all_writes_reports(cfg, temp_workdir: Path, sample_roster_csv, today):
    (temp_workdir / "data" / "marathon.csv").write_text(sample_roster_csv, encoding="utf-8")
    process_all(cfg, report_dir=temp_workdir / "reports", today=today)
    assert (temp_workdir / "reports" / "marathon-report.csv").exists()
