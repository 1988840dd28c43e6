from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..models.participant import ParsedRow

"""Validation report rendering with pandas.

The same frame backs ``--inspect-data`` (printed) and ``--report`` (CSV file
per roster), one line per ParsedRow including ERROR rows.
"""

__all__ = [
    "REPORT_COLUMNS",
    "rows_to_frame",
    "write_report",
]

REPORT_COLUMNS = [
    "rowNum",
    "bib",
    "firstName",
    "lastName",
    "gender",
    "birthDate",
    "nationality",
    "chipCode",
    "ageGroup",
    "status",
    "errorMsg",
]


def rows_to_frame(rows: Iterable[ParsedRow]) -> pd.DataFrame:
    records = [
        {
            "rowNum": r.row_num,
            "bib": r.bib,
            "firstName": r.first_name,
            "lastName": r.last_name,
            "gender": r.gender.value,
            "birthDate": r.birth_date,
            "nationality": r.nationality,
            "chipCode": r.chip_code,
            "ageGroup": r.age_group,
            "status": r.status.value,
            "errorMsg": r.error_msg,
        }
        for r in rows
    ]
    return pd.DataFrame.from_records(records, columns=REPORT_COLUMNS)


def write_report(rows: Iterable[ParsedRow], out_dir: Path, roster_name: str) -> Path:
    """Write ``<out_dir>/<roster stem>-report.csv`` and return its path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{Path(roster_name).stem}-report.csv"
    rows_to_frame(rows).to_csv(path, index=False, encoding="utf-8")
    return path
