from __future__ import annotations

import logging
from datetime import date

from ..models.column_map import ColumnMap
from ..models.config_models import ImportOptions
from ..models.participant import (
    MSG_INVALID_GENDER,
    MSG_MISSING_CHIP,
    MSG_MISSING_DATA,
    Gender,
    ParsedRow,
    RowStatus,
    duplicate_bib_message,
)
from .age_group import compute_age_group

"""Row validator and duplicate detector.

validate() is a pure function of the data rows, the ColumnMap, the options and
``today``. Rows are processed strictly in order because the dedup registry is
built incrementally: only non-error rows are registered, and the first
registered occurrence is what later duplicates point at.

Status rules, first match wins:
    a. bib or first name empty      -> ERROR   "Missing data"
    b. gender not M/F               -> ERROR   "Invalid gender"
    c. bib already registered       -> ERROR   "Duplicate BIB (row N)"  (if enabled)
    d. chip code empty              -> WARNING "Missing Chip Code"
    e. otherwise                    -> READY
"""

__all__ = [
    "DedupRegistry",
    "normalize_gender",
    "validate",
]

logger = logging.getLogger(__name__)


class DedupRegistry:
    """bib -> row_num of its first accepted occurrence. Never rolled back."""

    def __init__(self) -> None:
        self._first_seen: dict[str, int] = {}

    def first_occurrence(self, bib: str) -> int | None:
        return self._first_seen.get(bib)

    def register(self, bib: str, row_num: int) -> None:
        # 最初の登録のみ保持
        self._first_seen.setdefault(bib, row_num)

    def __contains__(self, bib: object) -> bool:
        return bib in self._first_seen

    def __len__(self) -> int:
        return len(self._first_seen)


def normalize_gender(raw: str) -> Gender:
    value = raw.upper()
    if value.startswith("F"):
        return Gender.FEMALE
    if value.startswith("M"):
        return Gender.MALE
    return Gender.UNKNOWN


def _status_for(
    bib: str,
    first_name: str,
    gender: Gender,
    chip_code: str,
    registry: DedupRegistry,
    options: ImportOptions,
) -> tuple[RowStatus, str]:
    if not bib or not first_name:
        return RowStatus.ERROR, MSG_MISSING_DATA
    if gender is Gender.UNKNOWN:
        return RowStatus.ERROR, MSG_INVALID_GENDER
    if options.check_duplicate_bib:
        first = registry.first_occurrence(bib)
        if first is not None:
            return RowStatus.ERROR, duplicate_bib_message(first)
    if not chip_code:
        return RowStatus.WARNING, MSG_MISSING_CHIP
    return RowStatus.READY, ""


def validate(
    rows: list[list[str]],
    column_map: ColumnMap,
    options: ImportOptions,
    today: date | None = None,
) -> list[ParsedRow]:
    """Validate data rows (header excluded) into ParsedRows.

    Parameters
    ----------
    rows: tokenized data rows, in file order
    column_map: resolved header
    options: operator switches (duplicate check / auto age group)
    today: reference date for age arithmetic (defaults to date.today())
    """
    if today is None:
        today = date.today()
    registry = DedupRegistry()
    parsed: list[ParsedRow] = []
    for row_num, raw in enumerate(rows, start=1):
        bib = column_map.value(raw, "bib")
        first_name = column_map.value(raw, "first_name")
        birth_date = column_map.value(raw, "birth_date")
        chip_code = column_map.value(raw, "chip_code")
        gender = normalize_gender(column_map.value(raw, "gender"))

        age_group = column_map.value(raw, "age_group")
        if options.auto_age_group and birth_date:
            computed = compute_age_group(birth_date, gender, today)
            if computed is not None:
                age_group = computed

        status, error_msg = _status_for(bib, first_name, gender, chip_code, registry, options)
        if status is not RowStatus.ERROR:
            registry.register(bib, row_num)

        parsed.append(
            ParsedRow(
                row_num=row_num,
                bib=bib,
                first_name=first_name,
                last_name=column_map.value(raw, "last_name"),
                gender=gender,
                birth_date=birth_date,
                nationality=column_map.value(raw, "nationality"),
                chip_code=chip_code,
                age_group=age_group,
                status=status,
                error_msg=error_msg,
            )
        )
    logger.debug("validated %d rows (%d distinct bibs registered)", len(parsed), len(registry))
    return parsed
