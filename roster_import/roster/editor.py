from __future__ import annotations

from dataclasses import replace

from ..models.participant import MSG_MISSING_CHIP, ParsedRow, RowStatus

"""Edit layer: operator corrections applied after parse.

Only the chip code can be edited. Gender, age group and the duplicate outcome
are fixed at parse time and never recomputed here.
"""

__all__ = [
    "apply_chip_code",
    "edit_chip_code",
]


def apply_chip_code(row: ParsedRow, chip_code: str) -> ParsedRow:
    """Return ``row`` with a new chip code and its status re-derived.

    - WARNING + non-empty chip         -> READY, message cleared
    - READY (no message) + empty chip  -> WARNING "Missing Chip Code"
    - anything else (ERROR included)   -> status untouched
    """
    value = chip_code.strip()
    status, error_msg = row.status, row.error_msg
    if row.status is RowStatus.WARNING and value:
        status, error_msg = RowStatus.READY, ""
    elif row.status is RowStatus.READY and not value and not row.error_msg:
        status, error_msg = RowStatus.WARNING, MSG_MISSING_CHIP
    return replace(row, chip_code=value, status=status, error_msg=error_msg)


def edit_chip_code(rows: list[ParsedRow], row_num: int, chip_code: str) -> ParsedRow:
    """Apply a chip code edit to the row identified by ``row_num`` in place.

    Raises:
        KeyError: no row with that row number exists in ``rows``
    """
    for idx, row in enumerate(rows):
        if row.row_num == row_num:
            updated = apply_chip_code(row, chip_code)
            rows[idx] = updated
            return updated
    raise KeyError(row_num)
