from __future__ import annotations

import pytest

from roster_import.models.participant import Gender, ParsedRow, RowStatus
from roster_import.roster.editor import apply_chip_code, edit_chip_code


def _row(row_num=1, status=RowStatus.READY, msg="", chip="C1") -> ParsedRow:
    return ParsedRow(
        row_num=row_num, bib=str(100 + row_num), first_name="Ann", last_name="",
        gender=Gender.FEMALE, birth_date="", nationality="", chip_code=chip,
        age_group="", status=status, error_msg=msg,
    )


def test_warning_healed_by_chip_code():
    row = apply_chip_code(_row(status=RowStatus.WARNING, msg="Missing Chip Code", chip=""), "E200")
    assert row.status is RowStatus.READY
    assert row.error_msg == ""
    assert row.chip_code == "E200"


def test_ready_cleared_chip_becomes_warning():
    row = apply_chip_code(_row(), "")
    assert row.status is RowStatus.WARNING
    assert row.error_msg == "Missing Chip Code"


def test_ready_row_new_chip_stays_ready():
    row = apply_chip_code(_row(), "E201")
    assert row.status is RowStatus.READY
    assert row.chip_code == "E201"


def test_warning_with_empty_chip_stays_warning():
    row = apply_chip_code(_row(status=RowStatus.WARNING, msg="Missing Chip Code", chip=""), "   ")
    assert row.status is RowStatus.WARNING
    assert row.error_msg == "Missing Chip Code"


@pytest.mark.parametrize("chip", ["", "E300"])
def test_error_row_never_healed(chip):
    row = apply_chip_code(_row(status=RowStatus.ERROR, msg="Duplicate BIB (row 1)"), chip)
    assert row.status is RowStatus.ERROR
    assert row.error_msg == "Duplicate BIB (row 1)"
    assert row.chip_code == chip


def test_edit_chip_code_replaces_row_in_list():
    rows = [_row(1), _row(2, status=RowStatus.WARNING, msg="Missing Chip Code", chip="")]
    updated = edit_chip_code(rows, 2, "E9")
    assert rows[1] is updated
    assert rows[1].status is RowStatus.READY
    assert rows[0].chip_code == "C1"


def test_edit_chip_code_unknown_row():
    with pytest.raises(KeyError):
        edit_chip_code([_row(1)], 5, "E9")
