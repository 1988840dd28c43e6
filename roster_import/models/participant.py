from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""ParsedRow domain model and its enums.

A ParsedRow is the validated representation of a single roster data row.
The rows are created once at parse time; afterwards only ``chip_code`` and the
derived ``status`` / ``error_msg`` pair may change (see roster.editor).
"""

__all__ = [
    "Gender",
    "RowStatus",
    "ParsedRow",
    "MSG_MISSING_DATA",
    "MSG_INVALID_GENDER",
    "MSG_MISSING_CHIP",
    "duplicate_bib_message",
]

MSG_MISSING_DATA = "Missing data"
MSG_INVALID_GENDER = "Invalid gender"
MSG_MISSING_CHIP = "Missing Chip Code"


def duplicate_bib_message(first_row: int) -> str:
    return f"Duplicate BIB (row {first_row})"


class Gender(Enum):
    """Resolved participant gender.

    UNKNOWN rows never reach the payload builder; they are always ERROR.
    """
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"

    @property
    def prefix(self) -> str:
        # 年齢区分ラベルの接頭辞 ("M 30-39" 等)
        return "F" if self is Gender.FEMALE else "M"


class RowStatus(Enum):
    """Validation status lifecycle of a ParsedRow.

    - READY: importable, nothing to report
    - WARNING: importable, flagged for operator attention (missing chip code)
    - ERROR: permanently excluded from import
    """
    READY = "Ready"
    WARNING = "Warning"
    ERROR = "Error"

    @property
    def importable(self) -> bool:
        return self is not RowStatus.ERROR


@dataclass(frozen=True)
class ParsedRow:
    """Single roster row after header resolution and validation.

    ``row_num`` is the 1-based position among data rows (header excluded) and is
    the stable identity used by the edit layer. String fields are trimmed;
    an empty string means "absent".
    """
    row_num: int
    bib: str
    first_name: str
    last_name: str
    gender: Gender
    birth_date: str
    nationality: str
    chip_code: str
    age_group: str
    status: RowStatus
    error_msg: str = ""  # status != READY の場合のみ非空
