from __future__ import annotations

import re

from ..models.column_map import FIELD_LABELS, ColumnMap

"""Header resolver: map the first tokenized row onto canonical roster fields.

Each header cell is lower-cased and stripped of all whitespace, then looked up
in a fixed alias table. The first matching column wins for each field.
"""

__all__ = [
    "HEADER_ALIASES",
    "MissingColumnsError",
    "normalize_header_cell",
    "resolve_header",
]

HEADER_ALIASES: dict[str, frozenset[str]] = {
    "bib": frozenset({"bib", "bibno", "bibnumber"}),
    "first_name": frozenset({"firstname", "first_name", "fname", "name"}),
    "last_name": frozenset({"lastname", "last_name", "lname", "surname"}),
    "gender": frozenset({"gender", "sex"}),
    "birth_date": frozenset({"birthdate", "dob", "birth_date", "dateofbirth"}),
    "nationality": frozenset({"nationality", "nat", "country"}),
    "chip_code": frozenset({"chipcode", "chip", "rfid", "rfidtag", "chip_code"}),
    "age_group": frozenset({"agegroup", "age_group"}),
}

_WS = re.compile(r"\s+")


class MissingColumnsError(Exception):
    """Raised when bib / first name cannot be resolved from the header row."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        labels = ", ".join(FIELD_LABELS.get(name, name) for name in missing)
        super().__init__(f"missing required columns: {labels}")


def normalize_header_cell(cell: str) -> str:
    # "First Name" -> "firstname", " BIB No " -> "bibno"
    return _WS.sub("", cell).lower()


def resolve_header(header: list[str]) -> ColumnMap:
    """Build a ColumnMap from the header row.

    Raises:
        MissingColumnsError: if bib or first name resolves to no column. This is
            a file-level failure; the caller must not validate any rows.
    """
    normalized = [normalize_header_cell(c) for c in header]
    indices: dict[str, int | None] = {}
    for field_name, aliases in HEADER_ALIASES.items():
        indices[field_name] = next(
            (i for i, cell in enumerate(normalized) if cell in aliases), None
        )
    column_map = ColumnMap(**indices)
    missing = column_map.missing_required
    if missing:
        raise MissingColumnsError(missing)
    return column_map
