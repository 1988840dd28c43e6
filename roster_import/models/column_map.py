from __future__ import annotations

from dataclasses import dataclass, fields

"""ColumnMap model: canonical roster field -> zero-based column index.

Built once from the header row by roster.header.resolve_header and immutable
afterwards. ``None`` marks a canonical field whose column is absent.
"""

__all__ = [
    "ColumnMap",
    "FIELD_LABELS",
    "REQUIRED_FIELDS",
]

REQUIRED_FIELDS = ("bib", "first_name")

# オペレータ向け表示名 (送信レコードのキーと同じ表記)
FIELD_LABELS = {
    "bib": "bib",
    "first_name": "firstName",
    "last_name": "lastName",
    "gender": "gender",
    "birth_date": "birthDate",
    "nationality": "nationality",
    "chip_code": "chipCode",
    "age_group": "ageGroup",
}


@dataclass(frozen=True)
class ColumnMap:
    bib: int | None = None
    first_name: int | None = None
    last_name: int | None = None
    gender: int | None = None
    birth_date: int | None = None
    nationality: int | None = None
    chip_code: int | None = None
    age_group: int | None = None

    @property
    def missing_required(self) -> list[str]:
        """Required canonical fields that did not resolve to any header cell."""
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    def value(self, row: list[str], field_name: str) -> str:
        """Extract a canonical field from a tokenized row ("" if absent/short row)."""
        idx = getattr(self, field_name)
        if idx is None or idx >= len(row):
            return ""
        return row[idx]

    def as_dict(self) -> dict[str, int | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
