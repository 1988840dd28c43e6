from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..models.participant import Gender, ParsedRow

"""Payload builder: importable rows -> create-many request body.

ERROR rows are permanently excluded. Optional fields (birthDate, ageGroup,
chipCode) are omitted when empty rather than sent as "". The body on the wire
is a bare JSON array; every record carries the campaign as ``eventId``.
"""

__all__ = [
    "DEFAULT_LAST_NAME",
    "DEFAULT_NATIONALITY",
    "TIMING_STATUS_NOT_STARTED",
    "SubmissionPayload",
    "build_payload",
    "build_record",
    "tag_campaign",
]

DEFAULT_LAST_NAME = "-"
DEFAULT_NATIONALITY = "THA"
# timing status (not the validation status)
TIMING_STATUS_NOT_STARTED = "not started"


@dataclass(frozen=True)
class SubmissionPayload:
    campaign_id: str
    category: str
    records: list[dict[str, Any]]

    def __len__(self) -> int:
        return len(self.records)

    def to_json(self) -> list[dict[str, Any]]:
        return tag_campaign(self.records, self.campaign_id)


def tag_campaign(records: Iterable[dict[str, Any]], campaign_id: str) -> list[dict[str, Any]]:
    # eventId を各レコードの先頭に付与 (元の dict は変更しない)
    return [{"eventId": campaign_id, **r} for r in records]


def build_record(row: ParsedRow, category: str) -> dict[str, Any]:
    record: dict[str, Any] = {
        "bib": row.bib,
        "firstName": row.first_name,
        "lastName": row.last_name or DEFAULT_LAST_NAME,
        "gender": "F" if row.gender is Gender.FEMALE else "M",
        "category": category,
        "nationality": row.nationality or DEFAULT_NATIONALITY,
    }
    if row.birth_date:
        record["birthDate"] = row.birth_date
    if row.age_group:
        record["ageGroup"] = row.age_group
    if row.chip_code:
        record["chipCode"] = row.chip_code
    record["status"] = TIMING_STATUS_NOT_STARTED
    return record


def build_payload(rows: Iterable[ParsedRow], campaign_id: str, category: str) -> SubmissionPayload:
    """Select READY/WARNING rows and serialize them in row order."""
    records = [build_record(r, category) for r in rows if r.status.importable]
    return SubmissionPayload(campaign_id=campaign_id, category=category, records=records)
