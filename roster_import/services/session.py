from __future__ import annotations

import logging
from collections import Counter
from datetime import date

from ..api.bulk_insert import BulkInsertClient
from ..models.config_models import ImportOptions
from ..models.participant import ParsedRow, RowStatus
from ..models.processing_result import ParseResult, SubmitResult
from ..roster import parse_roster
from ..roster.editor import edit_chip_code
from ..roster.payload import build_payload

"""Roster session: the operator's in-memory buffer of ParsedRows.

Lifecycle:
    load()   -> replaces the buffer with a fresh, independent parse
    edit_chip_code() -> sequential, last write wins
    submit() -> one create-many request; buffer cleared on success,
                preserved unchanged on failure for a manual retry
    cancel() -> discards the buffer
"""

logger = logging.getLogger(__name__)


class SubmissionInProgressError(Exception):
    """Raised when submit() is called while a submission is already in flight."""


class RosterSession:
    def __init__(self, options: ImportOptions | None = None, today: date | None = None) -> None:
        self.options = options or ImportOptions()
        self.today = today
        self.rows: list[ParsedRow] = []
        self.file_error: str | None = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def load(self, text: str) -> ParseResult:
        result = parse_roster(text, self.options, today=self.today)
        self.rows = list(result.rows)
        self.file_error = result.file_error
        if result.file_error:
            logger.warning("roster rejected: %s", result.file_error)
        return result

    def edit_chip_code(self, row_num: int, chip_code: str) -> ParsedRow:
        return edit_chip_code(self.rows, row_num, chip_code)

    def cancel(self) -> None:
        self.rows = []
        self.file_error = None

    def counts(self) -> dict[RowStatus, int]:
        c = Counter(r.status for r in self.rows)
        return {status: c.get(status, 0) for status in RowStatus}

    def importable_rows(self) -> list[ParsedRow]:
        return [r for r in self.rows if r.status.importable]

    def submit(self, client: BulkInsertClient, campaign_id: str, category: str) -> SubmitResult:
        """Submit all importable rows in one request.

        Raises:
            SubmissionInProgressError: a submission of this buffer is in flight
            BulkInsertError: the request failed; the buffer is left intact
        """
        if self._in_flight:
            raise SubmissionInProgressError("a submission is already in flight")
        payload = build_payload(self.rows, campaign_id, category)
        self._in_flight = True
        try:
            result = client.create_many(
                campaign_id,
                payload.records,
                update_existing=self.options.update_existing,
            )
        finally:
            self._in_flight = False
        logger.info(f"submitted={result.submitted} created={result.created} category={category}")
        self.cancel()
        return SubmitResult(submitted=result.submitted, created=result.created)
