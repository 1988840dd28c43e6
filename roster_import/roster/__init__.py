"""Roster pipeline: tokenize -> resolve header -> validate -> edit -> payload."""

from __future__ import annotations

from datetime import date

from ..models.config_models import ImportOptions
from ..models.processing_result import ParseResult
from .header import MissingColumnsError, resolve_header
from .tokenizer import tokenize
from .validator import validate

__all__ = [
    "parse_roster",
]


def parse_roster(text: str, options: ImportOptions, today: date | None = None) -> ParseResult:
    """Run the synchronous parse pipeline over one roster text.

    A missing required column is reported once as ``file_error``; row-level
    problems are carried on the rows themselves.
    """
    rows = tokenize(text)
    if not rows:
        return ParseResult(rows=[], file_error="empty roster: no header row")
    try:
        column_map = resolve_header(rows[0])
    except MissingColumnsError as e:
        return ParseResult(rows=[], file_error=str(e))
    return ParseResult(rows=validate(rows[1:], column_map, options, today=today))
