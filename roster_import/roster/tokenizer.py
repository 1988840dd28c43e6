from __future__ import annotations

"""Comma-delimited text tokenizer.

Rules:
- fields are separated by a single comma
- a field may be quoted with '"'; inside quotes '""' is one literal '"' and every
  other character (comma, CR, LF) is literal
- rows end at LF or CRLF (a CR outside quotes never produces an extra row)
- every field is trimmed; rows whose fields are all empty are dropped
- a trailing unterminated field/row is flushed as if terminated

There are no error conditions. An unterminated quote keeps the scanner in quoted
mode until end of input and whatever was accumulated is emitted.
"""

__all__ = [
    "tokenize",
]


def _emit(rows: list[list[str]], row: list[str]) -> None:
    cells = [c.strip() for c in row]
    if any(cells):
        rows.append(cells)


def tokenize(text: str) -> list[list[str]]:
    """Split ``text`` into rows of trimmed field strings, preserving row order."""
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and text[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            row.append("".join(field))
            field = []
        elif ch == "\r":
            # CRLF の CR は無視 (LF 側で行を確定)
            pass
        elif ch == "\n":
            row.append("".join(field))
            _emit(rows, row)
            row, field = [], []
        else:
            field.append(ch)
        i += 1

    # flush trailing (possibly unterminated) field/row
    if field or row:
        row.append("".join(field))
        _emit(rows, row)
    return rows
