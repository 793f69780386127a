"""
Quote-aware DSV row parser.

Single left-to-right pass over the content with one character of lookahead:

- fields wrapped in double quotes may contain the delimiter and raw line
  breaks
- two consecutive quotes inside a quoted field stand for one literal quote
- LF, CRLF and CR all end a row
- every field is trimmed when it is closed
- ragged rows are right-padded to the widest row

Never raises for any string input. An unterminated quote runs to the end of
the content.
"""

from __future__ import annotations

import enum
import logging
from itertools import islice, zip_longest

from .models import ParsedData
from .rules import QUOTE

logger = logging.getLogger(__name__)


class _State(enum.Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"


def _scan(content: str, delimiter: str) -> list[list[str]]:
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    state = _State.UNQUOTED

    def close_field() -> None:
        row.append("".join(field).strip())
        field.clear()

    def close_row() -> None:
        nonlocal row
        close_field()
        if row or rows:
            rows.append(row)
        row = []

    window = zip_longest(content, islice(content, 1, None))
    for char, peek in window:
        if state is _State.QUOTED:
            if char == QUOTE and peek == QUOTE:
                field.append(QUOTE)
                next(window, None)
            elif char == QUOTE:
                state = _State.UNQUOTED
            else:
                field.append(char)
        elif char == QUOTE:
            state = _State.QUOTED
        elif char == delimiter:
            close_field()
        elif char == "\r" and peek == "\n":
            close_row()
            next(window, None)
        elif char in ("\n", "\r"):
            close_row()
        else:
            field.append(char)

    if field or row:
        close_field()
        rows.append(row)

    return rows


def _pad(rows: list[list[str]], width: int) -> tuple[tuple[str, ...], ...]:
    return tuple(tuple(row) + ("",) * (width - len(row)) for row in rows)


def parse(content: str, delimiter: str, has_header: bool) -> ParsedData:
    """
    Parse delimiter-separated content into a rectangular ParsedData.

    With has_header the first row becomes the headers, otherwise headers
    are synthesized as "Column 1" ... "Column N". column_count counts the
    header row too.
    """
    if not content or content.isspace():
        return ParsedData.empty()

    scanned = _scan(content, delimiter)
    if not scanned:
        return ParsedData.empty()

    max_columns = max(len(row) for row in scanned)
    normalized = _pad(scanned, max_columns)

    if has_header:
        headers, data = normalized[0], normalized[1:]
    else:
        headers = tuple(f"Column {i}" for i in range(1, max_columns + 1))
        data = normalized

    logger.debug(
        "parsed %d rows x %d columns (delimiter=%r, header=%s)",
        len(data), max_columns, delimiter, has_header,
    )
    return ParsedData(
        headers=headers,
        rows=data,
        column_count=max_columns,
        row_count=len(data),
    )
