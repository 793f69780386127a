"""
Table operations over parsed data: search, sort and copy selection.

None of these mutate the ParsedData they are given.
"""

from __future__ import annotations

from typing import Iterable, List

from .errors import InvalidColumnError
from .models import ParsedData


def search_rows(data: ParsedData, query: str, case_sensitive: bool = False) -> List[int]:
    """Indexes of rows with at least one cell containing query."""
    if not query or query.isspace():
        return []

    needle = query if case_sensitive else query.lower()
    matches = []
    for index, row in enumerate(data.rows):
        cells = row if case_sensitive else (cell.lower() for cell in row)
        if any(needle in cell for cell in cells):
            matches.append(index)
    return matches


def sort_rows(data: ParsedData, column: int, ascending: bool = True) -> ParsedData:
    """Return a copy of data with rows ordered by the string value of column."""
    if column < 0 or column >= len(data.headers):
        raise InvalidColumnError(
            f"Sort column {column} out of range for {len(data.headers)} columns"
        )

    ordered = sorted(data.rows, key=lambda row: row[column], reverse=not ascending)
    return data.model_copy(update={"rows": tuple(ordered)})


def copy_cells(data: ParsedData, row_indexes: Iterable[int], column_indexes: Iterable[int]) -> str:
    """Selected cells as tab-separated lines, the way a spreadsheet pastes them."""
    rows = list(row_indexes)
    columns = list(column_indexes)
    if not rows or not columns:
        return ""

    lines = []
    for r in rows:
        row = data.rows[r] if 0 <= r < len(data.rows) else ()
        lines.append("\t".join(row[c] if 0 <= c < len(row) else "" for c in columns))
    return "\n".join(lines).rstrip()
