"""
CSV export of parsed data.

Always comma-separated with LF line endings. Fields containing the
delimiter, a quote or a line break are quoted, with quotes doubled.
"""

from __future__ import annotations

import csv
import io
from pathlib import PurePath

from .models import ParsedData
from .rules import EXPORT_DELIMITER


def to_csv(data: ParsedData) -> str:
    outp = io.StringIO(newline="")
    writer = csv.writer(
        outp,
        delimiter=EXPORT_DELIMITER,
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
    )

    if data.headers:
        writer.writerow(data.headers)
    writer.writerows(data.rows)

    return outp.getvalue()


def export_filename(file_name: str | None) -> str:
    stem = PurePath(file_name).stem if file_name else ""
    return f"{stem or 'data'}_export.csv"
