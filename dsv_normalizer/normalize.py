"""
Load pipeline: raw upload bytes to parsed, normalized table.

Steps:
- encoding detection + decoding to text
- delimiter detection (unless the caller chose one)
- quote-aware parse with row width normalization
- load report
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Optional

from charset_normalizer import from_bytes

from .detect import detect_delimiter
from .models import DelimiterReport, EncodingReport, LoadReport, ParsedData
from .parser import parse
from .rules import TARGET_ENCODING

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


@dataclass(frozen=True)
class LoadResult:
    data: ParsedData
    report: LoadReport


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def decode_bytes(raw: bytes) -> tuple[str, EncodingReport]:
    """
    Decode input bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped, never carried into the first header cell.
    - If decoding with the detected encoding fails, fall back to UTF-8.
    - If that fails too, decode with replacement characters and report it.
    """
    detected = None

    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or TARGET_ENCODING
    if raw.startswith(_UTF8_BOM) and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode(TARGET_ENCODING)
            decode_used = TARGET_ENCODING
        except UnicodeDecodeError:
            text = raw.decode(TARGET_ENCODING, errors="replace")
            decode_used = TARGET_ENCODING
        decode_fallback = True
        logger.warning("decoding as %s failed, fell back to %s", detected, decode_used)

    if text.startswith("\ufeff"):
        text = text[1:]

    return text, EncodingReport(
        detected=detected,
        decode_used=decode_used,
        decode_fallback=decode_fallback,
    )


def count_line_endings(text: str) -> dict[str, int]:
    crlf = text.count("\r\n")
    return {
        "crlf": crlf,
        "cr": text.count("\r") - crlf,
        "lf": text.count("\n") - crlf,
    }


def load_text(
    text: str,
    file_name: Optional[str] = None,
    delimiter: Optional[str] = None,
    has_header: bool = True,
) -> tuple[ParsedData, DelimiterReport]:
    detected = detect_delimiter(text, file_name)
    used = delimiter if delimiter is not None else detected
    data = parse(text, used, has_header)
    return data, DelimiterReport(
        detected=detected,
        used=used,
        overridden=used != detected,
    )


def load_bytes(
    raw: bytes,
    file_name: Optional[str] = None,
    delimiter: Optional[str] = None,
    has_header: bool = True,
) -> LoadResult:
    """Decode, detect and parse one uploaded file."""
    text, enc_report = decode_bytes(raw)
    data, delim_report = load_text(text, file_name, delimiter, has_header)

    logger.info(
        "loaded %s: %d bytes, encoding=%s, delimiter=%r, %d rows x %d columns",
        file_name or "<upload>",
        len(raw),
        enc_report.decode_used,
        delim_report.used,
        data.row_count,
        data.column_count,
    )

    report = LoadReport(
        sha256=_sha256_hex(raw),
        size_bytes=len(raw),
        encoding=enc_report,
        delimiter=delim_report,
        line_endings=count_line_endings(text),
        has_header=has_header,
    )
    return LoadResult(data=data, report=report)
