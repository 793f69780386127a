"""
Deterministic parsing and normalization rules.

This file keeps every tunable in one place. Two values can be overridden
from the environment:

- DSV_MAX_UPLOAD_BYTES: largest accepted upload, in bytes
- DSV_LOG_LEVEL: level name for the package logger
"""

from __future__ import annotations

import logging
import os

TARGET_ENCODING = "utf-8"
EXPORT_DELIMITER = ","
DEFAULT_DELIMITER = ","
QUOTE = '"'

# Order matters: ties go to the earliest entry.
CANDIDATE_DELIMITERS = (",", "\t", ";", "|", " ")

EXTENSION_DELIMITERS = {
    "tsv": "\t",
    "csv": ",",
}

SUPPORTED_EXTENSIONS = ("csv", "tsv", "dsv", "psv", "txt")

DELIMITER_NAMES = {
    "comma": ",",
    "tab": "\t",
    "\\t": "\t",
    "semicolon": ";",
    "pipe": "|",
    "space": " ",
}

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"


def _env_int(key: str, default: int) -> int:
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_level(key: str, default: str) -> str:
    val = os.environ.get(key, default).upper()
    # getLevelName returns an int only for registered level names
    if isinstance(logging.getLevelName(val), int):
        return val
    return default


def max_upload_bytes() -> int:
    return _env_int("DSV_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


def log_level() -> str:
    return _env_level("DSV_LOG_LEVEL", DEFAULT_LOG_LEVEL)


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler and set the package logger level."""
    numeric = getattr(logging, (level or log_level()).upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("dsv_normalizer").setLevel(numeric)
