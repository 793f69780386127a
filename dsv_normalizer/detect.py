"""
Delimiter detection.

Best-effort guess from the file extension, then from the first line of
content. This is a heuristic over exactly one line and never looks at the
parse result.
"""

from __future__ import annotations

import logging

from .errors import InvalidDelimiterError
from .models import DelimiterOption
from .rules import (
    CANDIDATE_DELIMITERS,
    DEFAULT_DELIMITER,
    DELIMITER_NAMES,
    EXTENSION_DELIMITERS,
    QUOTE,
)

logger = logging.getLogger(__name__)

COMMON_DELIMITERS = (
    DelimiterOption(character=",", display_name="Comma (,)"),
    DelimiterOption(character="\t", display_name="Tab (\\t)"),
    DelimiterOption(character=";", display_name="Semicolon (;)"),
    DelimiterOption(character="|", display_name="Pipe (|)"),
    DelimiterOption(character=" ", display_name="Space"),
)


def file_extension(file_name: str) -> str | None:
    if "." in file_name:
        return file_name.rsplit(".", 1)[-1].lower()
    return None


def _first_line(content: str) -> str:
    for i, char in enumerate(content):
        if char in "\r\n":
            return content[:i]
    return content


def _count_unquoted(line: str, delimiter: str) -> int:
    count = 0
    in_quotes = False
    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            count += 1
    return count


def detect_delimiter(content: str, file_name: str | None = None) -> str:
    """
    Guess the field separator for content.

    A known extension (.tsv, .csv) wins over content inspection. Otherwise
    each candidate is counted on the first line, outside quotes, and the
    highest count wins with ties resolved by candidate order. Falls back to
    comma.
    """
    if file_name:
        ext = file_extension(file_name)
        if ext in EXTENSION_DELIMITERS:
            return EXTENSION_DELIMITERS[ext]

    if not content:
        return DEFAULT_DELIMITER

    line = _first_line(content)
    counts = [(_count_unquoted(line, d), d) for d in CANDIDATE_DELIMITERS]
    # max() keeps the first of equal keys
    best_count, best = max(counts, key=lambda item: item[0])
    logger.debug("delimiter counts on first line: %s", counts)

    if best_count == 0:
        return DEFAULT_DELIMITER
    return best


def delimiter_option(character: str) -> DelimiterOption:
    """Catalogue entry for character, or a custom option for anything else."""
    for option in COMMON_DELIMITERS:
        if option.character == character:
            return option
    return DelimiterOption(character=character, display_name=f"Custom: '{character}'")


def resolve_delimiter(value: str) -> str:
    """
    Turn a user-supplied delimiter value into a single character.

    Accepts a literal character, a name from DELIMITER_NAMES, or a longer
    string whose first character is used.
    """
    if value is None or value == "":
        raise InvalidDelimiterError("Delimiter must be a non-empty value")
    named = DELIMITER_NAMES.get(value.lower())
    if named is not None:
        return named
    return value[0]
