"""Store/date/time extraction helpers."""

import re
from collections.abc import Sequence

from receiptbox.domain.record import UNKNOWN_DATE, UNKNOWN_STORE, UNKNOWN_TIME

from .patterns import DATE_PATTERNS, ITEM_NAME_DATE_PATTERNS, STORE_PREFIXES, TIME_PATTERNS

PatternTable = Sequence[tuple[str, re.Pattern[str]]]


def strip_store_prefix(line: str, prefixes: Sequence[str] = STORE_PREFIXES) -> str:
    """Drop the first matching boilerplate prefix (case-insensitive) and following whitespace."""
    upper = line.upper()
    for prefix in prefixes:
        if upper.startswith(prefix):
            return line[len(prefix) :].strip()
    return line


def extract_store(lines: Sequence[str]) -> str:
    """The first line, minus any boilerplate prefix. Defaults to "Unknown Store"."""
    if not lines:
        return UNKNOWN_STORE
    return strip_store_prefix(lines[0])


def first_match(lines: Sequence[str], patterns: PatternTable) -> tuple[str, str] | None:
    """
    Scan lines top-to-bottom and return (label, matched text) for the first hit.

    Within a line, patterns are tried in table order and the first one that
    matches anywhere wins; only the matched substring is returned.
    """
    for line in lines:
        for label, pattern in patterns:
            match = pattern.search(line)
            if match:
                return label, match.group(0)
    return None


def extract_date(lines: Sequence[str]) -> str:
    """Extract the first date-looking substring. Defaults to "Unknown Date"."""
    hit = first_match(lines, DATE_PATTERNS)
    return hit[1] if hit else UNKNOWN_DATE


def extract_time(lines: Sequence[str]) -> str:
    """Extract the first time-looking substring. Defaults to "Unknown Time"."""
    hit = first_match(lines, TIME_PATTERNS)
    return hit[1] if hit else UNKNOWN_TIME


def looks_like_date(text: str) -> bool:
    """Return True if a numeric date (03/20/2023) or a "15 Mar" form appears anywhere in text."""
    return any(pattern.search(text) for pattern in ITEM_NAME_DATE_PATTERNS)
