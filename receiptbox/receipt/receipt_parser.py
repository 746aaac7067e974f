"""Parse raw OCR text into receipt fields and records."""

from __future__ import annotations

from dataclasses import dataclass, field

from receiptbox.domain.record import LineItem, Record
from receiptbox.runtime.logging import get_logger

from .text_parser import extract_date, extract_items, extract_store, extract_time, normalize_lines

logger = get_logger(__name__)


@dataclass
class ParsedReceipt:
    """Fields recovered from one receipt's text."""

    store: str
    date: str
    time: str
    items: list[LineItem] = field(default_factory=list)


def parse_receipt_text(text: str) -> ParsedReceipt:
    """
    Recover store, date, time and items from OCR text.

    Best effort: missing fields fall back to the "Unknown ..." sentinels and
    an empty item list. Never raises for string input.
    """
    lines = normalize_lines(text)
    parsed = ParsedReceipt(
        store=extract_store(lines),
        date=extract_date(lines),
        time=extract_time(lines),
        items=extract_items(lines),
    )
    logger.debug(
        "Parsed %d lines: store=%r date=%r time=%r items=%d",
        len(lines),
        parsed.store,
        parsed.date,
        parsed.time,
        len(parsed.items),
    )
    return parsed


def build_record(text: str, image_reference: str = "") -> Record:
    """Parse text and wrap the result in a new Record."""
    parsed = parse_receipt_text(text)
    return Record.create(
        store=parsed.store,
        date=parsed.date,
        time=parsed.time,
        items=parsed.items,
        image_reference=image_reference,
    )
