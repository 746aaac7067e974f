"""Line-by-line receipt item extraction.

Item capture is driven by a small state machine:

    BEFORE_HEADER --header--> CAPTURING --total--> AFTER_TOTAL
          |                                            |
          +-----------------total----------------------+
    AFTER_TOTAL --header--> CAPTURING

Lines are eligible for item matching in BEFORE_HEADER (receipts without an
"ITEMS" header) and in CAPTURING. Header and total-like lines themselves are
never items.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from receiptbox.domain.record import LineItem

from .fields_parser import looks_like_date
from .patterns import (
    COLUMN_GAP_PATTERN,
    HEADER_KEYWORDS,
    QUANTITY_PATTERN,
    TOTAL_KEYWORDS,
    TRAILING_PRICE_PATTERN,
)


class SegmenterState(Enum):
    BEFORE_HEADER = "before_header"
    CAPTURING = "capturing"
    AFTER_TOTAL = "after_total"


def step(state: SegmenterState, line: str) -> tuple[SegmenterState, bool]:
    """
    Advance the segmenter by one line.

    Returns:
        (next_state, eligible) where eligible says whether this line should be
        tried against the item patterns.
    """
    upper = line.upper()
    if any(keyword in upper for keyword in HEADER_KEYWORDS):
        return SegmenterState.CAPTURING, False
    if any(keyword in upper for keyword in TOTAL_KEYWORDS):
        return SegmenterState.AFTER_TOTAL, False
    return state, state is not SegmenterState.AFTER_TOTAL


def clean_price(raw: str) -> str:
    """Strip currency symbols and normalize the decimal separator."""
    return raw.replace("$", "").replace(",", ".")


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def _name_price_item(match: re.Match[str]) -> LineItem | None:
    name = match.group(1).strip()
    price = clean_price(match.group(2))
    if not name or not price:
        return None
    if not _is_number(price):
        return None
    # "03/20/2023  4.99" is a date line, not a product
    if looks_like_date(name):
        return None
    return LineItem(name=name, price=price)


def _quantity_item(match: re.Match[str]) -> LineItem | None:
    # Quantity lines are recognized so they stop the search, but not decomposed yet.
    # TODO: turn (name, qty, unit price, extended price) into a LineItem once the
    # record model carries quantities.
    return None


@dataclass(frozen=True)
class ItemRule:
    """One entry of the ordered item pattern table."""

    label: str
    pattern: re.Pattern[str]
    handler: Callable[[re.Match[str]], LineItem | None]


ITEM_RULES: tuple[ItemRule, ...] = (
    ItemRule("trailing_price", TRAILING_PRICE_PATTERN, _name_price_item),
    ItemRule("quantity", QUANTITY_PATTERN, _quantity_item),
    ItemRule("column_gap", COLUMN_GAP_PATTERN, _name_price_item),
)


def match_item_line(line: str, rules: Sequence[ItemRule] = ITEM_RULES) -> tuple[str, LineItem | None] | None:
    """
    Run a line through the item table.

    The first rule whose pattern matches decides the outcome, even when its
    handler rejects the candidate.

    Returns:
        (rule label, item or None) for the deciding rule, or None if no
        pattern matched at all.
    """
    for rule in rules:
        match = rule.pattern.match(line)
        if match:
            return rule.label, rule.handler(match)
    return None


def extract_items(lines: Sequence[str]) -> list[LineItem]:
    """Extract (name, price) items in line order."""
    items: list[LineItem] = []
    state = SegmenterState.BEFORE_HEADER

    for line in lines:
        state, eligible = step(state, line)
        if not eligible:
            continue
        outcome = match_item_line(line)
        if outcome is None:
            continue
        _, item = outcome
        if item is not None:
            items.append(item)

    return items
