"""Composable receipt text parser components."""

from .fields_parser import extract_date, extract_store, extract_time, first_match, looks_like_date
from .items_parser import ITEM_RULES, ItemRule, SegmenterState, extract_items, match_item_line, step
from .normalizer import normalize_lines

__all__ = [
    "ITEM_RULES",
    "ItemRule",
    "SegmenterState",
    "extract_date",
    "extract_items",
    "extract_store",
    "extract_time",
    "first_match",
    "looks_like_date",
    "match_item_line",
    "normalize_lines",
    "step",
]
