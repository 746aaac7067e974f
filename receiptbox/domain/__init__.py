"""Core domain models for receiptbox.

Usage:
    from receiptbox.domain import LineItem, Record
"""

from receiptbox.domain.record import (
    UNKNOWN_DATE,
    UNKNOWN_STORE,
    UNKNOWN_TIME,
    LineItem,
    Record,
    parse_price,
)

__all__ = [
    "LineItem",
    "Record",
    "parse_price",
    "UNKNOWN_STORE",
    "UNKNOWN_DATE",
    "UNKNOWN_TIME",
]
