"""Data models for scanned receipts."""

from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, field

UNKNOWN_STORE = "Unknown Store"
UNKNOWN_DATE = "Unknown Date"
UNKNOWN_TIME = "Unknown Time"

# Fixed display-ordering format; any other date text has no sort key.
SORT_DATE_FORMAT = "%m/%d/%Y"


def parse_price(text: str) -> float:
    """Best-effort numeric value of a price string, 0.0 when it doesn't parse."""
    # float() would accept digit separators ("1_000"); prices never use them.
    if "_" in text:
        return 0.0
    try:
        return float(text.replace(",", "."))
    except ValueError:
        return 0.0


@dataclass
class LineItem:
    """A single purchased product/price pair on a receipt."""

    name: str
    # Kept exactly as recognized/entered, not as a number.
    price: str
    # Regenerated on decode (the file format carries no item ids), so it is
    # left out of equality.
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    @property
    def numeric_price(self) -> float:
        return parse_price(self.price)


@dataclass
class Record:
    """A parsed receipt."""

    id: uuid.UUID
    store: str
    date: str
    time: str
    items: list[LineItem] = field(default_factory=list)
    image_reference: str = ""

    @classmethod
    def create(
        cls,
        store: str,
        date: str,
        time: str,
        items: list[LineItem] | None = None,
        image_reference: str = "",
    ) -> Record:
        """Build a new record with a fresh id."""
        return cls(
            id=uuid.uuid4(),
            store=store,
            date=date,
            time=time,
            items=list(items or []),
            image_reference=image_reference,
        )

    @property
    def total(self) -> float:
        return sum((item.numeric_price for item in self.items), 0.0)

    @property
    def sort_key(self) -> dt.date | None:
        """Date parsed as MM/DD/YYYY, or None if the text doesn't fit that format."""
        try:
            return dt.datetime.strptime(self.date, SORT_DATE_FORMAT).date()
        except ValueError:
            return None
