"""Record listing workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from receiptbox.domain.record import Record
    from receiptbox.runtime.record_store import RecordStore


@dataclass(frozen=True)
class RecordListing:
    """Stored records for CLI/HTTP display, newest first."""

    records: list[Record]

    @property
    def grand_total(self) -> float:
        return sum(record.total for record in self.records)


def run_list_records(store: RecordStore, reload: bool = True) -> RecordListing:
    """Load stored records, re-reading the records file unless reload is False."""
    records = store.load_all() if reload else store.records
    return RecordListing(records=records)
