"""Record deletion workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from receiptbox.runtime.logging import get_logger

if TYPE_CHECKING:
    from receiptbox.domain.record import Record
    from receiptbox.runtime.record_store import RecordStore

logger = get_logger(__name__)

DeleteStatus = Literal["deleted", "not_found", "ambiguous"]


@dataclass(frozen=True)
class RecordDeleteRequest:
    """Inputs for deleting a record: a full id or a unique id prefix."""

    record_id: str


@dataclass(frozen=True)
class RecordDeleteResult:
    """Outcome from record deletion workflow."""

    status: DeleteStatus
    record: Record | None = None
    candidates: list[Record] | None = None
    error: str | None = None


def find_records(records: list[Record], key: str) -> list[Record]:
    """Records whose id equals key or starts with it (case-insensitive)."""
    key = key.strip().lower()
    if not key:
        return []
    exact = [r for r in records if str(r.id) == key]
    if exact:
        return exact
    return [r for r in records if str(r.id).startswith(key)]


def run_delete_record(store: RecordStore, request: RecordDeleteRequest) -> RecordDeleteResult:
    """Resolve the id against stored records and delete the single match."""
    matches = find_records(store.records, request.record_id)
    if not matches:
        return RecordDeleteResult(status="not_found", error=f"No record matches id {request.record_id!r}")
    if len(matches) > 1:
        return RecordDeleteResult(
            status="ambiguous",
            candidates=matches,
            error=f"Id prefix {request.record_id!r} matches {len(matches)} records",
        )

    record = matches[0]
    if not store.delete(record.id):
        # Removed concurrently between resolution and delete.
        logger.warning("Record %s vanished before it could be deleted", record.id)
        return RecordDeleteResult(status="not_found", error=f"No record matches id {request.record_id!r}")
    return RecordDeleteResult(status="deleted", record=record)
