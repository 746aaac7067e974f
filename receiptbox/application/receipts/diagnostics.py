"""Store diagnostics workflow.

Reports where the store lives and whether its files agree with memory.
The optional self-test writes a throwaway record through the normal save
path, reloads, and deletes it again.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from receiptbox.domain.record import LineItem, Record
from receiptbox.runtime.logging import get_logger

if TYPE_CHECKING:
    from receiptbox.runtime.record_store import RecordStore

logger = get_logger(__name__)

SELF_TEST_STORE = "TEST_STORE"


@dataclass(frozen=True)
class StoreDiagnostics:
    """Snapshot of the store's on-disk and in-memory state."""

    root: Path
    records_file: Path
    records_file_exists: bool
    digital_items_file_exists: bool
    images_dir_exists: bool
    record_rows: int | None
    digital_item_rows: int | None
    records_in_memory: int
    self_test_passed: bool | None = None
    self_test_error: str | None = None

    @property
    def in_sync(self) -> bool:
        return self.record_rows == self.records_in_memory


def _count_rows(path: Path) -> int | None:
    """Non-blank rows after the header, or None if the file can't be read."""
    try:
        lines = path.read_text(encoding="utf-8").split("\n")
    except (OSError, UnicodeDecodeError):
        return None
    return sum(1 for line in lines[1:] if line.strip())


def _self_test(store: RecordStore) -> str | None:
    """Round-trip a test record. Returns an error message, or None on success."""
    before = len(store.load_all())
    record = Record.create(
        store=SELF_TEST_STORE,
        date="01/01/2024",
        time="12:00",
        items=[LineItem("Test Item 1", "9.99"), LineItem("Test Item 2", "19.99")],
    )
    if not store.save(record):
        return "Could not write test record"
    store.save_items(record)

    try:
        after = store.load_all()
        if len(after) <= before:
            return f"Record count did not grow after save ({before} -> {len(after)})"
        reloaded = store.get(record.id)
        if reloaded is None or reloaded.items != record.items:
            return "Test record did not survive reload"
    finally:
        store.delete(record.id)
    return None


def run_store_diagnostics(store: RecordStore, self_test: bool = False) -> StoreDiagnostics:
    """Collect store diagnostics, optionally running the save/reload self-test."""
    paths = store.paths
    self_test_passed: bool | None = None
    self_test_error: str | None = None
    if self_test:
        self_test_error = _self_test(store)
        self_test_passed = self_test_error is None
        if self_test_error:
            logger.error("Store self-test failed: %s", self_test_error)
        else:
            logger.info("Store self-test passed")

    return StoreDiagnostics(
        root=paths.root,
        records_file=paths.records_file,
        records_file_exists=paths.records_file.exists(),
        digital_items_file_exists=paths.digital_items_file.exists(),
        images_dir_exists=paths.images.is_dir(),
        record_rows=_count_rows(paths.records_file),
        digital_item_rows=_count_rows(paths.digital_items_file),
        records_in_memory=len(store),
        self_test_passed=self_test_passed,
        self_test_error=self_test_error,
    )
