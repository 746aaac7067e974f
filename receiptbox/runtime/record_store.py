"""Flat-file storage of scanned receipt records.

One store owns one data directory (see ``receiptbox.runtime.paths``):

    receipts.csv        - header + one encoded row per record
    digital_items.csv   - header + one row per item (export only, never read)
    images/             - receipt images, removed together with their record

The in-memory list is the source of truth while the process runs. ``save``
appends to disk, ``delete`` rewrites both files from memory, ``load_all``
replaces memory from disk. All three are serialized through one lock per
store, so an append never interleaves with a rewrite.

I/O failures are logged and reported through return values; they never
propagate to callers.
"""

from __future__ import annotations

import functools
import os
import tempfile
import threading
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Literal

from receiptbox.domain.record import Record
from receiptbox.receipt.codec import (
    DIGITAL_ITEMS_HEADER,
    RECORDS_HEADER,
    decode_record,
    encode_digital_items,
    encode_record,
)
from receiptbox.runtime.logging import get_logger
from receiptbox.runtime.paths import StorePaths, get_paths

logger = get_logger(__name__)

EventKind = Literal["saved", "deleted", "loaded"]


class StoreClosedError(RuntimeError):
    """Raised when a closed store is asked to mutate."""


@dataclass(frozen=True)
class StoreEvent:
    """Change notification published to store subscribers."""

    kind: EventKind
    record_id: uuid.UUID | None = None


Subscriber = Callable[[StoreEvent], None]


def _compare_newest_first(a: Record, b: Record) -> int:
    """
    Order by sort_key, latest first.

    A record without a sort key is never greater or smaller than anything,
    so undated records keep their relative file order (sort is stable).
    """
    key_a, key_b = a.sort_key, b.sort_key
    if key_a is None or key_b is None:
        return 0
    if key_a > key_b:
        return -1
    if key_a < key_b:
        return 1
    return 0


def sort_newest_first(records: Iterable[Record]) -> list[Record]:
    return sorted(records, key=functools.cmp_to_key(_compare_newest_first))


def _coerce_id(record_id: uuid.UUID | str) -> uuid.UUID | None:
    if isinstance(record_id, uuid.UUID):
        return record_id
    try:
        return uuid.UUID(str(record_id).strip())
    except ValueError:
        return None


class RecordStore:
    """Records for one data directory, kept in memory and in two flat files."""

    def __init__(self, paths: StorePaths) -> None:
        self.paths = paths
        self._records: list[Record] = []
        self._lock = threading.RLock()
        self._subscribers: list[Subscriber] = []
        self._closed = False

    @classmethod
    def open(cls, root: Path | str | None = None) -> RecordStore:
        """
        Open the store for a data directory and load its records.

        Args:
            root: Data directory. Defaults to the configured default
                  (RECEIPTBOX_HOME or ~/.receiptbox).
        """
        paths = StorePaths(Path(root)) if root is not None else get_paths()
        try:
            paths.ensure_directories()
        except OSError as e:
            logger.error("Could not create data directory %s: %s", paths.root, e)
        store = cls(paths)
        store.load_all()
        return store

    def close(self) -> None:
        """Stop accepting mutations and drop all subscribers."""
        with self._lock:
            self._closed = True
            self._subscribers.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> RecordStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"Record store for {self.paths.root} is closed")

    # --- Reads ---

    @property
    def records(self) -> list[Record]:
        """Snapshot of the in-memory records, in current order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, record_id: uuid.UUID | str) -> Record | None:
        wanted = _coerce_id(record_id)
        if wanted is None:
            return None
        with self._lock:
            for record in self._records:
                if record.id == wanted:
                    return record
        return None

    # --- Events ---

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def _publish(self, event: StoreEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Store subscriber failed on %s event", event.kind)

    # --- File helpers ---

    def ensure_files(self) -> None:
        """Create each backing file with its header row if it doesn't exist."""
        for path, header in (
            (self.paths.records_file, RECORDS_HEADER),
            (self.paths.digital_items_file, DIGITAL_ITEMS_HEADER),
        ):
            if path.exists():
                continue
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with path.open("x", encoding="utf-8", newline="") as f:
                    f.write(header + "\n")
                logger.debug("Created %s", path)
            except FileExistsError:
                continue
            except OSError as e:
                logger.error("Could not create %s: %s", path, e)

    def _append(self, path: Path, text: str) -> bool:
        try:
            with path.open("a", encoding="utf-8", newline="") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            logger.error("Failed to append to %s: %s", path, e)
            return False
        return True

    def _write_atomic(self, path: Path, text: str) -> bool:
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error("Failed to rewrite %s: %s", path, e)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            return False
        return True

    def _rewrite_files(self) -> bool:
        records_content = RECORDS_HEADER + "\n" + "".join(encode_record(r) for r in self._records)
        items_content = DIGITAL_ITEMS_HEADER + "\n" + "".join(encode_digital_items(r) for r in self._records)
        records_ok = self._write_atomic(self.paths.records_file, records_content)
        items_ok = self._write_atomic(self.paths.digital_items_file, items_content)
        return records_ok and items_ok

    def _delete_image(self, image_reference: str) -> None:
        if not image_reference:
            return
        image_path = self.paths.image_path(image_reference)
        if not image_path.exists():
            logger.debug("No image to delete at %s", image_path)
            return
        try:
            image_path.unlink()
            logger.info("Deleted image %s", image_path)
        except OSError as e:
            logger.warning("Failed to delete image %s: %s", image_path, e)

    # --- Mutations ---

    def save(self, record: Record) -> bool:
        """
        Add a record and append its row to the records file.

        A record whose id is already in memory is not added twice, but its row
        is still appended.

        Returns:
            True if the row reached disk.
        """
        with self._lock:
            self._check_open()
            if not any(r.id == record.id for r in self._records):
                self._records.append(record)
            self.ensure_files()
            written = self._append(self.paths.records_file, encode_record(record))

        if written:
            logger.info("Saved record %s (%s, %d items)", record.id, record.store, len(record.items))
            self._publish(StoreEvent("saved", record.id))
        return written

    def save_items(self, record: Record) -> bool:
        """Append one digital-items row per item of the record."""
        with self._lock:
            self._check_open()
            self.ensure_files()
            rows = encode_digital_items(record)
            if not rows:
                return True
            return self._append(self.paths.digital_items_file, rows)

    def load_all(self) -> list[Record]:
        """
        Replace memory with the records file's content, newest first.

        Rows that don't decode are skipped. If the file can't be read the
        store ends up empty.
        """
        with self._lock:
            self._check_open()
            self.ensure_files()
            try:
                content = self.paths.records_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Failed to read %s: %s", self.paths.records_file, e)
                self._records = []
            else:
                loaded: list[Record] = []
                seen: set[uuid.UUID] = set()
                skipped = 0
                for row in content.split("\n")[1:]:
                    if not row.strip():
                        continue
                    record = decode_record(row)
                    if record is None:
                        skipped += 1
                        continue
                    if record.id in seen:
                        logger.debug("Ignoring repeated row for record %s", record.id)
                        continue
                    seen.add(record.id)
                    loaded.append(record)
                if skipped:
                    logger.warning("Skipped %d malformed row(s) in %s", skipped, self.paths.records_file)
                self._records = sort_newest_first(loaded)
                logger.debug("Loaded %d record(s) from %s", len(self._records), self.paths.records_file)
            snapshot = list(self._records)

        self._publish(StoreEvent("loaded"))
        return snapshot

    def delete(self, record_id: uuid.UUID | str) -> bool:
        """
        Remove a record, its image and its rows.

        Both files are rewritten from memory before this returns.

        Returns:
            True if a record was removed, False if no record had this id.
        """
        wanted = _coerce_id(record_id)
        with self._lock:
            self._check_open()
            target = next((r for r in self._records if r.id == wanted), None)
            if target is None:
                logger.info("No record with id %s; nothing deleted", record_id)
                return False

            self._records = [r for r in self._records if r.id != target.id]
            self._delete_image(target.image_reference)
            self.ensure_files()
            if not self._rewrite_files():
                logger.error("Record %s removed from memory but files may be stale", target.id)

        logger.info("Deleted record %s", target.id)
        self._publish(StoreEvent("deleted", target.id))
        return True


def open_store(root: Path | str | None = None) -> RecordStore:
    """Open a record store; see RecordStore.open."""
    return RecordStore.open(root)
