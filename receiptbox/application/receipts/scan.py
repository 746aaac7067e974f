"""Receipt scan workflow orchestration."""

from __future__ import annotations

import shutil
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from receiptbox.receipt.receipt_parser import build_record
from receiptbox.runtime.logging import get_logger
from receiptbox.runtime.ocr_client import recognize_text

if TYPE_CHECKING:
    from receiptbox.domain.record import Record
    from receiptbox.runtime.record_store import RecordStore

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "image_not_stored",
    "saved",
    "saved_without_text",
]

Recognizer = Callable[[Path], "str | None"]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str | None = None
    # Overrides the HTTP OCR service, e.g. with a local engine.
    recognize: Recognizer | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    record: Record | None = None
    image_reference: str | None = None
    text: str | None = None
    error: str | None = None


def store_image(store: RecordStore, image_path: Path) -> str:
    """Copy an image into the store's images/ directory and return its reference."""
    suffix = image_path.suffix.lower() or ".jpg"
    image_reference = f"receipt_{uuid.uuid4()}{suffix}"
    destination = store.paths.image_path(image_reference)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(image_path, destination)
    logger.debug("Stored image %s as %s", image_path, destination)
    return image_reference


def run_receipt_scan(store: RecordStore, request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: store image -> OCR -> parse -> save record and items."""
    if not request.image_path.is_file():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        image_reference = store_image(store, request.image_path)
    except OSError as e:
        logger.error("Could not store image %s: %s", request.image_path, e)
        return ReceiptScanResult(status="image_not_stored", error=str(e))

    if request.recognize is not None:
        text = request.recognize(request.image_path)
    else:
        text = recognize_text(request.image_path, request.ocr_url)

    # No text still produces a record, with the "Unknown ..." fields.
    record = build_record(text or "", image_reference=image_reference)
    store.save(record)
    store.save_items(record)

    return ReceiptScanResult(
        status="saved" if text else "saved_without_text",
        record=record,
        image_reference=image_reference,
        text=text,
    )
