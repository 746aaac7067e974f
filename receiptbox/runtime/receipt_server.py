"""FastAPI server for uploading receipt images and browsing stored records."""

from __future__ import annotations

import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from receiptbox.application.receipts.delete import RecordDeleteRequest, run_delete_record
from receiptbox.application.receipts.listing import run_list_records
from receiptbox.application.receipts.scan import ReceiptScanRequest, Recognizer, run_receipt_scan
from receiptbox.domain.record import Record
from receiptbox.receipt.receipt_parser import parse_receipt_text
from receiptbox.runtime.logging import get_logger
from receiptbox.runtime.record_store import RecordStore, open_store

logger = get_logger(__name__)


def record_to_dict(record: Record) -> dict[str, Any]:
    """JSON-ready view of a record."""
    return {
        "id": str(record.id),
        "store": record.store,
        "date": record.date,
        "time": record.time,
        "items": [{"name": item.name, "price": item.price} for item in record.items],
        "image_reference": record.image_reference,
        "total": round(record.total, 2),
    }


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def create_app(store: RecordStore | None = None, recognize: Recognizer | None = None) -> FastAPI:
    """
    Build the receipt server.

    Args:
        store: Store to serve. When None, the default data directory is opened
               on startup and closed on shutdown.
        recognize: Text recognizer passed to the scan workflow; defaults to
                   the HTTP OCR service.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = await run_in_threadpool(open_store)
        logger.info("Serving records from %s", app.state.store.paths.root)
        yield
        if owns_store:
            app.state.store.close()

    app = FastAPI(title="Receipt Box", lifespan=lifespan)
    app.state.store = store

    def current_store() -> RecordStore:
        if app.state.store is None:
            app.state.store = open_store()
        return app.state.store

    @app.post("/upload")
    async def upload_receipt(request: Request) -> JSONResponse:
        """Receive a receipt image, recognize and parse it, and store the record."""
        form = await request.form()

        file = None
        for key, value in form.items():
            logger.debug("Form field: key=%r, type=%s", key, type(value))
            if hasattr(value, "read"):
                file = value
                break

        if not file:
            return _error("No file found in request", 400)

        file_filename = getattr(file, "filename", None)
        ext = Path(file_filename).suffix if file_filename else ".jpg"
        contents = await file.read()
        if not contents:
            return _error("Uploaded file is empty", 400)

        with tempfile.TemporaryDirectory() as tmp_dir:
            upload_path = Path(tmp_dir) / f"upload{ext or '.jpg'}"
            upload_path.write_bytes(contents)
            result = await run_in_threadpool(
                run_receipt_scan,
                current_store(),
                ReceiptScanRequest(image_path=upload_path, recognize=recognize),
            )

        if result.record is None:
            logger.error("Upload could not be stored: %s", result.error)
            return _error("Receipt processing failed", 500)

        logger.info("Stored upload as record %s (%s)", result.record.id, result.status)
        return JSONResponse(
            {
                "status": "success",
                "action": result.status,
                "record": record_to_dict(result.record),
                "size_bytes": len(contents),
            }
        )

    @app.get("/records")
    async def list_records() -> dict[str, Any]:
        listing = await run_in_threadpool(run_list_records, current_store())
        return {
            "records": [record_to_dict(r) for r in listing.records],
            "count": len(listing.records),
            "grand_total": round(listing.grand_total, 2),
        }

    @app.get("/records/{record_id}", response_model=None)
    async def get_record(record_id: str) -> dict[str, Any] | JSONResponse:
        record = current_store().get(record_id)
        if record is None:
            return _error(f"No record with id {record_id}", 404)
        return record_to_dict(record)

    @app.delete("/records/{record_id}", response_model=None)
    async def delete_record(record_id: str) -> dict[str, Any] | JSONResponse:
        result = await run_in_threadpool(run_delete_record, current_store(), RecordDeleteRequest(record_id))
        if result.status == "not_found":
            return _error(result.error or "Not found", 404)
        if result.status == "ambiguous":
            return _error(result.error or "Ambiguous id", 409)
        assert result.record is not None
        return {"status": "deleted", "id": str(result.record.id)}

    @app.post("/parse")
    async def parse_text(text: str = Body(..., embed=True)) -> dict[str, Any]:
        """Parse raw receipt text without storing anything."""
        parsed = parse_receipt_text(text)
        return {
            "store": parsed.store,
            "date": parsed.date,
            "time": parsed.time,
            "items": [{"name": item.name, "price": item.price} for item in parsed.items],
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
