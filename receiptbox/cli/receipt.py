"""Receipt command handlers used by the unified CLI."""

import argparse
import sys
from pathlib import Path

from receiptbox.domain.record import Record
from receiptbox.runtime import get_logger, open_store

logger = get_logger(__name__)

RULE = "-" * 60


def _print_record(record: Record) -> None:
    print("=" * 60)
    print(f"Id: {record.id}")
    print(f"Store: {record.store}")
    print(f"Date: {record.date}")
    print(f"Time: {record.time}")
    if record.image_reference:
        print(f"Image: {record.image_reference}")
    print(f"\nItems ({len(record.items)}):")
    for i, item in enumerate(record.items, 1):
        print(f"  {i}. {item.name} - {item.price}")
    print(f"\nTotal: ${record.total:.2f}")
    print("=" * 60)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse receipt text from a file (or stdin with '-') and print the fields."""
    from receiptbox.receipt.receipt_parser import parse_receipt_text

    if args.text_file == "-":
        text = sys.stdin.read()
    else:
        text_path = Path(args.text_file)
        if not text_path.is_file():
            print(f"Error: Text file not found: {text_path}")
            sys.exit(1)
        text = text_path.read_text(encoding="utf-8", errors="replace")

    parsed = parse_receipt_text(text)
    print(f"Store: {parsed.store}")
    print(f"Date: {parsed.date}")
    print(f"Time: {parsed.time}")
    print(f"Items ({len(parsed.items)}):")
    for item in parsed.items:
        print(f"  {item.name}: {item.price}")


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image and store the parsed record."""
    from receiptbox.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    with open_store() as store:
        result = run_receipt_scan(store, ReceiptScanRequest(image_path=Path(args.image), ocr_url=args.ocr_url))

    if result.status in ("file_not_found", "image_not_stored"):
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    assert result.record is not None
    if result.status == "saved_without_text":
        print("Image saved but text recognition failed.")
        print("Make sure the OCR service is running, then delete and re-scan.")
    _print_record(result.record)


def cmd_list(args: argparse.Namespace) -> None:
    """List stored records, newest first."""
    from receiptbox.application.receipts.listing import run_list_records

    with open_store() as store:
        listing = run_list_records(store, reload=False)

    if not listing.records:
        print(f"No records found in {store.paths.records_file}")
        return

    print(f"\nRecords ({len(listing.records)}):")
    print(RULE)
    for record in listing.records:
        print(f"  {str(record.id)[:8]}  {record.date:<12}  ${record.total:>8.2f}  {record.store}")
    print(RULE)
    print(f"Total: ${listing.grand_total:.2f} across {len(listing.records)} record(s)")


def cmd_show(args: argparse.Namespace) -> None:
    """Show one record by id or unique id prefix."""
    from receiptbox.application.receipts.delete import find_records

    with open_store() as store:
        matches = find_records(store.records, args.record_id)

    if not matches:
        print(f"No record matches id {args.record_id!r}")
        sys.exit(1)
    if len(matches) > 1:
        print(f"Id prefix {args.record_id!r} matches {len(matches)} records; use more characters.")
        sys.exit(1)
    _print_record(matches[0])


def cmd_delete(args: argparse.Namespace) -> None:
    """Delete one record (and its image) by id or unique id prefix."""
    from receiptbox.application.receipts.delete import RecordDeleteRequest, run_delete_record

    with open_store() as store:
        result = run_delete_record(store, RecordDeleteRequest(record_id=args.record_id))

    if result.status == "ambiguous":
        print(f"Error: {result.error}")
        for record in result.candidates or []:
            print(f"  {record.id}  {record.date}  {record.store}")
        sys.exit(1)
    if result.status == "not_found":
        print(f"Error: {result.error}")
        sys.exit(1)

    assert result.record is not None
    print(f"Deleted record {result.record.id} ({result.record.store}, {result.record.date})")


def cmd_diagnose(args: argparse.Namespace) -> None:
    """Print store diagnostics; with --self-test, round-trip a test record."""
    from receiptbox.application.receipts.diagnostics import run_store_diagnostics

    with open_store() as store:
        report = run_store_diagnostics(store, self_test=args.self_test)

    def _rows(count: int | None) -> str:
        return "unreadable" if count is None else str(count)

    print(f"Data directory: {report.root}")
    print(f"Records file: {report.records_file} ({'exists' if report.records_file_exists else 'missing'})")
    print(f"Digital items file: {'exists' if report.digital_items_file_exists else 'missing'}")
    print(f"Images directory: {'exists' if report.images_dir_exists else 'missing'}")
    print(f"Record rows on disk: {_rows(report.record_rows)}")
    print(f"Digital item rows on disk: {_rows(report.digital_item_rows)}")
    print(f"Records in memory: {report.records_in_memory}")
    if not report.in_sync:
        print("Warning: rows on disk and records in memory differ (malformed or repeated rows?)")

    if report.self_test_passed is None:
        return
    if report.self_test_passed:
        print("Self-test: passed")
        return
    print(f"Self-test: FAILED ({report.self_test_error})")
    sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receiving receipt uploads."""
    import uvicorn

    from receiptbox.runtime.receipt_server import create_app

    store = open_store()
    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Serving records from {store.paths.root}")
    print(f"Upload endpoint: http://{args.host}:{args.port}/upload")
    print("Press Ctrl+C to stop")

    try:
        uvicorn.run(create_app(store), host=args.host, port=args.port)
    finally:
        store.close()
