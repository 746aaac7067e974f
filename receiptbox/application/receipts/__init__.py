"""Receipt workflows."""

from receiptbox.application.receipts.delete import RecordDeleteRequest, RecordDeleteResult, run_delete_record
from receiptbox.application.receipts.diagnostics import StoreDiagnostics, run_store_diagnostics
from receiptbox.application.receipts.listing import RecordListing, run_list_records
from receiptbox.application.receipts.scan import ReceiptScanRequest, ReceiptScanResult, run_receipt_scan

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_receipt_scan",
    "RecordListing",
    "run_list_records",
    "RecordDeleteRequest",
    "RecordDeleteResult",
    "run_delete_record",
    "StoreDiagnostics",
    "run_store_diagnostics",
]
