"""Runtime infrastructure for receiptbox.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Data directory resolution via get_paths(), StorePaths
- The flat-file record store via open_store(), RecordStore

Usage:
    from receiptbox.runtime import get_logger, open_store

    logger = get_logger(__name__)
    with open_store("/tmp/receipts") as store:
        print(len(store.records))
"""

from receiptbox.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptbox.runtime.paths import (
    StorePaths,
    get_paths,
    ocr_service_url,
    set_root,
)
from receiptbox.runtime.record_store import (
    RecordStore,
    StoreClosedError,
    StoreEvent,
    open_store,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "set_root",
    "ocr_service_url",
    "StorePaths",
    # Storage
    "RecordStore",
    "StoreClosedError",
    "StoreEvent",
    "open_store",
]
