"""receiptbox: receipt text parsing and flat-file record storage."""

__version__ = "0.1.0"
