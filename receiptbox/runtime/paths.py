"""Centralized path management for a receipt data directory.

A data directory holds everything one record store owns:

    <root>/
    ├── receipts.csv        - one row per record (source of truth on disk)
    ├── digital_items.csv   - one row per line item (write-only export)
    └── images/             - receipt images referenced by records
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

RECORDS_FILENAME = "receipts.csv"
DIGITAL_ITEMS_FILENAME = "digital_items.csv"
IMAGES_DIRNAME = "images"

DEFAULT_OCR_SERVICE_URL = "http://localhost:8001"


def _default_root() -> Path:
    """Resolve the data root: RECEIPTBOX_HOME, else ~/.receiptbox."""
    env_root = os.environ.get("RECEIPTBOX_HOME", "").strip()
    if env_root:
        return Path(env_root).expanduser()
    return Path("~/.receiptbox").expanduser()


@dataclass
class StorePaths:
    """Container for all paths belonging to one data directory."""

    root: Path = field(default_factory=_default_root)

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()

    @property
    def records_file(self) -> Path:
        """Primary records file."""
        return self.root / RECORDS_FILENAME

    @property
    def digital_items_file(self) -> Path:
        """Per-item export file."""
        return self.root / DIGITAL_ITEMS_FILENAME

    @property
    def images(self) -> Path:
        """Receipt image directory."""
        return self.root / IMAGES_DIRNAME

    def image_path(self, image_reference: str) -> Path:
        """Resolve an image reference (a bare filename) inside images/."""
        return self.images / Path(image_reference).name

    def ensure_directories(self) -> None:
        """Create the data directory and images/ if they don't exist."""
        self.root.mkdir(parents=True, exist_ok=True)
        self.images.mkdir(parents=True, exist_ok=True)


_paths: StorePaths | None = None


def get_paths() -> StorePaths:
    """Get the default StorePaths instance (created on first use)."""
    global _paths
    if _paths is None:
        _paths = StorePaths()
    return _paths


def set_root(root: Path | str | None) -> StorePaths:
    """Override the default data directory. ``None`` re-reads the environment."""
    global _paths
    _paths = StorePaths(Path(root)) if root is not None else StorePaths()
    return _paths


def ocr_service_url() -> str:
    """OCR service base URL from OCR_SERVICE_URL."""
    return os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL).rstrip("/")
