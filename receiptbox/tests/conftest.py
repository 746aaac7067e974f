"""Shared pytest fixtures for receiptbox tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from receiptbox.runtime import paths as runtime_paths
from receiptbox.runtime.record_store import RecordStore, open_store

GROCERY_TEXT = "Grocery Store\n123 Main St\n03/15/2023 14:30\n\nApples    5.99\nMilk      3.49\nBread     2.99"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real data directory and OCR service."""
    monkeypatch.setenv("RECEIPTBOX_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("OCR_SERVICE_URL", "http://ocr.invalid")
    monkeypatch.setattr(runtime_paths, "_paths", None)


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(data_root: Path) -> Iterator[RecordStore]:
    with open_store(data_root) as opened:
        yield opened


@pytest.fixture
def grocery_text() -> str:
    return GROCERY_TEXT
