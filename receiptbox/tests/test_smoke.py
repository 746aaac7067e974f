"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import receiptbox
    import receiptbox.application.receipts
    import receiptbox.cli.main
    import receiptbox.domain
    import receiptbox.receipt.text_parser
    import receiptbox.runtime
    import receiptbox.runtime.receipt_server

    assert receiptbox.__version__
    assert receiptbox.application.receipts is not None
    assert receiptbox.cli.main is not None
    assert receiptbox.domain is not None
    assert receiptbox.receipt.text_parser is not None
    assert receiptbox.runtime is not None
    assert receiptbox.runtime.receipt_server.app is not None
