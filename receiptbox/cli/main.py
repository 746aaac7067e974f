#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence

from receiptbox.runtime.paths import DEFAULT_OCR_SERVICE_URL, set_root


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Run a command handler that may call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rb",
        description="Receipt box: scan, parse and store receipts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <text-file|->        Parse receipt text and print the fields
  scan <image>               Scan a receipt image and store the record
  list                       List stored records, newest first
  show <id>                  Show one record
  delete <id>                Delete a record and its image
  diagnose [--self-test]     Check the data directory
  serve [--host] [--port]    Start receipt upload server

Ids may be abbreviated to any unique prefix.
Data directory: --root, else $RECEIPTBOX_HOME, else ~/.receiptbox
""",
    )
    parser.add_argument("--root", default=None, help="Data directory (default: $RECEIPTBOX_HOME or ~/.receiptbox)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse receipt text and print the fields")
    parse_parser.add_argument("text_file", help="Text file to parse, or '-' for stdin")

    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument(
        "--ocr-url", default=None, help=f"OCR service URL (default: $OCR_SERVICE_URL or {DEFAULT_OCR_SERVICE_URL})"
    )

    subparsers.add_parser("list", help="List stored records")

    show_parser = subparsers.add_parser("show", help="Show one record")
    show_parser.add_argument("record_id", help="Record id or unique prefix")

    delete_parser = subparsers.add_parser("delete", help="Delete a record and its image")
    delete_parser.add_argument("record_id", help="Record id or unique prefix")

    diagnose_parser = subparsers.add_parser("diagnose", help="Check the data directory")
    diagnose_parser.add_argument(
        "--self-test", action="store_true", help="Save, reload and delete a test record"
    )

    serve_parser = subparsers.add_parser("serve", help="Start receipt upload server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.root is not None:
        set_root(args.root)

    from receiptbox.cli import receipt

    handlers: dict[str, Callable[[argparse.Namespace], None]] = {
        "parse": receipt.cmd_parse,
        "scan": receipt.cmd_scan,
        "list": receipt.cmd_list,
        "show": receipt.cmd_show,
        "delete": receipt.cmd_delete,
        "diagnose": receipt.cmd_diagnose,
        "serve": receipt.cmd_serve,
    }
    return _run_command(handlers[args.command], args)


if __name__ == "__main__":
    raise SystemExit(main())
