"""Unified command-line interface for receiptbox.

Usage:
    rb parse <text-file|->
    rb scan <image> [--ocr-url URL]
    rb list
    rb show <id>
    rb delete <id>
    rb diagnose [--self-test]
    rb serve [--host] [--port]
"""
