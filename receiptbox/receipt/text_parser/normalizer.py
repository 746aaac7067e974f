"""Raw OCR text to clean lines."""


def normalize_lines(text: str) -> list[str]:
    """
    Split raw OCR text into stripped, non-empty lines.

    ``\\r\\n``, ``\\r`` and ``\\n`` all end a line. Order is preserved and blank
    lines are dropped; nothing else about the text is changed.
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]
