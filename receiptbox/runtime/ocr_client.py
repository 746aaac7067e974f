"""Text recognition through an HTTP OCR service."""

import time
from pathlib import Path
from typing import Any

import httpx

from receiptbox.receipt.ocr_helpers import detections_to_text, prepare_image_bytes
from receiptbox.runtime.logging import get_logger
from receiptbox.runtime.paths import ocr_service_url

logger = get_logger(__name__)

OCR_TIMEOUT_SECONDS = 60.0


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def call_ocr_service(image_path: Path, ocr_url: str | None = None) -> Any:
    """
    Send an image to the OCR service and return its raw JSON result.

    Raises:
        OCRServiceUnavailable: connection failure, non-200 status or a body
            that isn't JSON.
    """
    ocr_url = (ocr_url or ocr_service_url()).rstrip("/")
    logger.info("Sending %s to OCR service at %s...", image_path.name, ocr_url)

    try:
        prepared = prepare_image_bytes(image_path.read_bytes())
    except OSError as e:  # includes PIL.UnidentifiedImageError
        raise OCRServiceUnavailable(f"Could not read image {image_path}: {e}") from e

    try:
        start_time = time.time()
        response = httpx.post(
            f"{ocr_url}/ocr",
            files={"file": (image_path.name, prepared, "image/jpeg")},
            timeout=OCR_TIMEOUT_SECONDS,
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise OCRServiceUnavailable(f"OCR service returned invalid JSON: {e}") from e


def recognize_text(image_path: Path, ocr_url: str | None = None) -> str | None:
    """
    Recognize the text of a receipt image.

    Returns:
        Newline-separated text lines, or None when OCR failed or found
        nothing. Failures are logged, never raised.
    """
    try:
        raw_result = call_ocr_service(image_path, ocr_url)
    except OCRServiceUnavailable as e:
        logger.warning("Text recognition failed for %s: %s", image_path.name, e)
        return None

    try:
        text = detections_to_text(raw_result)
    except (TypeError, ValueError, KeyError, IndexError) as e:
        logger.warning("Could not decode OCR result for %s: %s", image_path.name, e)
        return None
    return text or None
