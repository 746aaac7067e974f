"""Pure OCR helpers: image preparation and detection-to-text conversion."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 3000  # Downscale if either side is larger
OCR_IMAGE_PADDING = 50  # White border so text at the edges isn't clipped
MIN_DETECTION_CONFIDENCE = 0.5


def prepare_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """
    Normalize an image for OCR.

    Applies EXIF orientation, downsizes so neither side exceeds
    max_dimension (keeping aspect ratio), adds a white border and re-encodes
    as JPEG.
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)

    if max(img.size) > max_dimension:
        img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

    if padding > 0:
        img = ImageOps.expand(img.convert("RGB"), border=padding, fill="white")

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _detection_row(detection: Any, min_confidence: float) -> dict[str, Any] | None:
    """One usable detection as a row dict, or None if it's malformed, blank or low confidence."""
    try:
        bbox, (text, confidence) = detection
        if confidence < min_confidence or not str(text).strip():
            return None
        xs = [point[0] for point in bbox]
        ys = [point[1] for point in bbox]
        return {
            "text": str(text).strip(),
            "min_x": min(xs),
            "center_y": sum(ys) / len(ys),
            "height": max(ys) - min(ys),
        }
    except (TypeError, ValueError, IndexError, ZeroDivisionError):
        return None


def _detection_rows(raw_result: Any, min_confidence: float) -> list[dict[str, Any]]:
    if not isinstance(raw_result, dict):
        return []
    detections = raw_result.get("detections")
    if not isinstance(detections, list):
        return []
    rows = []
    for detection in detections:
        row = _detection_row(detection, min_confidence)
        if row is not None:
            rows.append(row)
    return rows


def detections_to_lines(
    raw_result: Any, min_confidence: float = MIN_DETECTION_CONFIDENCE
) -> list[str]:
    """
    Group OCR detections into reading-order text lines.

    Detections whose vertical centers lie within half a median box height of
    the current line are joined left to right; lines are ordered top to
    bottom.

    Args:
        raw_result: OCR service response, ``{"detections": [[bbox, [text, confidence]], ...]}``.
                    Anything else, and any malformed detection, is skipped.
        min_confidence: Detections below this confidence are ignored
    """
    detections = _detection_rows(raw_result, min_confidence)
    if not detections:
        return []

    heights = sorted(d["height"] for d in detections if d["height"] > 0)
    tolerance = heights[len(heights) // 2] / 2 if heights else 10.0

    detections.sort(key=lambda d: (d["center_y"], d["min_x"]))
    lines: list[list[dict[str, Any]]] = []
    for det in detections:
        if lines:
            current = lines[-1]
            line_center = sum(d["center_y"] for d in current) / len(current)
            if abs(det["center_y"] - line_center) <= tolerance:
                current.append(det)
                continue
        lines.append([det])

    return [" ".join(d["text"] for d in sorted(line, key=lambda d: d["min_x"])) for line in lines]


def detections_to_text(raw_result: Any, min_confidence: float = MIN_DETECTION_CONFIDENCE) -> str:
    """Newline-joined form of detections_to_lines."""
    return "\n".join(detections_to_lines(raw_result, min_confidence))
