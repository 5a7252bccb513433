"""Raster operations that bake redaction masks into bill photos.

Provides the Gaussian blur used for redaction, mask-clipped blending,
the preview-only tint and dashed outline, and PNG encoding of the
final composites.
"""

import io
import math

import cv2
import numpy as np
from PIL import Image

from receiptart.exceptions import CompositeExportError
from receiptart.utils.logger import get_logger

from .geometry import Rect
from .masks import LAYER_ORDER, Layer, MaskPair

logger = get_logger(__name__)

Color = tuple[int, int, int]

# RGB tint for each layer in the preview, CSS "red" and "green".
TINT_COLORS: dict[Layer, Color] = {
    Layer.SENSITIVE: (255, 0, 0),
    Layer.PRICE: (0, 128, 0),
}

# RGB outline for the pending rectangle, #ef4444 and #22c55e.
OUTLINE_COLORS: dict[Layer, Color] = {
    Layer.SENSITIVE: (239, 68, 68),
    Layer.PRICE: (34, 197, 94),
}


def gaussian_blur(image: np.ndarray, radius: float) -> np.ndarray:
    """Blur an image with a Gaussian of standard deviation ``radius``.

    Args:
        image: Input RGB image.
        radius: Blur radius in pixels; values <= 0 return a copy.

    Returns:
        Blurred image with the same shape and dtype.
    """
    if radius <= 0:
        return image.copy()
    result = cv2.GaussianBlur(
        np.ascontiguousarray(image),
        (0, 0),
        sigmaX=radius,
        sigmaY=radius,
        borderType=cv2.BORDER_REPLICATE,
    )
    logger.debug("Applied Gaussian blur with radius=%.1f", radius)
    return result


def apply_masked(canvas: np.ndarray, source: np.ndarray, mask: np.ndarray) -> None:
    """Copy ``source`` pixels onto ``canvas`` wherever ``mask`` is set."""
    canvas[mask] = source[mask]


def apply_tint(
    canvas: np.ndarray, mask: np.ndarray, color: Color, opacity: float
) -> None:
    """Blend a flat colour over the masked region of ``canvas``."""
    if opacity <= 0 or not mask.any():
        return
    region = canvas[mask].astype(np.float32)
    tint = np.asarray(color, dtype=np.float32)
    blended = region * (1.0 - opacity) + tint * opacity
    canvas[mask] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def _dashed_segment(
    canvas: np.ndarray,
    start: tuple[int, int],
    end: tuple[int, int],
    color: Color,
    width: int,
    dash: int,
    gap: int,
) -> None:
    x0, y0 = start
    x1, y1 = end
    length = max(abs(x1 - x0), abs(y1 - y0))
    if length == 0:
        return
    step = max(dash + gap, 1)
    for offset in range(0, length, step):
        stop = min(offset + dash, length)
        a = (x0 + (x1 - x0) * offset // length, y0 + (y1 - y0) * offset // length)
        b = (x0 + (x1 - x0) * stop // length, y0 + (y1 - y0) * stop // length)
        cv2.line(canvas, a, b, color, thickness=width)


def _clamp_coordinate(value: float, limit: int, margin: int) -> int:
    if not math.isfinite(value):
        return -margin if value < 0 else limit + margin
    return int(min(max(round(value), -margin), limit + margin))


def draw_dashed_rect(
    canvas: np.ndarray,
    rect: Rect,
    color: Color,
    width: int = 4,
    dash: int = 5,
    gap: int = 5,
) -> None:
    """Draw the dashed outline of ``rect`` onto ``canvas`` in place.

    Edges lying off the canvas are pinned just outside it.
    """
    height, width_px = canvas.shape[:2]
    left = _clamp_coordinate(rect.x0, width_px, width)
    right = _clamp_coordinate(rect.x1, width_px, width)
    top = _clamp_coordinate(rect.y0, height, width)
    bottom = _clamp_coordinate(rect.y1, height, width)
    corners = [(left, top), (right, top), (right, bottom), (left, bottom)]
    for i, start in enumerate(corners):
        end = corners[(i + 1) % len(corners)]
        _dashed_segment(canvas, start, end, color, width, dash, gap)


def composite(
    base: np.ndarray,
    blurred: np.ndarray,
    masks: MaskPair,
    layers: tuple[Layer, ...] = LAYER_ORDER,
    tint_opacity: float = 0.0,
) -> np.ndarray:
    """Bake blurred regions of ``layers`` into a fresh copy of ``base``.

    Args:
        base: Clean photo.
        blurred: Blurred copy of ``base``.
        masks: Sensitive and price masks.
        layers: Layers to apply, in compositing order.
        tint_opacity: Opacity of the per-layer tint; ``0`` for exports.

    Returns:
        New image; ``base`` and ``masks`` are not modified.
    """
    canvas = base.copy()
    for layer in layers:
        mask = masks.get(layer)
        apply_masked(canvas, blurred, mask)
        apply_tint(canvas, mask, TINT_COLORS[layer], tint_opacity)
    return canvas


def encode_image(image: np.ndarray, fmt: str = "PNG") -> bytes:
    """Encode an RGB raster to image file bytes.

    Raises:
        CompositeExportError: If Pillow cannot encode the raster.
    """
    buffer = io.BytesIO()
    try:
        Image.fromarray(image).save(buffer, format=fmt)
    except (KeyError, OSError, TypeError, ValueError) as exc:
        raise CompositeExportError(
            f"Failed to encode composite as {fmt}: {exc}"
        ) from exc
    data = buffer.getvalue()
    logger.debug("Encoded %s composite of %d bytes", fmt, len(data))
    return data
