"""Decoding of bill photos into RGB rasters."""

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

from receiptart.exceptions import ImageLoadError
from receiptart.utils.logger import get_logger

logger = get_logger(__name__)

ImageSource = bytes | str | Path | np.ndarray


def _from_array(array: np.ndarray) -> np.ndarray:
    if array.dtype != np.uint8:
        raise ImageLoadError(f"Unsupported image dtype: {array.dtype}")
    if array.ndim == 2:
        return np.stack([array] * 3, axis=-1)
    if array.ndim == 3 and array.shape[2] == 3:
        return array.copy()
    if array.ndim == 3 and array.shape[2] == 4:
        return array[:, :, :3].copy()
    raise ImageLoadError(f"Unsupported image shape: {array.shape}")


def load_rgb(source: ImageSource) -> np.ndarray:
    """Decode a photo from bytes, a file path, or an array.

    EXIF orientation is applied so the raster matches what a browser shows.

    Args:
        source: Encoded image bytes, path to an image file, or a uint8 array
            (grayscale, RGB, or RGBA).

    Returns:
        RGB image as a ``(height, width, 3)`` uint8 array.

    Raises:
        ImageLoadError: If the source cannot be decoded or is empty.
    """
    if isinstance(source, np.ndarray):
        image = _from_array(source)
    else:
        try:
            if isinstance(source, bytes):
                pil_image = Image.open(io.BytesIO(source))
            else:
                pil_image = Image.open(Path(source))
            pil_image = ImageOps.exif_transpose(pil_image)
            image = np.array(pil_image.convert("RGB"))
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageLoadError(f"Could not decode image: {exc}") from exc

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ImageLoadError("Image has no pixels")

    logger.debug("Loaded image %dx%d", image.shape[1], image.shape[0])
    return image
