"""Redaction layers and the pure paint operations applied to them.

A mask is a 2-D boolean array the size of the bill photo; ``True``
marks pixels selected for blurring. Paint operations never modify
their input and always return a new array.
"""

from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from .geometry import Point, Rect


class Layer(StrEnum):
    """The two independent redaction layers.

    ``SENSITIVE`` regions stay blurred permanently; ``PRICE`` regions are
    hidden only until a guess reveals the bill.
    """

    SENSITIVE = "sensitive"
    PRICE = "price"


# Fixed compositing order for preview and export.
LAYER_ORDER: tuple[Layer, ...] = (Layer.SENSITIVE, Layer.PRICE)


def empty_mask(height: int, width: int) -> np.ndarray:
    """Create a mask with no pixel selected."""
    return np.zeros((height, width), dtype=bool)


def stamp_rect(mask: np.ndarray, rect: Rect) -> np.ndarray:
    """Return a copy of ``mask`` with every pixel inside ``rect`` selected."""
    height, width = mask.shape
    row0, row1, col0, col1 = rect.pixel_bounds(width, height)
    result = mask.copy()
    result[row0:row1, col0:col1] = True
    return result


def stamp_disc(mask: np.ndarray, center: Point, radius: float) -> np.ndarray:
    """Return a copy of ``mask`` with a filled disc selected.

    Args:
        mask: Source mask.
        center: Disc centre in image pixels.
        radius: Disc radius in image pixels.

    Returns:
        New mask including every pixel whose centre is within ``radius``.
    """
    height, width = mask.shape
    result = mask.copy()
    if radius <= 0:
        return result

    bounds = Rect(
        center.x - radius, center.y - radius, center.x + radius, center.y + radius
    )
    row0, row1, col0, col1 = bounds.pixel_bounds(width, height)
    if row0 == row1 or col0 == col1:
        return result

    rows = np.arange(row0, row1, dtype=np.float64)[:, None] + 0.5
    cols = np.arange(col0, col1, dtype=np.float64)[None, :] + 0.5
    inside = (cols - center.x) ** 2 + (rows - center.y) ** 2 <= radius**2
    result[row0:row1, col0:col1] |= inside
    return result


def edge_bands(height: int, width: int, fraction: float) -> tuple[Rect, Rect]:
    """Return the header and footer bands covering ``fraction`` of the height."""
    band = height * fraction
    top = Rect(0.0, 0.0, float(width), band)
    bottom = Rect(0.0, height - band, float(width), float(height))
    return top, bottom


@dataclass
class MaskPair:
    """The sensitive and price masks for one editing session."""

    sensitive: np.ndarray
    price: np.ndarray

    @classmethod
    def blank(cls, height: int, width: int) -> "MaskPair":
        return cls(empty_mask(height, width), empty_mask(height, width))

    @property
    def shape(self) -> tuple[int, int]:
        return self.sensitive.shape

    def get(self, layer: Layer) -> np.ndarray:
        return self.sensitive if layer == Layer.SENSITIVE else self.price

    def set(self, layer: Layer, mask: np.ndarray) -> None:
        if mask.shape != self.shape:
            raise ValueError(
                f"Mask shape {mask.shape} does not match session shape {self.shape}"
            )
        if layer == Layer.SENSITIVE:
            self.sensitive = mask
        else:
            self.price = mask

    def union(self) -> np.ndarray:
        return self.sensitive | self.price
