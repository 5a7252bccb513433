"""Coordinate handling for the redaction editor.

Pointer input arrives in viewport pixels (the size the photo is
displayed at); masks live in image pixels. Shapes are rasterised with
a pixel-centre rule: pixel ``(row, col)`` is covered when the point
``(col + 0.5, row + 0.5)`` lies inside the shape.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A 2-D position, ``x`` to the right and ``y`` down."""

    x: float
    y: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class Viewport:
    """Rendered size of the photo on the caller's display."""

    width: float
    height: float

    def to_image(self, point: Point, image_width: int, image_height: int) -> Point:
        """Rescale a viewport point into image pixel space.

        Args:
            point: Position relative to the rendered element's top-left corner.
            image_width: Native image width in pixels.
            image_height: Native image height in pixels.

        Returns:
            The same position in image pixels.
        """
        scale_x = _axis_scale(image_width, self.width)
        scale_y = _axis_scale(image_height, self.height)
        return Point(point.x * scale_x, point.y * scale_y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with ``x0 <= x1`` and ``y0 <= y1``."""

    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_corners(cls, a: Point, b: Point) -> "Rect":
        """Build a rectangle from two opposite corners given in any order."""
        return cls(
            x0=min(a.x, b.x),
            y0=min(a.y, b.y),
            x1=max(a.x, b.x),
            y1=max(a.y, b.y),
        )

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    def pixel_bounds(
        self, image_width: int, image_height: int
    ) -> tuple[int, int, int, int]:
        """Return half-open ``(row0, row1, col0, col1)`` covered pixel bounds.

        Bounds are clipped to the image and may be empty.
        """
        col0, col1 = pixel_span(self.x0, self.x1, image_width)
        row0, row1 = pixel_span(self.y0, self.y1, image_height)
        return row0, row1, col0, col1


def pixel_span(lo: float, hi: float, limit: int) -> tuple[int, int]:
    """Return the half-open index range of pixels whose centres fall in ``[lo, hi)``.

    Args:
        lo: Lower edge in pixel coordinates.
        hi: Upper edge in pixel coordinates.
        limit: Number of pixels along the axis.

    Returns:
        ``(start, end)`` clipped to ``[0, limit]`` with ``start <= end``.
    """
    start = min(max(math.ceil(lo - 0.5), 0), limit)
    end = min(max(math.ceil(hi - 0.5), 0), limit)
    return start, max(start, end)


def _axis_scale(image_size: int, rendered_size: float) -> float:
    """Image pixels per viewport pixel; ``1.0`` for a degenerate viewport."""
    if not (rendered_size > 0 and math.isfinite(rendered_size)):
        return 1.0
    scale = image_size / rendered_size
    return scale if math.isfinite(scale) else 1.0
