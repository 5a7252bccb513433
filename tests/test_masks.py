"""Tests for mask geometry and the pure paint operations."""

import math

import numpy as np
import pytest

from receiptart.masking.geometry import Point, Rect, Viewport, pixel_span
from receiptart.masking.masks import (
    Layer,
    MaskPair,
    edge_bands,
    empty_mask,
    stamp_disc,
    stamp_rect,
)


class TestPixelSpan:
    """Tests for the pixel-centre coverage rule."""

    def test_integer_edges(self) -> None:
        assert pixel_span(0, 150, 1000) == (0, 150)
        assert pixel_span(850, 1000, 1000) == (850, 1000)

    def test_fractional_edges_use_pixel_centres(self) -> None:
        # Centres 0.5 and 1.5 are inside [0.5, 2.0); 2.5 is not.
        assert pixel_span(0.5, 2.0, 10) == (0, 2)
        assert pixel_span(0.6, 2.6, 10) == (1, 3)

    def test_clipped_to_axis(self) -> None:
        assert pixel_span(-20, 5, 10) == (0, 5)
        assert pixel_span(8, 30, 10) == (8, 10)

    def test_outside_axis_is_empty(self) -> None:
        start, end = pixel_span(20, 30, 10)
        assert start == end

    def test_degenerate_range_is_empty(self) -> None:
        start, end = pixel_span(4.0, 4.0, 10)
        assert start == end


class TestRect:
    """Tests for rectangle normalisation."""

    def test_from_corners_normalises(self) -> None:
        rect = Rect.from_corners(Point(30, 40), Point(10, 5))
        assert rect == Rect(10, 5, 30, 40)
        assert rect.width == 20
        assert rect.height == 35

    def test_pixel_bounds(self) -> None:
        rect = Rect(2, 3, 6, 9)
        assert rect.pixel_bounds(100, 100) == (3, 9, 2, 6)


class TestViewport:
    """Tests for viewport to image rescaling."""

    def test_downscaled_display(self) -> None:
        viewport = Viewport(width=50, height=25)
        assert viewport.to_image(Point(10, 10), 100, 50) == Point(20, 20)

    def test_native_display_is_identity(self) -> None:
        viewport = Viewport(width=100, height=50)
        assert viewport.to_image(Point(12.5, 7), 100, 50) == Point(12.5, 7)

    def test_anisotropic_scale(self) -> None:
        viewport = Viewport(width=200, height=25)
        assert viewport.to_image(Point(100, 10), 100, 50) == Point(50, 20)

    @pytest.mark.parametrize(
        ("width", "height"),
        [(0, 0), (-5, 10), (1e-320, 1e-320), (float("nan"), float("inf"))],
    )
    def test_degenerate_size_uses_native_scale(
        self, width: float, height: float
    ) -> None:
        viewport = Viewport(width=width, height=height)
        assert viewport.to_image(Point(3, 4), 100, 50) == Point(3, 4)

    def test_point_finiteness(self) -> None:
        assert Point(1, 2).is_finite
        assert not Point(math.inf, 2).is_finite
        assert not Point(1, math.nan).is_finite


class TestStampRect:
    """Tests for rectangle stamping."""

    def test_fills_expected_region(self) -> None:
        mask = stamp_rect(empty_mask(20, 30), Rect(5, 2, 10, 8))
        assert mask[2:8, 5:10].all()
        assert mask.sum() == 6 * 5

    def test_does_not_modify_input(self) -> None:
        original = empty_mask(20, 30)
        stamp_rect(original, Rect(0, 0, 10, 10))
        assert not original.any()

    @pytest.mark.parametrize(
        ("start", "end"),
        [
            (Point(5, 4), Point(25, 16)),
            (Point(25, 16), Point(5, 4)),
            (Point(25, 4), Point(5, 16)),
            (Point(5, 16), Point(25, 4)),
        ],
    )
    def test_direction_invariance(self, start: Point, end: Point) -> None:
        expected = stamp_rect(empty_mask(20, 30), Rect(5, 4, 25, 16))
        mask = stamp_rect(empty_mask(20, 30), Rect.from_corners(start, end))
        np.testing.assert_array_equal(mask, expected)

    def test_partially_outside_is_clipped(self) -> None:
        mask = stamp_rect(empty_mask(10, 10), Rect(-5, -5, 3, 3))
        assert mask.sum() == 9


class TestStampDisc:
    """Tests for brush disc stamping."""

    def test_area_close_to_circle(self) -> None:
        mask = stamp_disc(empty_mask(100, 100), Point(50, 50), 25)
        expected = math.pi * 25**2
        assert abs(mask.sum() - expected) / expected < 0.05

    def test_centre_and_outside(self) -> None:
        mask = stamp_disc(empty_mask(100, 100), Point(50, 50), 25)
        assert mask[50, 50]
        assert mask[50, 74]
        assert not mask[50, 80]
        assert not mask[20, 20]

    def test_clipped_at_border(self) -> None:
        mask = stamp_disc(empty_mask(40, 40), Point(0, 0), 25)
        assert mask[0, 0]
        assert mask.sum() < math.pi * 25**2 / 2

    def test_fully_outside_is_noop(self) -> None:
        mask = stamp_disc(empty_mask(40, 40), Point(500, 500), 25)
        assert not mask.any()

    def test_accumulates_with_existing_selection(self) -> None:
        first = stamp_rect(empty_mask(50, 50), Rect(0, 0, 5, 5))
        mask = stamp_disc(first, Point(40, 40), 5)
        assert mask[0:5, 0:5].all()
        assert mask[40, 40]


class TestEdgeBands:
    """Tests for auto-blur band geometry."""

    def test_fifteen_percent_of_thousand(self) -> None:
        top, bottom = edge_bands(1000, 200, 0.15)
        mask = stamp_rect(stamp_rect(empty_mask(1000, 200), top), bottom)
        rows = np.flatnonzero(mask.any(axis=1))
        expected = np.concatenate([np.arange(0, 150), np.arange(850, 1000)])
        np.testing.assert_array_equal(rows, expected)
        assert mask[rows].all()


class TestMaskPair:
    """Tests for the two-layer mask container."""

    def test_blank(self) -> None:
        pair = MaskPair.blank(10, 20)
        assert pair.shape == (10, 20)
        assert not pair.union().any()

    def test_get_and_set(self) -> None:
        pair = MaskPair.blank(10, 20)
        filled = np.ones((10, 20), dtype=bool)
        pair.set(Layer.PRICE, filled)
        assert pair.get(Layer.PRICE).all()
        assert not pair.get(Layer.SENSITIVE).any()

    def test_set_wrong_shape_raises(self) -> None:
        pair = MaskPair.blank(10, 20)
        with pytest.raises(ValueError, match="does not match"):
            pair.set(Layer.SENSITIVE, np.zeros((5, 5), dtype=bool))
