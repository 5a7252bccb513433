"""Drag gesture state, independent of any pointer event plumbing."""

from dataclasses import dataclass
from enum import StrEnum

from .geometry import Point, Rect


class Tool(StrEnum):
    """Paint tools offered by the redaction editor."""

    RECTANGLE = "rect"
    FREEHAND = "brush"


class StrokePhase(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class StrokeState:
    """Explicit ``IDLE``/``DRAGGING`` state machine for one drag gesture.

    All positions are in image pixels.
    """

    phase: StrokePhase = StrokePhase.IDLE
    anchor: Point | None = None
    current: Point | None = None

    @property
    def dragging(self) -> bool:
        return self.phase == StrokePhase.DRAGGING

    def begin(self, point: Point) -> None:
        self.phase = StrokePhase.DRAGGING
        self.anchor = point
        self.current = point

    def move(self, point: Point) -> None:
        self.current = point

    def finish(self, point: Point) -> Rect | None:
        """Return to ``IDLE`` and report the dragged rectangle.

        Returns:
            Rectangle from the anchor to ``point``, or ``None`` if no
            drag was in progress.
        """
        if not self.dragging or self.anchor is None:
            return None
        rect = Rect.from_corners(self.anchor, point)
        self.cancel()
        return rect

    def cancel(self) -> None:
        self.phase = StrokePhase.IDLE
        self.anchor = None
        self.current = None

    def pending_rect(self) -> Rect | None:
        """Rectangle between the anchor and the latest position while dragging."""
        if not self.dragging or self.anchor is None or self.current is None:
            return None
        return Rect.from_corners(self.anchor, self.current)
