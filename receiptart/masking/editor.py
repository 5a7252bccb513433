"""Interactive redaction editor for bill photos.

Owns the sensitive and price masks for one photo, applies brush and
rectangle strokes, keeps an undo/redo history, renders a tinted
preview, and exports the two composites persisted with a receipt:
one with only sensitive regions blurred and one with both layers
blurred.
"""

from dataclasses import dataclass

import numpy as np

from receiptart.exceptions import ImageLoadError
from receiptart.image_io import ImageSource, load_rgb
from receiptart.utils.config import EditorConfig
from receiptart.utils.logger import get_logger

from .compositing import (
    OUTLINE_COLORS,
    composite,
    draw_dashed_rect,
    encode_image,
    gaussian_blur,
)
from .geometry import Point, Viewport
from .history import MaskHistory
from .masks import LAYER_ORDER, Layer, MaskPair, edge_bands, stamp_disc, stamp_rect
from .stroke import StrokeState, Tool

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExportedBills:
    """Encoded composites handed to persistence."""

    sensitive_blob: bytes
    full_blob: bytes


@dataclass
class _Session:
    """Rasters and masks for the photo currently being edited."""

    base: np.ndarray
    blurred: np.ndarray
    masks: MaskPair

    @property
    def width(self) -> int:
        return self.base.shape[1]

    @property
    def height(self) -> int:
        return self.base.shape[0]


class RedactionEditor:
    """Two-layer mask editor over a single bill photo.

    Points passed to the stroke methods are in viewport pixels and are
    rescaled to image pixels using the current viewport. Until a photo
    has been loaded successfully every paint operation is a no-op, as
    is any stroke event at a non-finite position.

    Args:
        config: Editor configuration. Defaults to ``EditorConfig()``.
    """

    def __init__(self, config: EditorConfig | None = None) -> None:
        self.config = config or EditorConfig()
        self.active_layer = Layer.SENSITIVE
        self.tool = Tool.RECTANGLE
        self.stroke = StrokeState()
        self.history = MaskHistory()
        self.frame: np.ndarray | None = None
        self._session: _Session | None = None
        self._viewport: Viewport | None = None

    @property
    def is_ready(self) -> bool:
        return self._session is not None

    @property
    def image_size(self) -> tuple[int, int] | None:
        """``(width, height)`` of the loaded photo."""
        if self._session is None:
            return None
        return self._session.width, self._session.height

    @property
    def can_undo(self) -> bool:
        return self.is_ready and self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.is_ready and self.history.can_redo

    def mask(self, layer: Layer) -> np.ndarray | None:
        """Return a copy of a layer's mask, or ``None`` before a photo is loaded."""
        if self._session is None:
            return None
        return self._session.masks.get(layer).copy()

    def load_image(self, source: ImageSource) -> bool:
        """Start a new editing session on ``source``.

        Masks and history from any previous session are discarded. If the
        photo cannot be decoded the editor is left uninitialised.

        Returns:
            ``True`` if the photo was loaded.
        """
        self._reset_session()
        try:
            image = load_rgb(source)
        except ImageLoadError as exc:
            logger.warning("Redaction editor could not load image: %s", exc)
            return False

        image.setflags(write=False)
        blurred = gaussian_blur(image, self.config.blur_radius)
        blurred.setflags(write=False)
        height, width = image.shape[:2]
        session = _Session(
            base=image, blurred=blurred, masks=MaskPair.blank(height, width)
        )
        self._session = session
        self.history.reset(session.masks)
        logger.info("Redaction session started on %dx%d image", width, height)
        self.render()
        return True

    def _reset_session(self) -> None:
        self._session = None
        self._viewport = None
        self.frame = None
        self.history = MaskHistory()
        self.stroke.cancel()

    def set_viewport(self, width: float, height: float) -> None:
        """Record the size the photo is displayed at, for pointer rescaling."""
        self._viewport = Viewport(width, height)

    def _to_image(self, session: _Session, point: Point) -> Point | None:
        if not point.is_finite:
            return None
        viewport = self._viewport or Viewport(session.width, session.height)
        position = viewport.to_image(point, session.width, session.height)
        return position if position.is_finite else None

    def select_layer(self, layer: Layer) -> None:
        self.active_layer = Layer(layer)
        if self.stroke.dragging:
            self.render()

    def select_tool(self, tool: Tool) -> None:
        self.tool = Tool(tool)

    def begin_stroke(self, point: Point) -> None:
        session = self._session
        if session is None:
            return
        position = self._to_image(session, point)
        if position is None:
            return
        self.stroke.begin(position)
        if self.tool == Tool.FREEHAND:
            self._stamp_brush(session, position)
        else:
            self.render()

    def update_stroke(self, point: Point) -> None:
        session = self._session
        if session is None or not self.stroke.dragging:
            return
        position = self._to_image(session, point)
        if position is None:
            return
        self.stroke.move(position)
        if self.tool == Tool.FREEHAND:
            self._stamp_brush(session, position)
        else:
            self.render()

    def end_stroke(self, point: Point) -> None:
        session = self._session
        if session is None or not self.stroke.dragging:
            return
        position = self._to_image(session, point)
        if position is None:
            return
        rect = self.stroke.finish(position)
        if self.tool == Tool.RECTANGLE and rect is not None:
            masks = session.masks
            masks.set(self.active_layer, stamp_rect(masks.get(self.active_layer), rect))
            logger.debug(
                "Stamped %.0fx%.0f rectangle on %s layer",
                rect.width,
                rect.height,
                self.active_layer,
            )
        self._commit(session)

    def _stamp_brush(self, session: _Session, position: Point) -> None:
        masks = session.masks
        brushed = stamp_disc(
            masks.get(self.active_layer), position, self.config.brush_radius
        )
        masks.set(self.active_layer, brushed)
        self.render()

    def _commit(self, session: _Session) -> None:
        self.history.commit(session.masks)
        self.render()

    def auto_blur_edges(self) -> None:
        """Select header and footer bands on the sensitive layer."""
        session = self._session
        if session is None:
            return
        masks = session.masks
        mask = masks.sensitive
        fraction = self.config.auto_blur_fraction
        for band in edge_bands(session.height, session.width, fraction):
            mask = stamp_rect(mask, band)
        masks.set(Layer.SENSITIVE, mask)
        logger.info("Auto-blurred header and footer bands")
        self._commit(session)

    def clear_active_layer(self) -> None:
        session = self._session
        if session is None:
            return
        masks = session.masks
        masks.set(self.active_layer, np.zeros_like(masks.get(self.active_layer)))
        logger.info("Cleared %s layer", self.active_layer)
        self._commit(session)

    def undo(self) -> None:
        if self._session is None:
            return
        self._restore(self.history.undo())

    def redo(self) -> None:
        if self._session is None:
            return
        self._restore(self.history.redo())

    def _restore(self, masks: MaskPair | None) -> None:
        if self._session is None or masks is None:
            return
        self._session.masks = masks
        self.render()

    def render(self) -> np.ndarray | None:
        """Recompute the tinted preview frame.

        Returns:
            The preview image, also stored as ``frame``; ``None`` before a
            photo is loaded.
        """
        session = self._session
        if session is None:
            return None
        frame = composite(
            session.base,
            session.blurred,
            session.masks,
            LAYER_ORDER,
            tint_opacity=self.config.tint_opacity,
        )
        pending = self.stroke.pending_rect() if self.tool == Tool.RECTANGLE else None
        if pending is not None:
            draw_dashed_rect(
                frame,
                pending,
                OUTLINE_COLORS[self.active_layer],
                width=self.config.outline_width,
                dash=self.config.dash_length,
                gap=self.config.gap_length,
            )
        self.frame = frame
        return frame

    def export_composite(self, include_price_layer: bool) -> np.ndarray | None:
        """Bake the masks into a clean copy of the photo.

        The sensitive layer is always blurred; the price layer only when
        ``include_price_layer`` is set. No tint or outline is applied.

        Returns:
            New RGB raster, or ``None`` before a photo is loaded.
        """
        session = self._session
        if session is None:
            return None
        layers = LAYER_ORDER if include_price_layer else (Layer.SENSITIVE,)
        return composite(session.base, session.blurred, session.masks, layers)

    def export_blobs(self) -> ExportedBills | None:
        """Encode the sensitive-only and full composites.

        Returns:
            Both encoded images, or ``None`` before a photo is loaded.

        Raises:
            CompositeExportError: If encoding fails. Masks and history are
                left untouched.
        """
        sensitive_only = self.export_composite(include_price_layer=False)
        full = self.export_composite(include_price_layer=True)
        if sensitive_only is None or full is None:
            return None
        fmt = self.config.export_format
        bills = ExportedBills(
            sensitive_blob=encode_image(sensitive_only, fmt),
            full_blob=encode_image(full, fmt),
        )
        logger.info(
            "Exported composites: sensitive=%d bytes, full=%d bytes",
            len(bills.sensitive_blob),
            len(bills.full_blob),
        )
        return bills
