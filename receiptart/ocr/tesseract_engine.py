"""Tesseract OCR engine wrapper with progress reporting.

Any engine exposing ``recognize(image, on_progress)`` and returning
plain text can stand in for Tesseract; the extractor only sees text.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import cv2
import numpy as np
import pytesseract
from PIL import Image

from receiptart.exceptions import OCRUnavailableError
from receiptart.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]

# Progress reported once the image has been prepared for recognition.
_PREPARED_PROGRESS = 0.1


@dataclass
class OCRResult:
    """Plain-text transcription of a bill photo."""

    text: str
    language: str = "eng"


class OCREngine(Protocol):
    """Anything that can turn a photo into receipt text."""

    def recognize(
        self, image: np.ndarray, on_progress: ProgressCallback | None = None
    ) -> OCRResult: ...


class ProgressReporter:
    """Forward progress to a callback, clamped to [0, 1] and never decreasing."""

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self.callback = callback
        self.value = 0.0
        self._reported = False

    def report(self, fraction: float) -> None:
        fraction = min(max(fraction, 0.0), 1.0)
        if self._reported and fraction <= self.value:
            return
        self.value = max(self.value, fraction)
        self._reported = True
        if self.callback is not None:
            self.callback(self.value)


class TesseractEngine:
    """Wrapper around Tesseract OCR for receipt photos.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm

    @staticmethod
    def _prepare(image: np.ndarray) -> np.ndarray:
        if image.ndim == 3 and image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
        if image.ndim == 3:
            return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
        return image

    def recognize(
        self, image: np.ndarray, on_progress: ProgressCallback | None = None
    ) -> OCRResult:
        """Transcribe an image to plain text.

        Args:
            image: RGB, RGBA, or grayscale image as a numpy array.
            on_progress: Called with non-decreasing fractions in [0, 1].

        Returns:
            OCRResult with the recognised text.

        Raises:
            OCRUnavailableError: If Tesseract is missing or fails.
        """
        progress = ProgressReporter(on_progress)
        progress.report(0.0)

        gray = self._prepare(image)
        progress.report(_PREPARED_PROGRESS)

        try:
            text = pytesseract.image_to_string(
                Image.fromarray(gray),
                lang=self.default_lang,
                config=f"--psm {self.psm}",
            )
        except pytesseract.TesseractNotFoundError as exc:
            logger.error("Tesseract executable not found: %s", exc)
            raise OCRUnavailableError("Tesseract is not installed") from exc
        except (pytesseract.TesseractError, RuntimeError, OSError) as exc:
            logger.error("Tesseract recognition failed: %s", exc)
            raise OCRUnavailableError(f"OCR failed: {exc}") from exc

        progress.report(1.0)
        logger.info("OCR recognised %d characters", len(text))
        return OCRResult(text=text, language=self.default_lang)
