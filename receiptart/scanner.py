"""Bill intake flow: OCR, extraction, and redaction of one photo.

The same bill photo feeds the OCR engine, whose text seeds the
receipt form, and a redaction editor, whose composites are persisted
alongside the receipt.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from receiptart.exceptions import CompositeExportError
from receiptart.extraction.receipt_extractor import ExtractedReceipt, ReceiptExtractor
from receiptart.grading import GuessOutcome, grade_guess
from receiptart.image_io import ImageSource, load_rgb
from receiptart.masking.editor import ExportedBills, RedactionEditor
from receiptart.ocr.tesseract_engine import OCREngine, ProgressCallback, TesseractEngine
from receiptart.utils.config import AppConfig, load_config
from receiptart.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """Extraction from one OCR run plus the receipt plausibility verdict."""

    receipt: ExtractedReceipt
    is_receipt: bool

    @property
    def raw_text(self) -> str:
        return self.receipt.raw_text


def merge_details(
    previous: ExtractedReceipt, fresh: ExtractedReceipt
) -> ExtractedReceipt:
    """Fold a re-scan into details the user may already have edited.

    Fresh values replace previous ones only when they carry information:
    a non-empty item list, a non-zero total, a non-empty location.
    """
    return ExtractedReceipt(
        location=fresh.location or previous.location,
        total=fresh.total or previous.total,
        items=list(fresh.items) if fresh.items else list(previous.items),
        raw_text=fresh.raw_text,
    )


class BillScanner:
    """Drives a bill photo through OCR, extraction, and redaction.

    Args:
        config: Application configuration.
        engine: OCR engine; defaults to Tesseract configured from ``config``.
    """

    def __init__(
        self, config: AppConfig | None = None, engine: OCREngine | None = None
    ) -> None:
        self.config = config or AppConfig()
        self.engine = engine or TesseractEngine(
            tesseract_cmd=self.config.ocr.tesseract_cmd,
            default_lang=self.config.ocr.default_lang,
            psm=self.config.ocr.psm,
        )
        self.extractor = ReceiptExtractor(self.config.extraction)

    @classmethod
    def from_config(
        cls, path: Path | None = None, engine: OCREngine | None = None
    ) -> "BillScanner":
        """Build a scanner from a YAML config file and set up logging.

        Args:
            path: Path to the YAML configuration file.
                Defaults to configs/config.yaml.
            engine: OCR engine; defaults to Tesseract.

        Returns:
            Scanner configured from ``path``.
        """
        config = load_config(path)
        setup_logging(config.log_level)
        return cls(config, engine=engine)

    def load_image(self, source: ImageSource) -> np.ndarray:
        """Decode a bill photo; raises ``ImageLoadError`` if undecodable."""
        return load_rgb(source)

    def scan(
        self, source: ImageSource, on_progress: ProgressCallback | None = None
    ) -> ScanResult:
        """OCR a bill photo and extract its receipt fields.

        Args:
            source: Bill photo as bytes, path, or array.
            on_progress: Receives OCR progress fractions in [0, 1].

        Returns:
            Extracted fields and whether the text looks like a receipt.

        Raises:
            ImageLoadError: If the photo cannot be decoded.
            OCRUnavailableError: If the OCR engine fails.
        """
        image = self.load_image(source)
        ocr_result = self.engine.recognize(image, on_progress=on_progress)
        is_receipt = self.extractor.is_likely_receipt(ocr_result.text)
        receipt = self.extractor.extract(ocr_result.text)
        if not is_receipt:
            logger.warning("Scanned text does not look like a receipt")
        return ScanResult(receipt=receipt, is_receipt=is_receipt)

    def open_editor(self, source: ImageSource) -> RedactionEditor:
        """Start a redaction session on the bill photo.

        The editor is returned even if the photo fails to decode; it then
        stays inert until another photo is loaded.
        """
        editor = RedactionEditor(self.config.editor)
        editor.load_image(source)
        return editor

    def finalize(self, editor: RedactionEditor) -> ExportedBills:
        """Export the sensitive-only and full composites for persistence.

        Raises:
            CompositeExportError: If the editor has no photo or encoding fails.
        """
        bills = editor.export_blobs()
        if bills is None:
            raise CompositeExportError("Redaction editor has no image to export")
        return bills

    def grade(self, guess: float, receipt: ExtractedReceipt) -> GuessOutcome:
        """Grade a guess against the receipt total with the configured margin."""
        return grade_guess(guess, receipt.total, margin=self.config.grading.margin)
