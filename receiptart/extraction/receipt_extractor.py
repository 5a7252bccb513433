"""Structured receipt extraction from raw OCR text.

Runs the keyword gate and the merchant, total, and item rules over
noisy multi-line OCR output. Extraction is best effort: unparseable
input yields conservative defaults rather than an error.
"""

from dataclasses import dataclass, field

from receiptart.utils.config import ExtractionConfig
from receiptart.utils.logger import get_logger

from .rules import (
    ItemRule,
    KeywordGate,
    MerchantRule,
    ReceiptItem,
    TotalRule,
    prepare_lines,
)

logger = get_logger(__name__)


@dataclass
class ExtractedReceipt:
    """Fields read from one OCR run, plus the text they came from."""

    location: str
    total: float
    items: list[ReceiptItem] = field(default_factory=list)
    raw_text: str = ""

    def to_record(self) -> dict[str, object]:
        """Serialise the three persisted fields."""
        return {
            "location": self.location,
            "total": self.total,
            "items": [item.to_dict() for item in self.items],
        }


class ReceiptExtractor:
    """Ordered pipeline of receipt heuristics.

    Args:
        config: Extraction configuration with keyword lists and thresholds.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        self.gate = KeywordGate(
            keywords=self.config.receipt_keywords,
            min_matches=self.config.min_keyword_matches,
        )
        self.merchant_rule = MerchantRule()
        self.total_rule = TotalRule()
        self.item_rule = ItemRule(noise_keywords=self.config.noise_keywords)

    def is_likely_receipt(self, text: str) -> bool:
        """Return whether enough receipt keywords appear in ``text``."""
        return self.gate.apply(text)

    def extract(self, text: str) -> ExtractedReceipt:
        """Extract merchant, total, and line items from OCR text.

        Args:
            text: Raw newline-delimited OCR output.

        Returns:
            Extracted fields; defaults are used for anything not found.
        """
        lines = prepare_lines(text, self.config.min_line_length)

        location = self.merchant_rule.apply(lines) or self.config.unknown_merchant
        total = self.total_rule.apply(text)
        items = [item for item in map(self.item_rule.apply, lines) if item is not None]

        logger.info(
            "Extracted receipt from %d lines: location=%r total=%s items=%d",
            len(lines),
            location,
            total,
            len(items),
        )
        return ExtractedReceipt(
            location=location,
            total=total if total is not None else 0.0,
            items=items,
            raw_text=text,
        )


_default_extractor = ReceiptExtractor()


def is_likely_receipt(text: str) -> bool:
    """Advisory check that ``text`` contains at least two receipt keywords."""
    return _default_extractor.is_likely_receipt(text)


def extract_details_from_text(text: str) -> ExtractedReceipt:
    """Extract receipt fields with the default configuration."""
    return _default_extractor.extract(text)
