"""Configuration management for the bill processing core.

Loads and validates YAML configuration with sensible defaults
for the redaction editor, OCR, text extraction, and guess grading.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_RECEIPT_KEYWORDS: list[str] = [
    "total",
    "amount",
    "tax",
    "visa",
    "mastercard",
    "cash",
    "change",
    "balance",
    "items",
    "receipt",
    "invoice",
    "merchant",
    "qty",
]

DEFAULT_NOISE_KEYWORDS: list[str] = [
    "amount",
    "subtotal",
    "tax",
    "total",
    "visa",
    "balance",
    "due",
    "cash",
    "change",
    "@",
    " x ",
    "unit",
    "price",
]


class EditorConfig(BaseModel):
    """Configuration for the redaction mask editor."""

    brush_radius: float = 25.0
    blur_radius: float = 15.0
    tint_opacity: float = Field(default=0.2, ge=0.0, le=1.0)
    auto_blur_fraction: float = Field(default=0.15, gt=0.0, le=0.5)
    outline_width: int = 4
    dash_length: int = 5
    gap_length: int = 5
    export_format: str = "PNG"


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3


class ExtractionConfig(BaseModel):
    """Configuration for receipt text extraction heuristics."""

    receipt_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RECEIPT_KEYWORDS)
    )
    noise_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NOISE_KEYWORDS)
    )
    min_keyword_matches: int = 2
    min_line_length: int = 3
    unknown_merchant: str = "Unknown Merchant"


class GradingConfig(BaseModel):
    """Configuration for grading guesses against the bill total."""

    margin: float = Field(default=0.05, ge=0.0)


class AppConfig(BaseModel):
    """Top-level application configuration."""

    editor: EditorConfig = Field(default_factory=EditorConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    grading: GradingConfig = Field(default_factory=GradingConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
