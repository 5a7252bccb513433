"""Shared test fixtures for the bill processing test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from receiptart.masking.editor import RedactionEditor


def make_photo(height: int = 80, width: int = 100, seed: int = 7) -> np.ndarray:
    """Create a noisy RGB image so blurring visibly changes pixels."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def encode_png(image: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_photo() -> np.ndarray:
    """An 80x100 noisy RGB bill photo."""
    return make_photo()


@pytest.fixture
def sample_png(sample_photo: np.ndarray) -> bytes:
    return encode_png(sample_photo)


@pytest.fixture
def editor(sample_photo: np.ndarray) -> RedactionEditor:
    """A redaction editor with the sample photo loaded."""
    ed = RedactionEditor()
    assert ed.load_image(sample_photo)
    return ed


@pytest.fixture
def receipt_text() -> str:
    return (
        "JOE'S COFFEE HOUSE\n"
        "123-456-7890\n"
        "Date: 01/02/2024\n"
        "Coffee 3.50\n"
        "* Bagel .... 2.25\n"
        "TOTAL $5.75\n"
        "Tax 0.46\n"
        "VISA 6.21\n"
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
