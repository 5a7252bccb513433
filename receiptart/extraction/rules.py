"""Heuristic rules for reading receipt text.

Each rule handles one concern (plausibility gate, merchant, total, line
item) and returns ``None`` when it finds nothing, so rules can be tested
and tuned in isolation.
"""

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from receiptart.utils.config import DEFAULT_NOISE_KEYWORDS, DEFAULT_RECEIPT_KEYWORDS
from receiptart.utils.logger import get_logger

logger = get_logger(__name__)

_CURRENCY = r"[$€£]"
_AMOUNT = r"(\d+[.,]\d{2})"

_PHONE_FRAGMENT_PATTERN = re.compile(r"\d{3}-\d{3}")
_NON_NAME_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9\s]")

_TOTAL_PATTERN = re.compile(
    rf"(?:TOTAL|TOTAL\s*DUE|BALANCE|AMOUNT|NET)[\s:]*{_CURRENCY}?\s*{_AMOUNT}",
    re.IGNORECASE,
)

# The price must be the last token on the line.
_ITEM_PATTERN = re.compile(rf"^(.*?)\s+{_CURRENCY}?\s*{_AMOUNT}$")

_BULLET_CHARS = "*.- \t"


@dataclass
class ReceiptItem:
    """A purchasable line on a receipt."""

    name: str
    price: float

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "price": self.price}


def parse_amount(value: str) -> float | None:
    """Parse a two-decimal amount with either ``.`` or ``,`` as separator.

    Returns:
        The amount rounded to cents, or ``None`` if unparseable.
    """
    try:
        amount = Decimal(value.replace(",", "."))
    except InvalidOperation:
        return None
    return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def prepare_lines(text: str, min_length: int = 3) -> list[str]:
    """Split text into trimmed lines longer than ``min_length`` characters."""
    lines = (line.strip() for line in text.split("\n"))
    return [line for line in lines if len(line) > min_length]


@dataclass
class KeywordGate:
    """Cheap check that text plausibly comes from a receipt."""

    keywords: list[str] = field(default_factory=lambda: list(DEFAULT_RECEIPT_KEYWORDS))
    min_matches: int = 2

    def matches(self, text: str) -> list[str]:
        """Return the distinct keywords found in ``text``, case-insensitively."""
        lowered = text.lower()
        return [word for word in dict.fromkeys(self.keywords) if word in lowered]

    def apply(self, text: str) -> bool:
        found = self.matches(text)
        logger.debug("Receipt keyword gate matched %s", found)
        return len(found) >= self.min_matches


class MerchantRule:
    """Take the first header line that is not a phone number or a date.

    Only the first qualifying line is considered. If it holds no letters,
    digits or spaces (e.g. ``"*****"``) the rule returns ``None`` rather
    than an empty name, and the extractor reports its unknown-merchant
    placeholder instead.
    """

    def apply(self, lines: list[str]) -> str | None:
        for line in lines:
            if _PHONE_FRAGMENT_PATTERN.search(line):
                continue
            if "date" in line.lower():
                continue
            name = _NON_NAME_CHARS_PATTERN.sub("", line).strip()
            return name or None
        return None


class TotalRule:
    """Find the first labelled grand total anywhere in the text."""

    def apply(self, text: str) -> float | None:
        match = _TOTAL_PATTERN.search(text)
        if not match:
            return None
        total = parse_amount(match.group(1))
        logger.debug("Found total amount: %s", total)
        return total


@dataclass
class ItemRule:
    """Read a ``<name> <price>`` line, skipping summary and payment rows."""

    noise_keywords: list[str] = field(
        default_factory=lambda: list(DEFAULT_NOISE_KEYWORDS)
    )

    def is_noise(self, line: str) -> bool:
        lowered = line.lower()
        return any(keyword in lowered for keyword in self.noise_keywords)

    def apply(self, line: str) -> ReceiptItem | None:
        if self.is_noise(line):
            return None
        match = _ITEM_PATTERN.match(line)
        if not match:
            return None

        name = match.group(1).strip().lstrip(_BULLET_CHARS).rstrip(_BULLET_CHARS)
        price = parse_amount(match.group(2))
        if price is None or price <= 0 or len(name) <= 1:
            return None
        return ReceiptItem(name=name, price=price)
