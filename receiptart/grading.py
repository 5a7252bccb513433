"""Grading of total guesses against an extracted bill total.

All money comparisons are done in integer cents so that the margin
boundary does not depend on binary floating-point rounding.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from receiptart.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MARGIN = 0.05


def to_cents(value: float | int | str | Decimal) -> int:
    """Convert an amount to whole cents, rounding half up.

    Raises:
        ValueError: If ``value`` is not a finite number.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class GuessOutcome:
    """Result of comparing one guess with the actual total."""

    guess_cents: int
    actual_cents: int
    difference_cents: int
    percent_off: float
    is_correct: bool

    @property
    def difference(self) -> float:
        return self.difference_cents / 100


def grade_guess(
    guess: float | str | Decimal,
    actual: float | str | Decimal,
    margin: float = DEFAULT_MARGIN,
) -> GuessOutcome:
    """Grade a guess, counting it correct within ``margin`` of the total.

    The boundary is inclusive: a guess exactly 5% off is correct. When
    the actual total is zero only an exact guess is correct and the
    percentage is reported as 0.

    Args:
        guess: The player's guessed total.
        actual: The bill's total.
        margin: Allowed relative error, e.g. ``0.05`` for 5%.

    Returns:
        Outcome with the difference in cents and the rounded percentage.
    """
    guess_cents = to_cents(guess)
    actual_cents = to_cents(actual)
    difference_cents = abs(guess_cents - actual_cents)

    if actual_cents > 0:
        ratio = Decimal(difference_cents) / Decimal(actual_cents)
        is_correct = ratio <= Decimal(str(margin))
        percent_off = float(
            (ratio * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        )
    else:
        is_correct = difference_cents == 0
        percent_off = 0.0

    logger.debug(
        "Graded guess %d against %d cents: off by %.1f%%, correct=%s",
        guess_cents,
        actual_cents,
        percent_off,
        is_correct,
    )
    return GuessOutcome(
        guess_cents=guess_cents,
        actual_cents=actual_cents,
        difference_cents=difference_cents,
        percent_off=percent_off,
        is_correct=is_correct,
    )
