"""
Decimal Utilities
app/scoring/utils.py

Provides precision-safe decimal math for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from app.models.enumerations import ScoringScale

Number = Union[int, float, Decimal]

# Ceiling per scale; anything unrecognised falls back to the 1-10 ceiling.
SCALE_MAX_SCORES = {
    ScoringScale.ONE_TO_FIVE.value: 5,
    ScoringScale.ONE_TO_TEN.value: 10,
    ScoringScale.ONE_TO_HUNDRED.value: 100,
}
DEFAULT_MAX_SCORE = 10


def round1(value: Number) -> Decimal:
    """
    Round to one decimal place, halves away from zero.

    Examples:
        >>> round1(6.85)
        Decimal('6.9')
        >>> round1(-0.25)
        Decimal('-0.3')
    """
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def mean(values: Iterable[Number]) -> Decimal:
    """Arithmetic mean; Decimal("0") for an empty input."""
    items = [Decimal(str(v)) for v in values]
    if not items:
        return Decimal("0")
    return sum(items) / Decimal(len(items))


def get_max_score(scale: str) -> int:
    """Numeric ceiling for a scale string (1-5 -> 5, 1-100 -> 100, else 10)."""
    if isinstance(scale, ScoringScale):
        scale = scale.value
    return SCALE_MAX_SCORES.get(scale, DEFAULT_MAX_SCORE)


def is_known_scale(scale: str) -> bool:
    if isinstance(scale, ScoringScale):
        return True
    return scale in SCALE_MAX_SCORES
