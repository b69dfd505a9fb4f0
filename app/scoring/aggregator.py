"""
scoring/aggregator.py

Combines a company's per-criterion scores into one comparable total.

Formula:
    total = round1( Σ_c score(c) × weight(c) / 100 )

Weights are literal percentage multipliers, not normalised shares: a config
whose weights sum to 150 yields totals 1.5× the weighted average (15.0 on a
1-10 scale when every score is 10). Criteria without a reported score
contribute 0, so partially evaluated companies still get a defined total.

Score levels (fixed thresholds on score / max):
    high  >= 0.70
    mid   >= 0.40
    low   otherwise
"""

import structlog
from decimal import Decimal
from typing import Iterable, List

from app.models.enumerations import ScoreLevel
from app.models.run import CriterionScore
from app.models.scoring_config import Criterion
from app.scoring.utils import Number, mean, round1

logger = structlog.get_logger(__name__)

HIGH_THRESHOLD = Decimal("0.70")
MID_THRESHOLD = Decimal("0.40")
_HUNDRED = Decimal("100")


def aggregate(criterion_scores: Iterable[CriterionScore], criteria: List[Criterion]) -> Decimal:
    """
    Weighted total of criterion scores in the config's native scale.

    Args:
        criterion_scores: Scores reported for one company (any order).
        criteria: The config's criteria; only these contribute.

    Returns:
        Total rounded to one decimal place.

    Examples:
        >>> a = Criterion(id="a", name="A", weight=60)
        >>> b = Criterion(id="b", name="B", weight=40)
        >>> aggregate([CriterionScore(criterion_id="a", score=8),
        ...            CriterionScore(criterion_id="b", score=5)], [a, b])
        Decimal('6.8')
    """
    by_id = {}
    for cs in criterion_scores:
        by_id.setdefault(cs.criterion_id, cs)

    weighted_sum = Decimal("0")
    missing = 0
    for criterion in criteria:
        cs = by_id.get(criterion.id)
        if cs is None:
            missing += 1
            continue
        weighted_sum += Decimal(cs.score) * Decimal(criterion.weight) / _HUNDRED

    total = round1(weighted_sum)
    if missing:
        logger.debug("aggregate_missing_scores", missing=missing, criteria=len(criteria))
    return total


def get_score_level(score: Number, max_score: Number) -> ScoreLevel:
    """
    Qualitative bucket of a score relative to the scale ceiling.

    Boundaries are closed below: exactly 0.70 is high, exactly 0.40 is mid.
    """
    max_d = Decimal(str(max_score))
    if max_d <= 0:
        return ScoreLevel.LOW
    ratio = Decimal(str(score)) / max_d
    if ratio >= HIGH_THRESHOLD:
        return ScoreLevel.HIGH
    if ratio >= MID_THRESHOLD:
        return ScoreLevel.MID
    return ScoreLevel.LOW


def average_score(total_scores: Iterable[Number]) -> Decimal:
    """Run-level average over scored companies; 0 when nothing is scored."""
    return round1(mean(total_scores))
