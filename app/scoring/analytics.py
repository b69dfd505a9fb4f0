"""
scoring/analytics.py

Pure projections over a run's (possibly partial) result set. Nothing here
mutates its inputs or raises on missing per-company data; a missing
criterion score reads as 0.

Projections:
    score_distribution   histogram of total scores over [1, max]
    top_companies        highest totals first
    bottom_companies     lowest N, lowest first (the ranked tail reversed)
    radar_comparison     one point per criterion for up to 4 companies
    scatter_projection   (criterion X, criterion Y) per company
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from app.core.exceptions import RadarSelectionFullException
from app.models.run import CompanyResult
from app.models.scoring_config import Criterion

DEFAULT_RADAR_LIMIT = 4


@dataclass
class DistributionBucket:
    low: int
    high: int
    count: int = 0

    @property
    def range(self) -> str:
        return f"{self.low}-{self.high}"


@dataclass
class RadarPoint:
    criterion_id: str
    criterion: str
    scores: Dict[str, int] = field(default_factory=dict)


@dataclass
class ScatterPoint:
    company_id: str
    name: str
    x: int
    y: int
    total_score: float


@dataclass
class ScatterProjection:
    x_criterion_id: Optional[str]
    y_criterion_id: Optional[str]
    points: List[ScatterPoint]


def criterion_score(company: CompanyResult, criterion_id: Optional[str]) -> int:
    """Score of one criterion for a company, 0 if not reported."""
    if criterion_id is None:
        return 0
    for cs in company.criterion_scores:
        if cs.criterion_id == criterion_id:
            return cs.score
    return 0


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------

def bucket_width(max_score: int) -> int:
    return 1 if max_score <= 10 else 10


def score_distribution(companies: Sequence[CompanyResult], max_score: int) -> List[DistributionBucket]:
    """
    Histogram of total scores.

    Buckets are contiguous and cover [1, max_score]: width 1 up to a ceiling of
    10 (labels "1-1" .. "10-10"), width 10 above ("1-10" .. "91-100").
    Totals outside [1, max_score] are left out.
    """
    width = bucket_width(max_score)
    buckets: Dict[int, DistributionBucket] = {}
    for start in range(0, max_score, width):
        buckets[start] = DistributionBucket(low=start + 1, high=min(start + width, max_score))

    for company in companies:
        total = company.total_score
        if total is None or not 1 <= total <= max_score:
            continue
        start = math.floor((total - 1) / width) * width
        bucket = buckets.get(start)
        if bucket is not None:
            bucket.count += 1

    return list(buckets.values())


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def rank_companies(companies: Sequence[CompanyResult]) -> List[CompanyResult]:
    """Stable sort by total score, highest first; ties keep arrival order."""
    return sorted(companies, key=lambda c: c.total_score, reverse=True)


def top_companies(companies: Sequence[CompanyResult], n: int) -> List[CompanyResult]:
    if n <= 0:
        return []
    return rank_companies(companies)[:n]


def bottom_companies(companies: Sequence[CompanyResult], n: int) -> List[CompanyResult]:
    """The n lowest totals, lowest first."""
    if n <= 0:
        return []
    ranked = rank_companies(companies)
    return list(reversed(ranked[-n:]))


# ---------------------------------------------------------------------------
# Radar comparison
# ---------------------------------------------------------------------------

class RadarSelection:
    """
    Ordered set of company ids for the radar chart, capped at `limit`.

    Adding beyond the cap raises instead of dropping anything.
    """

    def __init__(self, limit: int = DEFAULT_RADAR_LIMIT):
        self.limit = limit
        self._ids: List[str] = []

    @property
    def company_ids(self) -> List[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, company_id: str) -> bool:
        return company_id in self._ids

    def add(self, company_id: str) -> None:
        if company_id in self._ids:
            return
        if len(self._ids) >= self.limit:
            raise RadarSelectionFullException(self.limit, company_id)
        self._ids.append(company_id)

    def remove(self, company_id: str) -> None:
        if company_id in self._ids:
            self._ids.remove(company_id)

    def toggle(self, company_id: str) -> bool:
        """Flip membership; returns True when the company is now selected."""
        if company_id in self._ids:
            self.remove(company_id)
            return False
        self.add(company_id)
        return True

    @classmethod
    def of(cls, company_ids: Sequence[str], limit: int = DEFAULT_RADAR_LIMIT) -> "RadarSelection":
        selection = cls(limit)
        for company_id in company_ids:
            selection.add(company_id)
        return selection


def radar_comparison(
    companies: Sequence[CompanyResult],
    criteria: Sequence[Criterion],
    selection: RadarSelection,
) -> List[RadarPoint]:
    """
    One point per criterion with each selected company's score on it.

    Selected ids that are not (yet) in the result set are skipped.
    """
    by_id = {c.id: c for c in companies}
    selected = [by_id[cid] for cid in selection.company_ids if cid in by_id]

    points = []
    for criterion in criteria:
        point = RadarPoint(criterion_id=criterion.id, criterion=criterion.name)
        for company in selected:
            point.scores[company.name] = criterion_score(company, criterion.id)
        points.append(point)
    return points


# ---------------------------------------------------------------------------
# Scatter
# ---------------------------------------------------------------------------

def default_axes(criteria: Sequence[Criterion]) -> tuple[Optional[str], Optional[str]]:
    """First and second criterion, or the first twice when there is only one."""
    if not criteria:
        return None, None
    x = criteria[0].id
    y = criteria[1].id if len(criteria) > 1 else x
    return x, y


def scatter_projection(
    companies: Sequence[CompanyResult],
    criteria: Sequence[Criterion],
    x_criterion_id: Optional[str] = None,
    y_criterion_id: Optional[str] = None,
) -> ScatterProjection:
    default_x, default_y = default_axes(criteria)
    x_id = x_criterion_id or default_x
    y_id = y_criterion_id or default_y

    points = [
        ScatterPoint(
            company_id=c.id,
            name=c.name,
            x=criterion_score(c, x_id),
            y=criterion_score(c, y_id),
            total_score=c.total_score,
        )
        for c in companies
    ]
    return ScatterProjection(x_criterion_id=x_id, y_criterion_id=y_id, points=points)
