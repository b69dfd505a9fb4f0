# tests/test_aggregator.py

"""
Aggregator Tests - weighted totals, score levels, run averages
"""

from decimal import Decimal

import pytest

from app.models.enumerations import ScoreLevel
from app.models.run import CriterionScore
from app.models.scoring_config import Criterion
from app.scoring.aggregator import aggregate, average_score, get_score_level
from app.scoring.utils import get_max_score, round1


def scores(**values):
    return [CriterionScore(criterion_id=k, score=v) for k, v in values.items()]


class TestAggregate:

    def test_sixty_forty_example(self, two_criteria):
        total = aggregate(scores(a=8, b=5), two_criteria)
        assert total == Decimal("6.8")
        assert get_score_level(total, 10) == ScoreLevel.MID

    def test_missing_score_contributes_zero(self, two_criteria):
        assert aggregate(scores(a=8), two_criteria) == Decimal("4.8")

    def test_no_scores_is_zero(self, two_criteria):
        assert aggregate([], two_criteria) == Decimal("0.0")

    def test_unknown_criterion_ignored(self, two_criteria):
        assert aggregate(scores(a=8, b=5, z=10), two_criteria) == Decimal("6.8")

    def test_first_score_per_criterion_wins(self, two_criteria):
        duplicated = scores(a=8, b=5) + [CriterionScore(criterion_id="a", score=1)]
        assert aggregate(duplicated, two_criteria) == Decimal("6.8")

    def test_order_of_scores_does_not_matter(self, two_criteria):
        assert aggregate(list(reversed(scores(a=8, b=5))), two_criteria) == Decimal("6.8")

    def test_over_allocated_weights_scale_proportionally(self):
        criteria = [
            Criterion(id="a", name="A", weight=100),
            Criterion(id="b", name="B", weight=50),
        ]
        assert aggregate(scores(a=10, b=10), criteria) == Decimal("15.0")

    def test_under_allocated_weights_scale_proportionally(self):
        criteria = [Criterion(id="a", name="A", weight=50)]
        assert aggregate(scores(a=10), criteria) == Decimal("5.0")

    def test_rounds_half_away_from_zero(self):
        criteria = [
            Criterion(id="a", name="A", weight=25),
            Criterion(id="b", name="B", weight=75),
        ]
        # 0.75 + 1.5 = 2.25
        assert aggregate(scores(a=3, b=2), criteria) == Decimal("2.3")

    def test_hundred_point_scale(self):
        criteria = [
            Criterion(id="fp", name="FP", weight=30),
            Criterion(id="md", name="MD", weight=25),
            Criterion(id="ov", name="OV", weight=25),
            Criterion(id="ri", name="RI", weight=20),
        ]
        # 24 + 17.5 + 22.5 + 11 = 75
        assert aggregate(scores(fp=80, md=70, ov=90, ri=55), criteria) == Decimal("75.0")


class TestScoreLevel:

    @pytest.mark.parametrize("score,max_score,level", [
        (7, 10, ScoreLevel.HIGH),
        (6.9, 10, ScoreLevel.MID),
        (4, 10, ScoreLevel.MID),
        (3.9, 10, ScoreLevel.LOW),
        (70, 100, ScoreLevel.HIGH),
        (40, 100, ScoreLevel.MID),
        (39, 100, ScoreLevel.LOW),
        (5, 5, ScoreLevel.HIGH),
        (2, 5, ScoreLevel.MID),
        (1, 5, ScoreLevel.LOW),
    ])
    def test_boundaries(self, score, max_score, level):
        assert get_score_level(score, max_score) == level

    def test_zero_max_is_low(self):
        assert get_score_level(5, 0) == ScoreLevel.LOW


class TestAverageScore:

    def test_empty_is_zero(self):
        assert average_score([]) == Decimal("0.0")

    def test_rounded_mean(self):
        assert average_score([6.8, 7.1, 5.0]) == Decimal("6.3")

    def test_single_value(self):
        assert average_score([8.45]) == Decimal("8.5")


class TestScaleHelpers:

    @pytest.mark.parametrize("scale,expected", [
        ("1-5", 5),
        ("1-10", 10),
        ("1-100", 100),
        ("bogus", 10),
        ("", 10),
    ])
    def test_max_score(self, scale, expected):
        assert get_max_score(scale) == expected

    def test_round1_from_float(self):
        assert round1(2.25) == Decimal("2.3")
        assert round1(6.849) == Decimal("6.8")
