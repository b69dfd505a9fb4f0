# tests/test_property_based.py
"""
Property-Based Tests - Hypothesis checks over the scoring engine

Covers:
  - Aggregator bounds and proportional weights
  - Distribution buckets account for every in-range total
  - Ranking order, idempotence, top/bottom disjointness
  - Run progress monotonicity under arbitrary report sequences
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from app.models.run import CompanyEntry, CompanyResult, CriterionScore, RunRecord
from app.models.scoring_config import Criterion
from app.scoring.aggregator import aggregate
from app.scoring.analytics import bottom_companies, rank_companies, score_distribution, top_companies
from app.scoring.run_state import RunStateMachine, run_progress
from app.scoring.utils import round1

# ---------------------------------------------------------------------------
# Shared strategies
# ---------------------------------------------------------------------------

max_score_st = st.sampled_from([5, 10, 100])


@st.composite
def weights_summing_to_100(draw):
    """Split 100 into 1-8 non-negative integer weights."""
    n = draw(st.integers(min_value=1, max_value=8))
    cuts = sorted(draw(st.lists(st.integers(min_value=0, max_value=100), min_size=n - 1, max_size=n - 1)))
    bounds = [0] + cuts + [100]
    return [bounds[i + 1] - bounds[i] for i in range(n)]


@st.composite
def rubric_and_scores(draw):
    max_score = draw(max_score_st)
    weights = draw(weights_summing_to_100())
    criteria = [Criterion(id=f"c{i}", name=f"C{i}", weight=w) for i, w in enumerate(weights)]
    scores = [
        CriterionScore(criterion_id=c.id, score=draw(st.integers(min_value=1, max_value=max_score)))
        for c in criteria
    ]
    return max_score, criteria, scores


@st.composite
def scored_companies(draw, max_score=10):
    totals = draw(st.lists(
        st.floats(min_value=0, max_value=max_score * 1.5, allow_nan=False, allow_infinity=False),
        max_size=30,
    ))
    return [
        CompanyResult(id=f"co-{i}", name=f"Co {i}", total_score=float(round1(t)), run_id="r", config_id="c")
        for i, t in enumerate(totals)
    ]


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class TestAggregatorProperties:

    @given(rubric_and_scores())
    @settings(max_examples=300)
    def test_total_within_scale_when_weights_sum_to_100(self, case):
        """With weights summing to 100 and every score in range, the total stays in [1, max]."""
        max_score, criteria, scores = case
        total = aggregate(scores, criteria)
        assert Decimal("1") <= total <= Decimal(max_score)

    @given(
        st.integers(min_value=1, max_value=10),
        st.lists(st.integers(min_value=0, max_value=100), min_size=1, max_size=6),
    )
    @settings(max_examples=300)
    def test_uniform_scores_scale_with_weight_sum(self, score, weights):
        """Equal scores give score x sum(weights) / 100, whatever the weight sum."""
        criteria = [Criterion(id=f"c{i}", name=f"C{i}", weight=w) for i, w in enumerate(weights)]
        scores = [CriterionScore(criterion_id=c.id, score=score) for c in criteria]
        expected = round1(Decimal(score) * Decimal(sum(weights)) / Decimal(100))
        assert aggregate(scores, criteria) == expected

    @given(rubric_and_scores(), st.randoms())
    @settings(max_examples=200)
    def test_score_order_irrelevant(self, case, rnd):
        _, criteria, scores = case
        shuffled = list(scores)
        rnd.shuffle(shuffled)
        assert aggregate(shuffled, criteria) == aggregate(scores, criteria)

    @given(rubric_and_scores())
    @settings(max_examples=200)
    def test_dropping_a_score_never_raises_total(self, case):
        _, criteria, scores = case
        assert aggregate(scores[1:], criteria) <= aggregate(scores, criteria)


# ---------------------------------------------------------------------------
# Distribution / ranking
# ---------------------------------------------------------------------------


class TestAnalyticsProperties:

    @given(max_score_st.flatmap(lambda m: st.tuples(st.just(m), scored_companies(m))))
    @settings(max_examples=300)
    def test_histogram_counts_every_in_range_total(self, case):
        max_score, companies = case
        buckets = score_distribution(companies, max_score)
        in_range = [c for c in companies if 1 <= c.total_score <= max_score]
        assert sum(b.count for b in buckets) == len(in_range)
        assert buckets[0].low == 1
        assert buckets[-1].high == max_score
        for left, right in zip(buckets, buckets[1:]):
            assert right.low == left.high + 1

    @given(scored_companies())
    @settings(max_examples=300)
    def test_ranking_sorted_and_idempotent(self, companies):
        ranked = rank_companies(companies)
        totals = [c.total_score for c in ranked]
        assert totals == sorted(totals, reverse=True)
        assert [c.id for c in rank_companies(ranked)] == [c.id for c in ranked]
        assert sorted(c.id for c in ranked) == sorted(c.id for c in companies)

    @given(scored_companies(), st.integers(min_value=0, max_value=15))
    @settings(max_examples=300)
    def test_top_and_bottom_disjoint_when_list_is_long_enough(self, companies, n):
        top = top_companies(companies, n)
        bottom = bottom_companies(companies, n)
        assert len(top) == min(n, len(companies))
        assert len(bottom) == min(n, len(companies))
        if len(companies) >= 2 * n:
            assert not {c.id for c in top} & {c.id for c in bottom}


# ---------------------------------------------------------------------------
# Run progress
# ---------------------------------------------------------------------------


class TestRunProgressProperties:

    @given(
        st.integers(min_value=1, max_value=8).flatmap(
            lambda n: st.tuples(
                st.just(n),
                st.lists(
                    st.tuples(st.integers(min_value=0, max_value=n - 1), st.booleans()),
                    max_size=25,
                ),
            )
        )
    )
    @settings(max_examples=300)
    def test_progress_is_monotonic_and_bounded(self, case):
        """Any sequence of results, failures and duplicates only moves progress forward."""
        n, events = case
        run = RunRecord(
            id="run-p",
            name="P",
            config_id="c",
            config_name="C",
            scale="1-10",
            company_count=n,
            intake=[CompanyEntry(id=f"company-{i}", name=f"Company {i}") for i in range(n)],
        )
        machine = RunStateMachine(run)
        last_scored, last_progress = 0, 0.0

        for index, succeeded in events:
            if succeeded:
                machine.record_result(
                    CompanyResult(id=f"company-{index}", name="x", total_score=5.0, run_id="run-p", config_id="c")
                )
            else:
                machine.record_company_failure(f"company-{index}")

            assert run.companies_scored >= last_scored
            assert run_progress(run) >= last_progress
            assert run.companies_scored <= run.company_count
            assert len(run.companies) == run.companies_scored
            last_scored, last_progress = run.companies_scored, run_progress(run)
