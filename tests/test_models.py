# tests/test_models.py

"""
Model Validation Tests - Tests for Pydantic models and enumerations
"""

import pytest
from pydantic import ValidationError

from app.models.enumerations import Confidence, RunStatus, ScoreLevel, ScoringScale, WeightAllocation
from app.models.run import (
    CompanyResult,
    CriterionScore,
    FailureReport,
    RunCreate,
    RunRecord,
    RunSummary,
)
from app.models.scoring_config import Criterion, ScoringConfig, ScoringConfigCreate



# ENUMERATION TESTS


class TestEnumerations:
    """Tests for the closed value sets."""

    def test_scales(self):
        assert [s.value for s in ScoringScale] == ["1-5", "1-10", "1-100"]

    def test_run_statuses(self):
        assert [s.value for s in RunStatus] == ["pending", "running", "completed", "failed"]

    def test_confidence_and_levels(self):
        assert {c.value for c in Confidence} == {"high", "medium", "low"}
        assert {l.value for l in ScoreLevel} == {"high", "mid", "low"}
        assert {w.value for w in WeightAllocation} == {"under", "exact", "over"}



# SCORING CONFIG MODEL TESTS


class TestScoringConfigModels:
    """Tests for Criterion / ScoringConfig payloads."""

    def test_accepts_camel_case_input(self):
        config = ScoringConfigCreate.model_validate({
            "name": "X",
            "criteria": [{"id": "a", "name": "A", "weight": 100, "researchGuidance": "g"}],
            "evaluationPrompt": "p",
            "isDefault": True,
        })
        assert config.criteria[0].research_guidance == "g"
        assert config.evaluation_prompt == "p"
        assert config.is_default is True

    def test_accepts_snake_case_input(self):
        config = ScoringConfigCreate(name="X", evaluation_prompt="p", is_default=True)
        assert config.evaluation_prompt == "p"

    def test_dumps_camel_case(self):
        config = ScoringConfig(id="c1", name="X", criteria=[Criterion(id="a", name="A", weight=100)])
        data = config.model_dump(by_alias=True)
        assert "evaluationPrompt" in data
        assert "isDefault" in data
        assert "createdAt" in data
        assert "researchGuidance" in data["criteria"][0]

    def test_defaults(self):
        config = ScoringConfigCreate()
        assert config.scale == "1-10"
        assert config.criteria == []
        assert config.is_default is False

    def test_criterion_id_required(self):
        with pytest.raises(ValidationError):
            Criterion(id="", name="A")

    def test_criterion_weight_must_be_integer(self):
        with pytest.raises(ValidationError):
            Criterion(id="a", name="A", weight=12.5)

    def test_scale_is_free_text(self):
        """Unknown scales are accepted; validation warns about them."""
        config = ScoringConfigCreate(name="X", scale="0-7")
        assert config.scale == "0-7"



# RUN MODEL TESTS


class TestRunModels:
    """Tests for run records, worker reports and requests."""

    def test_criterion_score_is_frozen(self):
        cs = CriterionScore(criterion_id="a", score=5)
        with pytest.raises(ValidationError):
            cs.score = 6

    def test_criterion_score_default_confidence(self):
        assert CriterionScore(criterion_id="a", score=5).confidence == Confidence.MEDIUM

    def test_company_result_is_frozen(self):
        result = CompanyResult(id="c", name="C", total_score=5.0, run_id="r", config_id="k")
        with pytest.raises(ValidationError):
            result.total_score = 9.0

    def test_run_record_defaults(self):
        run = RunRecord(id="r", name="R", config_id="k", config_name="K", scale="1-10", company_count=3)
        assert run.status == RunStatus.PENDING
        assert run.companies_scored == 0
        assert run.companies == []
        assert run.failed_company_ids == []

    def test_run_record_rejects_negative_count(self):
        with pytest.raises(ValidationError):
            RunRecord(id="r", name="R", config_id="k", config_name="K", scale="1-10", company_count=-1)

    def test_run_create_requires_name(self):
        with pytest.raises(ValidationError):
            RunCreate(name="", config_id="config-default")

    def test_run_create_camel_case(self):
        payload = RunCreate.model_validate({"name": "Q1", "configId": "k", "companyNames": ["A"]})
        assert payload.config_id == "k"
        assert payload.company_names == ["A"]

    def test_failure_reason_length(self):
        with pytest.raises(ValidationError):
            FailureReport(reason="x" * 2001)

    def test_summary_dumps_camel_case(self):
        summary = RunSummary(
            id="r", name="R", config_id="k", config_name="K", date="2025-01-01T00:00:00Z",
            company_count=2, companies_scored=1, status=RunStatus.RUNNING,
            average_score=6.5, scale="1-10", max_score=10,
        )
        data = summary.model_dump(by_alias=True)
        assert data["companiesScored"] == 1
        assert data["averageScore"] == 6.5
        assert "companies" not in data
