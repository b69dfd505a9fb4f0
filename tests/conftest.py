# tests/conftest.py

"""
Pytest Fixtures - Shared test configurations and data for models, engine and APIs

SEED DATA ID REFERENCE:
- Configs: config-default (1-10, 5 x 20), config-saas (1-10, 6 criteria), config-pe (1-100, 4 criteria)
- Run intake ids: company-0 .. company-(n-1) in upload order
"""

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_config_repository, get_evaluation_worker, get_run_repository
from app.main import app
from app.models.run import CompanyResult, CompanyResultReport, CriterionScore
from app.models.scoring_config import Criterion, ScoringConfigCreate
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository
from app.services.run_service import RunService
from app.services.seed import seed_default_configs
from app.shutdown import reset_shutdown


# =============================================================================
# STORE / SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def config_repo():
    """Fresh in-memory config store with the three default rubrics."""
    repo = ConfigRepository()
    seed_default_configs(repo)
    return repo


@pytest.fixture
def run_repo():
    """Fresh in-memory run store."""
    return RunRepository()


@pytest.fixture
def run_service(config_repo, run_repo):
    return RunService(config_repo, run_repo, poll_interval_seconds=3.0)


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(config_repo, run_repo):
    """TestClient wired to the fresh stores; no background worker."""
    app.dependency_overrides[get_config_repository] = lambda: config_repo
    app.dependency_overrides[get_run_repository] = lambda: run_repo
    app.dependency_overrides[get_evaluation_worker] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    reset_shutdown()  # TestClient exit fires the app shutdown event


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def two_criteria():
    """A (60) and B (40) on a 1-10 scale."""
    return [
        Criterion(id="a", name="Alpha", weight=60),
        Criterion(id="b", name="Beta", weight=40),
    ]


@pytest.fixture
def two_criteria_config(two_criteria):
    return ScoringConfigCreate(name="Two Criteria", scale="1-10", criteria=two_criteria)


@pytest.fixture
def default_criteria_ids():
    return ["mp", "fh", "pt", "tl", "gp"]


@pytest.fixture
def sample_config_payload():
    """camelCase body accepted by POST /api/configs."""
    return {
        "name": "Growth Screen",
        "description": "Quick growth-stage screen",
        "scale": "1-10",
        "criteria": [
            {"id": "a", "name": "Alpha", "weight": 60, "researchGuidance": "Look at A"},
            {"id": "b", "name": "Beta", "weight": 40},
        ],
        "evaluationPrompt": "Be concise.",
        "isDefault": False,
    }


def make_report(scores: dict) -> CompanyResultReport:
    """Worker report from {criterion_id: score}."""
    return CompanyResultReport(
        criterion_scores=[CriterionScore(criterion_id=cid, score=s) for cid, s in scores.items()],
        research_report="## Overview",
        sources=["https://example.com"],
    )


def make_company(company_id: str, total: float, scores: dict = None, name: str = None) -> CompanyResult:
    """Scored company for analytics tests."""
    return CompanyResult(
        id=company_id,
        name=name or company_id.upper(),
        total_score=total,
        criterion_scores=[CriterionScore(criterion_id=cid, score=s) for cid, s in (scores or {}).items()],
        run_id="run-test",
        config_id="config-test",
    )


@pytest.fixture
def report_factory():
    return make_report


@pytest.fixture
def company_factory():
    return make_company
