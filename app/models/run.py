from pydantic import ConfigDict, Field
from datetime import datetime, timezone
from typing import List, Optional

from app.models.common import CamelModel
from app.models.enumerations import Confidence, RunStatus, ScoreLevel
from app.models.scoring_config import Criterion


class CriterionScore(CamelModel):
    """
    One criterion judgment produced by the evaluation worker. Immutable.
    """

    model_config = ConfigDict(frozen=True)

    criterion_id: str = Field(..., min_length=1)
    criterion_name: str = Field(default="", description="Snapshot of the criterion name")
    score: int = Field(..., description="Integer score within [1, max] of the run's scale")
    reasoning: str = Field(default="")
    confidence: Confidence = Field(default=Confidence.MEDIUM)


class CompanyEntry(CamelModel):
    """
    Intake placeholder: a company queued for evaluation, not yet scored.
    """

    id: str
    name: str


class CompanyResult(CamelModel):
    """
    Scored outcome for one company within one run. Immutable once recorded.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    total_score: float = Field(..., description="Weighted aggregate in the config's scale")
    criterion_scores: List[CriterionScore] = Field(default_factory=list)
    research_report: str = ""
    sources: List[str] = Field(default_factory=list)
    run_id: str
    config_id: str
    scored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RunRecord(CamelModel):
    """
    Store-side representation of a run.

    Keeps the rubric (scale + criteria) captured at creation so totals and
    analytics stay stable when the originating config is edited or deleted.
    """

    id: str
    name: str
    config_id: str
    config_name: str
    scale: str
    criteria: List[Criterion] = Field(default_factory=list)
    evaluation_prompt: str = ""
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    company_count: int = Field(..., ge=0)
    intake: List[CompanyEntry] = Field(default_factory=list)
    companies: List[CompanyResult] = Field(default_factory=list)
    failed_company_ids: List[str] = Field(default_factory=list)
    companies_scored: int = Field(default=0, ge=0)
    status: RunStatus = RunStatus.PENDING
    failure_reason: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


# =============================================================================
# Worker reports
# =============================================================================

class CompanyResultReport(CamelModel):
    """
    Worker -> store: the finished evaluation of one company.
    """

    criterion_scores: List[CriterionScore] = Field(default_factory=list)
    research_report: str = ""
    sources: List[str] = Field(default_factory=list)


class FailureReport(CamelModel):
    """
    Worker -> store: a company or the whole run could not be evaluated.
    """

    reason: str = Field(default="", max_length=2000)


# =============================================================================
# Requests
# =============================================================================

class RunCreate(CamelModel):
    """
    JSON variant of run creation (the dashboard uploads a CSV instead).
    """

    name: str = Field(..., min_length=1, max_length=255)
    config_id: str = Field(..., min_length=1)
    company_names: List[str] = Field(default_factory=list)


# =============================================================================
# Responses
# =============================================================================

class RunSummary(CamelModel):
    """
    Run list item: everything except the per-company results.
    """

    id: str
    name: str
    config_id: str
    config_name: str
    date: datetime
    company_count: int
    companies_scored: int
    companies_failed: int = 0
    status: RunStatus
    average_score: float
    scale: str
    max_score: int
    failure_reason: Optional[str] = None


class RunDetail(RunSummary):
    """
    Full run including scored companies in arrival order.
    """

    companies: List[CompanyResult] = Field(default_factory=list)


class RunStatusView(CamelModel):
    """
    Cheap, side-effect free view for polling consumers.
    """

    id: str
    status: RunStatus
    company_count: int
    companies_scored: int
    companies_failed: int
    progress: float = Field(..., ge=0, le=1)
    poll_after_seconds: Optional[float] = Field(
        default=None,
        description="Seconds until the next poll, or null once the run is terminal"
    )


class CriterionScoreDetail(CriterionScore):
    level: ScoreLevel


class CompanyDetail(CamelModel):
    """
    One company result with score levels against the run's scale.
    """

    id: str
    name: str
    run_id: str
    config_id: str
    total_score: float
    level: ScoreLevel
    max_score: int
    criterion_scores: List[CriterionScoreDetail]
    research_report: str
    sources: List[str]
    scored_at: datetime


class StatsResponse(CamelModel):
    """
    Cross-run rollup for the dashboard header.
    """

    total_runs: int
    companies_scored: int
    average_score: float
    active_runs: int
