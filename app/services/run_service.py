"""
Run Service - Company Scoring Platform
app/services/run_service.py

Orchestrates the run lifecycle between the stores, the aggregator and the
run state machine:

    create_run  ->  start_run  ->  report_company_result / report_company_failure
                                   ...
                                -> completed (every company accounted for)
                                -> failed    (report_run_failure, empty intake)

Reads (run detail, status, stats, analytics) work on repository snapshots and
never block the worker.
"""

import structlog
import uuid
from typing import Iterable, List, Optional

from app.core.exceptions import EntityNotFoundException, InvalidCompanyReportException
from app.models.analytics import (
    DistributionBucketResponse,
    DistributionResponse,
    RadarPointResponse,
    RadarResponse,
    RankedCompany,
    RankingResponse,
    ScatterPointResponse,
    ScatterResponse,
)
from app.models.run import (
    CompanyDetail,
    CompanyEntry,
    CompanyResult,
    CompanyResultReport,
    CriterionScore,
    CriterionScoreDetail,
    RunDetail,
    RunRecord,
    RunStatusView,
    RunSummary,
    StatsResponse,
)
from app.models.scoring_config import ScoringConfig
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository
from app.scoring import analytics
from app.scoring.aggregator import aggregate, get_score_level
from app.scoring.run_state import (
    RunStateMachine,
    is_active,
    next_poll_interval,
    results_are_final,
    run_average_score,
    run_progress,
)
from app.scoring.utils import get_max_score, mean, round1

logger = structlog.get_logger(__name__)

EMPTY_INTAKE_REASON = "No companies found in upload"


def _new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:12]}"


class RunService:
    """Run creation, worker reports, and read-side projections."""

    def __init__(
        self,
        config_repo: ConfigRepository,
        run_repo: RunRepository,
        poll_interval_seconds: float = 3.0,
        radar_limit: int = analytics.DEFAULT_RADAR_LIMIT,
    ):
        self.config_repo = config_repo
        self.run_repo = run_repo
        self.poll_interval_seconds = poll_interval_seconds
        self.radar_limit = radar_limit

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_run(self, name: str, config_id: str, company_names: Iterable[str]) -> RunRecord:
        """
        Create a pending run over an ordered list of company names.

        The config's rubric is copied onto the run so later edits to the
        config do not change how this run is scored. An empty intake still
        creates the run, which then fails immediately.

        Raises:
            EntityNotFoundException: config_id does not exist
        """
        config = self.config_repo.get_or_raise(config_id)
        names = list(company_names)

        record = RunRecord(
            id=_new_run_id(),
            name=name,
            config_id=config.id,
            config_name=config.name,
            scale=config.scale,
            criteria=config.criteria,
            evaluation_prompt=config.evaluation_prompt,
            company_count=len(names),
            intake=[CompanyEntry(id=f"company-{i}", name=n) for i, n in enumerate(names)],
        )
        self.run_repo.add(record)
        logger.info(
            "run_created",
            run_id=record.id,
            config_id=config.id,
            company_count=record.company_count,
        )

        if not names:
            record = self.run_repo.mutate(record.id, lambda r: RunStateMachine(r).fail(EMPTY_INTAKE_REASON))
        return record

    def start_run(self, run_id: str) -> RunRecord:
        """Worker picked the run up: pending -> running (no-op while running)."""
        return self.run_repo.mutate(run_id, lambda r: RunStateMachine(r).start())

    def _validate_report(self, run: RunRecord, report: CompanyResultReport) -> List[CriterionScore]:
        """Check a worker report against the run's rubric; fill in criterion names."""
        max_score = get_max_score(run.scale)
        names = {c.id: c.name for c in run.criteria}
        seen = set()
        scores = []
        for cs in report.criterion_scores:
            if cs.criterion_id not in names:
                raise InvalidCompanyReportException(f"Unknown criterion '{cs.criterion_id}'")
            if cs.criterion_id in seen:
                raise InvalidCompanyReportException(f"Duplicate score for criterion '{cs.criterion_id}'")
            if not 1 <= cs.score <= max_score:
                raise InvalidCompanyReportException(
                    f"Score {cs.score} for criterion '{cs.criterion_id}' is outside 1-{max_score}"
                )
            seen.add(cs.criterion_id)
            if not cs.criterion_name:
                cs = cs.model_copy(update={"criterion_name": names[cs.criterion_id]})
            scores.append(cs)
        return scores

    def report_company_result(self, run_id: str, company_id: str, report: CompanyResultReport) -> CompanyResult:
        """
        Record one company's evaluation and compute its total on arrival.

        A repeated report for a company that already has an outcome changes
        nothing; the stored result (if any) is returned.

        Raises:
            EntityNotFoundException: unknown run or company
            InvalidCompanyReportException: scores do not fit the rubric
            InvalidRunTransitionException: the run is already terminal
        """

        def apply(run: RunRecord) -> None:
            entry = next((e for e in run.intake if e.id == company_id), None)
            if entry is None:
                raise EntityNotFoundException("Company", company_id)
            scores = self._validate_report(run, report)
            result = CompanyResult(
                id=entry.id,
                name=entry.name,
                total_score=float(aggregate(scores, run.criteria)),
                criterion_scores=scores,
                research_report=report.research_report,
                sources=report.sources,
                run_id=run.id,
                config_id=run.config_id,
            )
            RunStateMachine(run).record_result(result)

        run = self.run_repo.mutate(run_id, apply)
        stored = next((c for c in run.companies if c.id == company_id), None)
        if stored is None:
            raise InvalidCompanyReportException(f"Company {company_id} was already reported as failed")
        return stored

    def report_company_failure(self, run_id: str, company_id: str, reason: str = "") -> RunRecord:
        """One company could not be evaluated; the run carries on."""
        return self.run_repo.mutate(
            run_id, lambda r: RunStateMachine(r).record_company_failure(company_id, reason)
        )

    def report_run_failure(self, run_id: str, reason: str = "") -> RunRecord:
        """The worker cannot proceed at all: the run becomes terminally failed."""
        return self.run_repo.mutate(run_id, lambda r: RunStateMachine(r).fail(reason))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_run(self, run_id: str) -> RunRecord:
        return self.run_repo.get_or_raise(run_id)

    def list_runs(self) -> List[RunRecord]:
        return self.run_repo.get_all()

    def config_snapshot(self, run: RunRecord) -> ScoringConfig:
        """The rubric a run is scored against, as captured at creation."""
        return ScoringConfig(
            id=run.config_id,
            name=run.config_name,
            scale=run.scale,
            criteria=run.criteria,
            evaluation_prompt=run.evaluation_prompt,
            created_at=run.date,
        )

    def to_summary(self, run: RunRecord) -> RunSummary:
        return RunSummary(
            id=run.id,
            name=run.name,
            config_id=run.config_id,
            config_name=run.config_name,
            date=run.date,
            company_count=run.company_count,
            companies_scored=run.companies_scored,
            companies_failed=len(run.failed_company_ids),
            status=run.status,
            average_score=float(run_average_score(run)),
            scale=run.scale,
            max_score=get_max_score(run.scale),
            failure_reason=run.failure_reason,
        )

    def to_detail(self, run: RunRecord) -> RunDetail:
        return RunDetail(**self.to_summary(run).model_dump(), companies=run.companies)

    def get_status(self, run_id: str) -> RunStatusView:
        run = self.get_run(run_id)
        return RunStatusView(
            id=run.id,
            status=run.status,
            company_count=run.company_count,
            companies_scored=run.companies_scored,
            companies_failed=len(run.failed_company_ids),
            progress=run_progress(run),
            poll_after_seconds=next_poll_interval(run.status, self.poll_interval_seconds),
        )

    def get_company(self, run_id: str, company_id: str) -> CompanyDetail:
        """
        A scored company with per-criterion levels.

        Raises:
            EntityNotFoundException: unknown run, or the company has no result yet
        """
        run = self.get_run(run_id)
        company = next((c for c in run.companies if c.id == company_id), None)
        if company is None:
            raise EntityNotFoundException("Company", company_id)

        max_score = get_max_score(run.scale)
        return CompanyDetail(
            id=company.id,
            name=company.name,
            run_id=run.id,
            config_id=company.config_id,
            total_score=company.total_score,
            level=get_score_level(company.total_score, max_score),
            max_score=max_score,
            criterion_scores=[
                CriterionScoreDetail(**cs.model_dump(), level=get_score_level(cs.score, max_score))
                for cs in company.criterion_scores
            ],
            research_report=company.research_report,
            sources=company.sources,
            scored_at=company.scored_at,
        )

    def get_stats(self) -> StatsResponse:
        """
        Cross-run rollup.

        `average_score` is the mean of per-run averages over runs that have
        scored anything, so every run weighs the same regardless of how many
        companies it scored.
        """
        runs = self.run_repo.get_all()
        scored_runs = [r for r in runs if r.companies_scored > 0]
        return StatsResponse(
            total_runs=len(runs),
            companies_scored=sum(r.companies_scored for r in runs),
            average_score=float(round1(mean(run_average_score(r) for r in scored_runs))),
            active_runs=sum(1 for r in runs if is_active(r.status)),
        )

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def distribution(self, run_id: str) -> DistributionResponse:
        run = self.get_run(run_id)
        max_score = get_max_score(run.scale)
        buckets = analytics.score_distribution(run.companies, max_score)
        return DistributionResponse(
            run_id=run.id,
            partial=not results_are_final(run.status),
            max_score=max_score,
            bucket_width=analytics.bucket_width(max_score),
            buckets=[
                DistributionBucketResponse(range=b.range, low=b.low, high=b.high, count=b.count)
                for b in buckets
            ],
            total=sum(b.count for b in buckets),
        )

    def ranking(self, run_id: str, limit: int = 10) -> RankingResponse:
        run = self.get_run(run_id)

        def ranked(companies: List[CompanyResult]) -> List[RankedCompany]:
            return [RankedCompany(id=c.id, name=c.name, total_score=c.total_score) for c in companies]

        return RankingResponse(
            run_id=run.id,
            partial=not results_are_final(run.status),
            limit=limit,
            top=ranked(analytics.top_companies(run.companies, limit)),
            bottom=ranked(analytics.bottom_companies(run.companies, limit)),
        )

    def radar(self, run_id: str, company_ids: List[str]) -> RadarResponse:
        """
        Raises:
            RadarSelectionFullException: more companies than the radar allows
        """
        run = self.get_run(run_id)
        selection = analytics.RadarSelection.of(company_ids, self.radar_limit)
        points = analytics.radar_comparison(run.companies, run.criteria, selection)
        return RadarResponse(
            run_id=run.id,
            partial=not results_are_final(run.status),
            max_score=get_max_score(run.scale),
            company_ids=selection.company_ids,
            points=[
                RadarPointResponse(criterion_id=p.criterion_id, criterion=p.criterion, scores=p.scores)
                for p in points
            ],
        )

    def scatter(self, run_id: str, x_criterion_id: Optional[str] = None,
                y_criterion_id: Optional[str] = None) -> ScatterResponse:
        """
        Raises:
            EntityNotFoundException: an axis names a criterion outside the run's rubric
        """
        run = self.get_run(run_id)
        known = {c.id for c in run.criteria}
        for criterion_id in (x_criterion_id, y_criterion_id):
            if criterion_id is not None and criterion_id not in known:
                raise EntityNotFoundException("Criterion", criterion_id)

        projection = analytics.scatter_projection(run.companies, run.criteria, x_criterion_id, y_criterion_id)
        return ScatterResponse(
            run_id=run.id,
            partial=not results_are_final(run.status),
            x_criterion_id=projection.x_criterion_id,
            y_criterion_id=projection.y_criterion_id,
            points=[
                ScatterPointResponse(
                    company_id=p.company_id, name=p.name, x=p.x, y=p.y, total_score=p.total_score
                )
                for p in projection.points
            ],
        )
