"""
Evaluation Worker - Company Scoring Platform
app/services/evaluation_worker.py

The evaluation worker researches one company against a rubric and reports
per-criterion scores. Real workers live outside this service and talk to the
run endpoints; `MockEvaluationWorker` produces deterministic demo results so
the dashboard can be exercised locally (EVALUATION_WORKER=mock).

`run_evaluation` drives a worker over a run's intake as a background task,
one company at a time, reporting through RunService exactly like an external
worker would.
"""

import asyncio
import math
import re
import zlib
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import structlog

from app.core.exceptions import InvalidCompanyReportException, InvalidRunTransitionException
from app.models.enumerations import Confidence, ScoreLevel
from app.models.run import CompanyEntry, CompanyResultReport, CriterionScore
from app.models.scoring_config import ScoringConfig
from app.scoring.aggregator import get_score_level
from app.scoring.run_state import is_terminal
from app.scoring.utils import get_max_score
from app.services.run_service import RunService
from app.shutdown import is_shutting_down, shutdown_reason

logger = structlog.get_logger(__name__)

SHUTDOWN_REASON = "Service shut down before evaluation finished"


class EvaluationAborted(Exception):
    """The worker cannot continue with the run at all (run-level failure)."""


@dataclass
class EvaluationOutcome:
    criterion_scores: List[CriterionScore] = field(default_factory=list)
    research_report: str = ""
    sources: List[str] = field(default_factory=list)

    def to_report(self) -> CompanyResultReport:
        return CompanyResultReport(
            criterion_scores=self.criterion_scores,
            research_report=self.research_report,
            sources=self.sources,
        )


class EvaluationWorker(Protocol):
    """
    Evaluates one company against one rubric.

    Raise any exception to mark just that company as failed, or
    EvaluationAborted to fail the whole run.
    """

    def evaluate(self, company: CompanyEntry, config: ScoringConfig) -> EvaluationOutcome:
        ...


# =============================================================================
# Mock worker
# =============================================================================

REASONINGS = {
    ScoreLevel.HIGH: [
        "Strong indicators of market leadership with consistent performance metrics.",
        "Demonstrates robust fundamentals and competitive advantages in this area.",
        "Above-average performance supported by solid evidence and market data.",
    ],
    ScoreLevel.MID: [
        "Moderate performance with some areas showing room for growth.",
        "Average positioning with a balanced mix of strengths and weaknesses.",
        "Mixed signals observed; further monitoring recommended.",
    ],
    ScoreLevel.LOW: [
        "Below expectations with notable challenges in this dimension.",
        "Limited evidence of competitive strength; improvement needed.",
        "Concerning indicators suggest elevated risk in this area.",
    ],
}

CONFIDENCES = [Confidence.HIGH, Confidence.MEDIUM, Confidence.LOW]

REPORT_TEMPLATE = """## Company Overview

{name} is an enterprise technology company providing innovative solutions in the B2B software space. The company has established a presence in multiple market segments.

## Market Analysis

The company operates in a competitive landscape with several established players and emerging challengers. Market dynamics suggest continued growth potential with increasing enterprise adoption of cloud-native solutions.

## Financial Summary

Based on available information, the company demonstrates a financial profile consistent with its stage and market position. Key metrics indicate a trajectory aligned with industry benchmarks for companies of similar scale.

## Product & Technology

The product portfolio showcases a modern technology stack with emphasis on scalability and user experience. Integration capabilities and API-first architecture are notable strengths that position the company well for enterprise sales.

## Leadership

The executive team brings a combination of industry experience and entrepreneurial background. Recent strategic hires suggest investment in growth and operational excellence across key functions."""


def seeded_random(seed: int) -> float:
    """Deterministic pseudo-random value in [0, 1)."""
    x = math.sin(seed + 1) * 10000
    return x - math.floor(x)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def generate_score(company_index: int, criterion_index: int, max_score: int) -> int:
    """Demo score in [1, max_score], stable for a given position."""
    r = seeded_random(company_index * 7 + criterion_index * 13 + 42)
    return max(1, min(max_score, _round_half_up(r * (max_score - 2) + 2)))


def company_slug(name: str) -> str:
    return re.sub(r"-+", "-", re.sub(r"[^a-z0-9]", "-", name.lower()))


def company_index(company: CompanyEntry) -> int:
    """Intake position from a `company-<n>` id; a name hash otherwise."""
    _, _, suffix = company.id.rpartition("-")
    if suffix.isdigit():
        return int(suffix)
    return zlib.crc32(company.name.encode("utf-8")) % 1000


class MockEvaluationWorker:
    """Deterministic stand-in for the research worker."""

    def evaluate(self, company: CompanyEntry, config: ScoringConfig) -> EvaluationOutcome:
        max_score = get_max_score(config.scale)
        i = company_index(company)

        scores = []
        for j, criterion in enumerate(config.criteria):
            score = generate_score(i, j, max_score)
            templates = REASONINGS[get_score_level(score, max_score)]
            scores.append(
                CriterionScore(
                    criterion_id=criterion.id,
                    criterion_name=criterion.name,
                    score=score,
                    reasoning=templates[math.floor(seeded_random(i * 11 + j * 3) * len(templates))],
                    confidence=CONFIDENCES[math.floor(seeded_random(i * 5 + j * 9 + 7) * 3)],
                )
            )

        slug = company_slug(company.name)
        return EvaluationOutcome(
            criterion_scores=scores,
            research_report=REPORT_TEMPLATE.format(name=company.name),
            sources=[
                f"https://www.crunchbase.com/organization/{slug}",
                f"https://www.linkedin.com/company/{slug}",
                f"https://www.glassdoor.com/Overview/{slug}",
            ],
        )


# =============================================================================
# Background runner
# =============================================================================

async def run_evaluation(run_id: str, service: RunService, worker: EvaluationWorker, delay_seconds: float = 0.0) -> None:
    """
    Background task: evaluate every intake company of a run in order.

    Stops (and fails the run) if the app starts shutting down, and stops
    without touching the run once it has been closed from outside. Companies
    that already have an outcome are skipped so a restarted task does not
    re-score.
    """
    run = service.get_run(run_id)
    if is_terminal(run.status):
        logger.info("evaluation_skipped", run_id=run_id, status=run.status.value)
        return

    run = service.start_run(run_id)
    config = service.config_snapshot(run)
    done = {c.id for c in run.companies} | set(run.failed_company_ids)
    logger.info("evaluation_started", run_id=run_id, companies=len(run.intake))

    for position, company in enumerate(run.intake, start=1):
        if company.id in done:
            continue

        if is_shutting_down():
            logger.warning(
                "evaluation_interrupted",
                run_id=run_id,
                at=position,
                total=len(run.intake),
                reason=shutdown_reason(),
            )
            service.report_run_failure(run_id, SHUTDOWN_REASON)
            return

        status = service.get_run(run_id).status
        if is_terminal(status):
            logger.info("evaluation_stopped", run_id=run_id, at=position, status=status.value)
            return

        try:
            outcome = await asyncio.to_thread(worker.evaluate, company, config)
        except EvaluationAborted as e:
            logger.error("evaluation_aborted", run_id=run_id, company_id=company.id, error=str(e))
            service.report_run_failure(run_id, str(e))
            return
        except Exception as e:
            logger.error("company_evaluation_error", run_id=run_id, company_id=company.id, error=str(e))
            if not _record_failure(service, run_id, company.id, str(e)):
                return
            continue

        try:
            service.report_company_result(run_id, company.id, outcome.to_report())
        except InvalidCompanyReportException as e:
            logger.warning("company_report_rejected", run_id=run_id, company_id=company.id, error=e.message)
            if not _record_failure(service, run_id, company.id, e.message):
                return
        except InvalidRunTransitionException as e:
            logger.info("evaluation_stopped", run_id=run_id, at=position, status=e.status)
            return

        if delay_seconds:
            await asyncio.sleep(delay_seconds)

    logger.info("evaluation_finished", run_id=run_id)


def _record_failure(service: RunService, run_id: str, company_id: str, reason: str) -> bool:
    """Mark one company failed; False if the run was closed in the meantime."""
    try:
        service.report_company_failure(run_id, company_id, reason)
    except InvalidRunTransitionException as e:
        logger.info("evaluation_stopped", run_id=run_id, company_id=company_id, status=e.status)
        return False
    return True


def get_evaluation_worker(kind: str) -> Optional[EvaluationWorker]:
    """Worker for the EVALUATION_WORKER setting; None means reports come from outside."""
    if kind == "mock":
        return MockEvaluationWorker()
    return None
