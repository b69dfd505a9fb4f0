"""
scoring/run_state.py

Run lifecycle:

    pending ──(first result | worker start)──▶ running ──(all accounted for)──▶ completed
       │                                          │
       └──────────(run-level fatal error)─────────┴──────────────────────────▶ failed

A company is "accounted for" once it is either scored or reported as failed;
per-company failures never fail the run. `completed` and `failed` are terminal.

Progress invariants:
    - companies_scored never decreases and never exceeds company_count
    - `companies` is append-only; recorded results are never replaced
    - at most one outcome per company id; repeated reports are no-ops
"""

import structlog
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, assert_never

from app.core.exceptions import EntityNotFoundException, InvalidRunTransitionException
from app.models.enumerations import RunStatus
from app.models.run import CompanyResult, RunRecord
from app.scoring.aggregator import average_score

logger = structlog.get_logger(__name__)


def is_terminal(status: RunStatus) -> bool:
    match status:
        case RunStatus.PENDING | RunStatus.RUNNING:
            return False
        case RunStatus.COMPLETED | RunStatus.FAILED:
            return True
        case _:
            assert_never(status)


def is_active(status: RunStatus) -> bool:
    """Pending or running runs count as active on the dashboard."""
    return not is_terminal(status)


def results_are_final(status: RunStatus) -> bool:
    """
    Whether analytics over this run can still change.

    A failed run keeps whatever was scored before the failure; no more arrives.
    """
    match status:
        case RunStatus.PENDING | RunStatus.RUNNING:
            return False
        case RunStatus.COMPLETED | RunStatus.FAILED:
            return True
        case _:
            assert_never(status)


def next_poll_interval(status: RunStatus, interval: float) -> Optional[float]:
    """
    Consumer polling policy: keep polling at `interval` until terminal.

    Returns None once the run is completed or failed.
    """
    match status:
        case RunStatus.PENDING | RunStatus.RUNNING:
            return interval
        case RunStatus.COMPLETED | RunStatus.FAILED:
            return None
        case _:
            assert_never(status)


def run_average_score(run: RunRecord) -> Decimal:
    return average_score(c.total_score for c in run.companies)


def run_progress(run: RunRecord) -> float:
    if run.company_count == 0:
        return 1.0 if is_terminal(run.status) else 0.0
    done = run.companies_scored + len(run.failed_company_ids)
    return min(1.0, done / run.company_count)


class RunStateMachine:
    """Applies worker events to a RunRecord in place."""

    def __init__(self, run: RunRecord):
        self.run = run

    @property
    def status(self) -> RunStatus:
        return self.run.status

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _ensure_open(self, action: str) -> None:
        if is_terminal(self.run.status):
            raise InvalidRunTransitionException(self.run.id, self.run.status.value, action)

    def _ensure_known_company(self, company_id: str) -> None:
        if not any(entry.id == company_id for entry in self.run.intake):
            raise EntityNotFoundException("Company", company_id)

    def _is_accounted_for(self, company_id: str) -> bool:
        if company_id in self.run.failed_company_ids:
            return True
        return any(c.id == company_id for c in self.run.companies)

    def start(self) -> bool:
        """
        Worker signalled start. pending -> running; a no-op while running.

        Returns True if the status changed.
        """
        match self.run.status:
            case RunStatus.PENDING:
                self.run.status = RunStatus.RUNNING
                self.run.started_at = self._now()
                logger.info("run_started", run_id=self.run.id)
                return True
            case RunStatus.RUNNING:
                return False
            case RunStatus.COMPLETED | RunStatus.FAILED:
                raise InvalidRunTransitionException(self.run.id, self.run.status.value, "start")
            case _:
                assert_never(self.run.status)

    def record_result(self, result: CompanyResult) -> bool:
        """
        Append a scored company and advance progress.

        Returns False when the company already has an outcome (idempotent upsert).
        """
        self._ensure_known_company(result.id)
        if self._is_accounted_for(result.id):
            logger.warning("company_result_duplicate", run_id=self.run.id, company_id=result.id)
            return False
        self._ensure_open("record a company result")

        if self.run.status is RunStatus.PENDING:
            self.start()

        self.run.companies.append(result)
        self.run.companies_scored += 1
        logger.info(
            "company_result_recorded",
            run_id=self.run.id,
            company_id=result.id,
            total_score=result.total_score,
            companies_scored=self.run.companies_scored,
            company_count=self.run.company_count,
        )
        self._complete_if_done()
        return True

    def record_company_failure(self, company_id: str, reason: str = "") -> bool:
        """
        Mark one company as not evaluable. The run keeps going.

        Returns False when the company already has an outcome.
        """
        self._ensure_known_company(company_id)
        if self._is_accounted_for(company_id):
            return False
        self._ensure_open("record a company failure")

        if self.run.status is RunStatus.PENDING:
            self.start()

        self.run.failed_company_ids.append(company_id)
        logger.warning("company_evaluation_failed", run_id=self.run.id, company_id=company_id, reason=reason)
        self._complete_if_done()
        return True

    def fail(self, reason: str) -> None:
        """Run-level fatal error: terminal `failed`."""
        self._ensure_open("fail")
        self.run.status = RunStatus.FAILED
        self.run.failure_reason = reason or "Evaluation failed"
        self.run.finished_at = self._now()
        logger.error("run_failed", run_id=self.run.id, reason=self.run.failure_reason)

    def _complete_if_done(self) -> None:
        accounted = self.run.companies_scored + len(self.run.failed_company_ids)
        if self.run.company_count > 0 and accounted >= self.run.company_count:
            self.run.status = RunStatus.COMPLETED
            self.run.finished_at = self._now()
            logger.info(
                "run_completed",
                run_id=self.run.id,
                companies_scored=self.run.companies_scored,
                companies_failed=len(self.run.failed_company_ids),
                average_score=float(run_average_score(self.run)),
            )
