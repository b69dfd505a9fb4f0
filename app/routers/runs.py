"""
Run Router - Company Scoring Platform
app/routers/runs.py

Run creation (CSV upload or JSON), run/status/company reads for the dashboard,
and the callback endpoints an evaluation worker reports through.
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.config import settings
from app.core.dependencies import get_evaluation_worker, get_run_service
from app.core.errors import raise_error, raise_for
from app.core.exceptions import RepositoryException
from app.models.run import (
    CompanyDetail,
    CompanyResult,
    CompanyResultReport,
    FailureReport,
    RunCreate,
    RunDetail,
    RunRecord,
    RunStatusView,
    RunSummary,
)
from app.scoring.run_state import is_terminal
from app.services.evaluation_worker import EvaluationWorker, run_evaluation
from app.services.intake import dedupe_names, parse_company_csv
from app.services.run_service import RunService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix=settings.API_PREFIX, tags=["Runs"])
worker_router = APIRouter(prefix=settings.API_PREFIX, tags=["Worker Callbacks"])



#  Helper Functions


async def read_run_request(request: Request) -> RunCreate:
    """
    Accept the dashboard's multipart upload (file, name, config_id) or a JSON
    body {name, configId, companyNames}.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if upload is None or isinstance(upload, str):
            raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR",
                        "A CSV file of company names is required", {"field": "file"})
        try:
            names = parse_company_csv(await upload.read())
        except RepositoryException as e:
            raise_for(e)
        data = {
            "name": form.get("name") or "",
            "config_id": form.get("config_id") or form.get("configId") or "",
            "company_names": names,
        }
    else:
        try:
            data = await request.json()
        except ValueError:
            raise_error(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", "Malformed JSON request body")

    try:
        payload = RunCreate.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    payload.company_names = dedupe_names(payload.company_names)
    return payload


def schedule_evaluation(
    background_tasks: BackgroundTasks,
    run: RunRecord,
    service: RunService,
    worker: Optional[EvaluationWorker],
) -> None:
    if worker is None or is_terminal(run.status):
        return
    background_tasks.add_task(run_evaluation, run.id, service, worker, settings.MOCK_WORKER_DELAY_SECONDS)
    logger.info("evaluation_scheduled", run_id=run.id)



#  Dashboard Routes


@router.post(
    "/runs",
    response_model=RunDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create a run",
    description=(
        "Multipart upload (`file`, `name`, `config_id`) or JSON (`name`, `configId`, "
        "`companyNames`). Names are trimmed and de-duplicated case-insensitively. "
        "An upload with no company names creates a run that is immediately failed."
    ),
)
async def create_run(
    background_tasks: BackgroundTasks,
    payload: RunCreate = Depends(read_run_request),
    service: RunService = Depends(get_run_service),
    worker: Optional[EvaluationWorker] = Depends(get_evaluation_worker),
) -> RunDetail:
    try:
        run = service.create_run(payload.name, payload.config_id, payload.company_names)
    except RepositoryException as e:
        raise_for(e)
    schedule_evaluation(background_tasks, run, service, worker)
    return service.to_detail(run)


@router.get(
    "/runs",
    response_model=List[RunSummary],
    summary="List runs",
    description="Newest first. List items carry progress but not company results.",
)
async def list_runs(service: RunService = Depends(get_run_service)) -> List[RunSummary]:
    return [service.to_summary(r) for r in service.list_runs()]


@router.get("/runs/{run_id}", response_model=RunDetail, summary="Get a run with its company results")
async def get_run(run_id: str, service: RunService = Depends(get_run_service)) -> RunDetail:
    try:
        return service.to_detail(service.get_run(run_id))
    except RepositoryException as e:
        raise_for(e)


@router.get(
    "/runs/{run_id}/status",
    response_model=RunStatusView,
    summary="Poll run progress",
    description="Side-effect free. `pollAfterSeconds` is null once the run is completed or failed.",
)
async def get_run_status(run_id: str, service: RunService = Depends(get_run_service)) -> RunStatusView:
    try:
        return service.get_status(run_id)
    except RepositoryException as e:
        raise_for(e)


@router.get(
    "/runs/{run_id}/companies/{company_id}",
    response_model=CompanyDetail,
    summary="Get one scored company",
)
async def get_company(
    run_id: str,
    company_id: str,
    service: RunService = Depends(get_run_service),
) -> CompanyDetail:
    try:
        return service.get_company(run_id, company_id)
    except RepositoryException as e:
        raise_for(e)



#  Worker Callback Routes


@worker_router.post(
    "/runs/{run_id}/start",
    response_model=RunStatusView,
    summary="Worker picked up the run",
)
async def start_run(run_id: str, service: RunService = Depends(get_run_service)) -> RunStatusView:
    try:
        service.start_run(run_id)
        return service.get_status(run_id)
    except RepositoryException as e:
        raise_for(e)


@worker_router.post(
    "/runs/{run_id}/companies/{company_id}/results",
    response_model=CompanyResult,
    summary="Report one company's evaluation",
    description="The total is computed on arrival. Re-reporting a scored company is a no-op.",
)
async def report_company_result(
    run_id: str,
    company_id: str,
    report: CompanyResultReport,
    service: RunService = Depends(get_run_service),
) -> CompanyResult:
    try:
        return service.report_company_result(run_id, company_id, report)
    except RepositoryException as e:
        raise_for(e)


@worker_router.post(
    "/runs/{run_id}/companies/{company_id}/failure",
    response_model=RunStatusView,
    summary="Report that one company could not be evaluated",
)
async def report_company_failure(
    run_id: str,
    company_id: str,
    report: FailureReport,
    service: RunService = Depends(get_run_service),
) -> RunStatusView:
    try:
        service.report_company_failure(run_id, company_id, report.reason)
        return service.get_status(run_id)
    except RepositoryException as e:
        raise_for(e)


@worker_router.post(
    "/runs/{run_id}/failure",
    response_model=RunStatusView,
    summary="Report a run-level failure",
)
async def report_run_failure(
    run_id: str,
    report: FailureReport,
    service: RunService = Depends(get_run_service),
) -> RunStatusView:
    try:
        service.report_run_failure(run_id, report.reason)
        return service.get_status(run_id)
    except RepositoryException as e:
        raise_for(e)
