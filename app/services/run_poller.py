"""
Run Poller - Company Scoring Platform
app/services/run_poller.py

HTTP client side of the polling policy: fetch a run's status view until the
server stops asking for another poll (pollAfterSeconds is null once the run
is completed or failed).
"""

import time
from typing import Callable, Optional

import httpx
import structlog

from app.models.run import RunStatusView

logger = structlog.get_logger(__name__)


class RunPollTimeout(Exception):
    """The run was still active when the caller's deadline passed."""

    def __init__(self, run_id: str, last: RunStatusView):
        self.run_id = run_id
        self.last = last
        super().__init__(f"Run {run_id} still {last.status.value} after polling deadline")


class RunPoller:
    """Polls GET {api_prefix}/runs/{id}/status on a scoring service."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "/api",
        client: Optional[httpx.Client] = None,
        timeout: float = 5.0,
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def fetch_status(self, run_id: str) -> RunStatusView:
        resp = self.client.get(f"{self.api_prefix}/runs/{run_id}/status")
        resp.raise_for_status()
        return RunStatusView.model_validate(resp.json())

    def wait_for_run(
        self,
        run_id: str,
        timeout_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_update: Optional[Callable[[RunStatusView], None]] = None,
    ) -> RunStatusView:
        """
        Block until the run is terminal and return its final status view.

        Raises:
            RunPollTimeout: timeout_seconds elapsed first
            httpx.HTTPStatusError: the service answered with an error (e.g. 404)
        """
        deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        while True:
            view = self.fetch_status(run_id)
            if on_update:
                on_update(view)
            if view.poll_after_seconds is None:
                logger.info("run_poll_finished", run_id=run_id, status=view.status.value)
                return view
            if deadline is not None and time.monotonic() + view.poll_after_seconds > deadline:
                raise RunPollTimeout(run_id, view)
            logger.debug("run_poll_waiting", run_id=run_id, progress=view.progress)
            sleep(view.poll_after_seconds)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "RunPoller":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
