"""Job run execution and monitoring helpers.

Caller-side helpers built from single client calls: starting several jobs at
once and polling a run until it reaches a terminal state. They are
synchronous and rely on an adapter to talk to Metronome, keeping concurrency
and polling behavior explicit. Failures propagate; nothing is retried.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

from metronomeops.core.models import JobStatus, RunStatus


class JobRunsAdapter(Protocol):
    """Interface for starting runs and querying their status."""

    def start_run(self, job_id: str) -> JobStatus:
        """Start a run of a job and return its initial status."""
        ...

    def run_status(self, job_id: str, run_id: str) -> JobStatus:
        """Return the current status of a run."""
        ...


def start_jobs_parallel(
    adapter: JobRunsAdapter,
    job_ids: list[str],
    max_parallel: int,
) -> list[JobStatus]:
    """
    Start a run for each job, up to ``max_parallel`` at a time.

    Args:
        adapter: Adapter used to start runs.
        job_ids: Ids of the jobs to start.
        max_parallel: Maximum number of start requests in flight.

    Returns:
        The started runs. The order is not guaranteed.
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")
    if not job_ids:
        return []

    runs: list[JobStatus] = []

    with ThreadPoolExecutor(max_workers=max_parallel) as pool:
        futures = [pool.submit(adapter.start_run, job_id) for job_id in job_ids]

        for f in as_completed(futures):
            runs.append(f.result())

    return runs


def wait_for_run(
    adapter: JobRunsAdapter,
    job_id: str,
    run_id: str,
    poll_interval: float = 5,
) -> RunStatus:
    """
    Block until a run reaches a terminal state (SUCCESS or FAILED).

    Args:
        adapter: Adapter used to query run status.
        job_id: Job the run belongs to.
        run_id: Run to monitor.
        poll_interval: Seconds to wait between status checks.
    """
    while True:
        status = adapter.run_status(job_id, run_id).run_status
        if status.is_terminal:
            return status

        time.sleep(poll_interval)
