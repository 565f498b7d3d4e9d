import pytest

from metronomeops.core.models import JobStatus, RunStatus
from metronomeops.core.runs import start_jobs_parallel, wait_for_run


class _RunsAdapterStub:
    def __init__(self, statuses: list[str] | None = None):
        self.statuses = list(statuses or [])
        self.polls = 0

    def start_run(self, job_id: str) -> JobStatus:
        return JobStatus(id=f"{job_id}-run", job_id=job_id, status="INITIAL")

    def run_status(self, job_id: str, run_id: str) -> JobStatus:
        self.polls += 1
        return JobStatus(id=run_id, job_id=job_id, status=self.statuses.pop(0))


def test_start_jobs_parallel_rejects_non_positive_parallel():
    with pytest.raises(ValueError, match="max_parallel"):
        start_jobs_parallel(_RunsAdapterStub(), ["a"], 0)


def test_start_jobs_parallel_returns_empty_on_empty_input():
    assert start_jobs_parallel(_RunsAdapterStub(), [], 2) == []


def test_start_jobs_parallel_starts_all_jobs():
    runs = start_jobs_parallel(_RunsAdapterStub(), ["a", "b", "c"], 2)

    assert sorted((r.job_id, r.id) for r in runs) == [
        ("a", "a-run"),
        ("b", "b-run"),
        ("c", "c-run"),
    ]


def test_start_jobs_parallel_propagates_failures():
    class _Failing(_RunsAdapterStub):
        def start_run(self, job_id: str) -> JobStatus:
            raise RuntimeError(f"cannot start {job_id}")

    with pytest.raises(RuntimeError, match="cannot start"):
        start_jobs_parallel(_Failing(), ["a"], 1)


def test_wait_for_run_polls_until_terminal():
    adapter = _RunsAdapterStub(["STARTING", "ACTIVE", "SUCCESS"])

    status = wait_for_run(adapter, "a", "a-run", poll_interval=0)

    assert status is RunStatus.SUCCESS
    assert adapter.polls == 3


def test_wait_for_run_treats_failure_as_terminal():
    adapter = _RunsAdapterStub(["FAILED"])

    assert wait_for_run(adapter, "a", "a-run", poll_interval=0) is RunStatus.FAILED
