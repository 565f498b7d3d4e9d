from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import httpx

from metronomeops.core.config import Config
from metronomeops.core.errors import DecodeError, ServiceError
from metronomeops.core.models import Job, JobStatus, Schedule
from metronomeops.core.results import Opaque, RawPayload, StatusText
from metronomeops.core.transport import ApiResponse, HttpTransport, QueryParams

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_JOBS = "/v1/jobs"
API_JOB = "/v1/jobs/{job_id}"
API_JOB_RUNS = "/v1/jobs/{job_id}/runs"
API_JOB_RUN = "/v1/jobs/{job_id}/runs/{run_id}"
API_JOB_RUN_STOP = "/v1/jobs/{job_id}/runs/{run_id}/action/stop"
API_JOB_SCHEDULES = "/v1/jobs/{job_id}/schedules"
API_JOB_SCHEDULE = "/v1/jobs/{job_id}/schedules/{schedule_id}"
API_METRICS = "/v1/metrics"
API_PING = "/v1/ping"

EMBED_JOB = ("historySummary", "activeRuns", "schedules")
EMBED_JOB_LIST = ("historySummary", "activeRuns")
EMBED_JOB_HISTORY = ("history", "historySummary", "activeRuns", "schedules")


def _path(template: str, **ids: str) -> str:
    return template.format(**{k: quote(str(v), safe="") for k, v in ids.items()})


def _epoch_millis(since: int | datetime) -> int:
    """Milliseconds since the epoch; naive datetimes are taken to be UTC."""
    if isinstance(since, datetime):
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        return int(since.timestamp() * 1000)
    return int(since)


def _update_message(what: str, exc: ServiceError) -> str:
    """Combine an update failure with the outcome of decoding its body."""
    try:
        detail = json.loads(exc.body)
    except ValueError as decode_exc:
        return f"{what} update error {exc}\n\tand {decode_exc}"
    return f"{what} update error {exc}\n{detail}"


class MetronomeClient:
    """
    Adapter around the Metronome REST API.

    Every method performs exactly one request and either returns a decoded
    result or raises one of the errors from ``metronomeops.core.errors``.
    The client keeps no state between calls apart from the pooled HTTP
    connection and is safe to share between threads. Nothing is retried;
    creating jobs and starting or stopping runs are not idempotent.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        """Create a client for the configured Metronome service."""
        self.config = config or Config()
        self.http = HttpTransport(self.config, transport=transport)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> MetronomeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # decoding

    @staticmethod
    def _decode(
        response: ApiResponse, decoder: Callable[[Any], T], what: str
    ) -> T:
        data = response.json()
        try:
            return decoder(data)
        except (ValueError, KeyError, TypeError) as exc:
            raise DecodeError(
                f"Unexpected {what} payload: {exc!r}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    @classmethod
    def _decode_list(
        cls, response: ApiResponse, decoder: Callable[[Any], T], what: str
    ) -> list[T]:
        def _items(data: Any) -> list[T]:
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            return [decoder(item) for item in data]

        return cls._decode(response, _items, what)

    @staticmethod
    def _opaque(response: ApiResponse) -> Opaque:
        if response.is_empty:
            return StatusText(status_code=response.status_code, text=response.reason)
        return RawPayload(status_code=response.status_code, data=response.json())

    def _get(self, path: str, params: QueryParams | None = None) -> ApiResponse:
        return self.http.request("GET", path, params=params)

    def _update(
        self,
        path: str,
        body: dict[str, Any],
        decoder: Callable[[Any], T],
        what: str,
        fallback: T,
    ) -> T:
        try:
            response = self.http.request("PUT", path, body=body)
        except ServiceError as exc:
            raise ServiceError(
                exc.status_code, exc.body, _update_message(what, exc)
            ) from exc
        if response.is_empty:
            return fallback
        return self._decode(response, decoder, what)

    # jobs

    def create_job(self, job: Job) -> Job:
        """POST /v1/jobs"""
        response = self.http.request("POST", API_JOBS, body=job.to_dict())
        return self._decode(response, Job.from_dict, "job")

    def get_job(self, job_id: str) -> Job:
        """GET /v1/jobs/{job_id} with history summary, active runs and schedules."""
        response = self._get(_path(API_JOB, job_id=job_id), {"embed": EMBED_JOB})
        return self._decode(response, Job.from_dict, "job")

    def list_jobs(self) -> list[Job]:
        """GET /v1/jobs with history summary and active runs."""
        response = self._get(API_JOBS, {"embed": EMBED_JOB_LIST})
        return self._decode_list(response, Job.from_dict, "job list")

    def update_job(self, job_id: str, job: Job) -> Job:
        """PUT /v1/jobs/{job_id}"""
        return self._update(
            _path(API_JOB, job_id=job_id), job.to_dict(), Job.from_dict, "Job", job
        )

    def delete_job(self, job_id: str) -> Job | StatusText:
        """DELETE /v1/jobs/{job_id}; an empty reply yields the status text."""
        response = self.http.request("DELETE", _path(API_JOB, job_id=job_id))
        if response.is_empty:
            return StatusText(status_code=response.status_code, text=response.reason)
        return self._decode(response, Job.from_dict, "job")

    # runs

    def list_runs_since(self, job_id: str, since: int | datetime) -> Job:
        """
        Return the job with its run history since a point in time.

        The history is only reachable through GET /v1/jobs/{job_id} with
        the ``_timestamp`` parameter (milliseconds since the epoch).
        """
        params = {
            "_timestamp": str(_epoch_millis(since)),
            "embed": EMBED_JOB_HISTORY,
        }
        response = self._get(_path(API_JOB, job_id=job_id), params)
        return self._decode(response, Job.from_dict, "job")

    def list_active_runs(self, job_id: str) -> list[JobStatus]:
        """GET /v1/jobs/{job_id}/runs"""
        response = self._get(_path(API_JOB_RUNS, job_id=job_id))
        return self._decode_list(response, JobStatus.from_dict, "run list")

    def start_run(self, job_id: str) -> JobStatus:
        """POST /v1/jobs/{job_id}/runs"""
        response = self.http.request("POST", _path(API_JOB_RUNS, job_id=job_id))
        return self._decode(response, JobStatus.from_dict, "run")

    def run_status(self, job_id: str, run_id: str) -> JobStatus:
        """GET /v1/jobs/{job_id}/runs/{run_id}"""
        response = self._get(_path(API_JOB_RUN, job_id=job_id, run_id=run_id))
        return self._decode(response, JobStatus.from_dict, "run")

    def stop_run(self, job_id: str, run_id: str) -> Opaque:
        """POST /v1/jobs/{job_id}/runs/{run_id}/action/stop"""
        response = self.http.request(
            "POST", _path(API_JOB_RUN_STOP, job_id=job_id, run_id=run_id)
        )
        return self._opaque(response)

    # schedules

    def create_schedule(self, job_id: str, schedule: Schedule) -> Schedule:
        """POST /v1/jobs/{job_id}/schedules"""
        logger.debug("Creating schedule %s for job %s", schedule.id, job_id)
        response = self.http.request(
            "POST", _path(API_JOB_SCHEDULES, job_id=job_id), body=schedule.to_dict()
        )
        return self._decode(response, Schedule.from_dict, "schedule")

    def get_schedule(self, job_id: str, schedule_id: str) -> Schedule:
        """GET /v1/jobs/{job_id}/schedules/{schedule_id}"""
        response = self._get(
            _path(API_JOB_SCHEDULE, job_id=job_id, schedule_id=schedule_id)
        )
        return self._decode(response, Schedule.from_dict, "schedule")

    def list_schedules(self, job_id: str) -> list[Schedule]:
        """GET /v1/jobs/{job_id}/schedules"""
        response = self._get(_path(API_JOB_SCHEDULES, job_id=job_id))
        return self._decode_list(response, Schedule.from_dict, "schedule list")

    def update_schedule(
        self, job_id: str, schedule_id: str, schedule: Schedule
    ) -> Schedule:
        """PUT /v1/jobs/{job_id}/schedules/{schedule_id}"""
        return self._update(
            _path(API_JOB_SCHEDULE, job_id=job_id, schedule_id=schedule_id),
            schedule.to_dict(),
            Schedule.from_dict,
            "JobSchedule",
            schedule,
        )

    def delete_schedule(self, job_id: str, schedule_id: str) -> Opaque:
        """DELETE /v1/jobs/{job_id}/schedules/{schedule_id}"""
        response = self.http.request(
            "DELETE", _path(API_JOB_SCHEDULE, job_id=job_id, schedule_id=schedule_id)
        )
        return self._opaque(response)

    # service

    def metrics(self) -> Opaque:
        """GET /v1/metrics"""
        return self._opaque(self._get(API_METRICS))

    def ping(self) -> str:
        """GET /v1/ping; returns the plain-text reply (normally ``pong``)."""
        response = self._get(API_PING)
        if response.is_empty:
            return response.reason
        if "json" in response.content_type:
            return str(response.json())
        return response.text.strip()
