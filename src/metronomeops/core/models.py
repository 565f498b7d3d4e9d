"""Core domain models for Metronome jobs, runs and schedules.

This module defines the request and response payload shapes exchanged with
the Metronome API. Models are immutable; a change is expressed by building a
new value (``dataclasses.replace``). Each model knows how to decode itself
from the wire format (``from_dict``) and encode itself back (``to_dict``).

Decoding is tolerant: optional fields that are absent decode to empty or
None. Encoding omits empty optional collections and absent objects instead
of emitting empty containers or nulls. Models a caller builds locally also
offer a validating ``create`` constructor that fails fast with a
ValidationError before any request is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from metronomeops.core.errors import ValidationError, required
from metronomeops.core.values import ContainerPath, MountMode, Operator


def _as_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    """Return payload if it is a JSON object, else raise ValidationError."""
    if not isinstance(payload, Mapping):
        raise ValidationError(f"{what} must be a JSON object")
    return payload


def _as_list(payload: Any, what: str) -> list[Any]:
    """Return payload as a list; None decodes to an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValidationError(f"{what} must be a JSON array")
    return payload


@dataclass(frozen=True)
class Artifact:
    """A URI fetched into the sandbox before the run starts."""

    uri: str
    executable: bool = False
    extract: bool = False
    cache: bool = False

    @classmethod
    def from_dict(cls, payload: Any) -> Artifact:
        data = _as_mapping(payload, "artifact")
        return cls(
            uri=str(data["uri"]),
            executable=bool(data.get("executable", False)),
            extract=bool(data.get("extract", False)),
            cache=bool(data.get("cache", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "executable": self.executable,
            "extract": self.extract,
            "cache": self.cache,
        }


@dataclass(frozen=True)
class Docker:
    """Docker image reference for containerized runs."""

    image: str

    @classmethod
    def create(cls, image: str) -> Docker:
        """Return a Docker reference, rejecting an empty image name."""
        if not image:
            raise required("Docker.image")
        return cls(image=image)

    @classmethod
    def from_dict(cls, payload: Any) -> Docker:
        data = _as_mapping(payload, "docker")
        return cls(image=str(data.get("image", "")))

    def to_dict(self) -> dict[str, Any]:
        return {"image": self.image}


@dataclass(frozen=True)
class Constraint:
    """
    A single placement constraint.

    Attributes:
        attribute: Agent attribute the constraint applies to (e.g. ``rack``).
        operator: How the attribute is compared with ``value``.
        value: Value (or pattern) to compare against.
    """

    attribute: str
    operator: Operator
    value: str = ""

    @classmethod
    def create(
        cls, attribute: str, operator: Operator | str, value: str = ""
    ) -> Constraint:
        """Return a validated constraint; the operator may be a wire token."""
        if not attribute:
            raise required("Constraint.attribute")
        return cls(attribute=attribute, operator=Operator.parse(operator), value=value)

    @classmethod
    def from_dict(cls, payload: Any) -> Constraint:
        data = _as_mapping(payload, "constraint")
        return cls(
            attribute=str(data["attribute"]),
            operator=Operator.parse(data["operator"]),
            value=str(data.get("value", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "attribute": self.attribute,
            "operator": self.operator.render(),
            "value": self.value,
        }


@dataclass(frozen=True)
class Placement:
    """Ordered placement constraints for a run."""

    constraints: tuple[Constraint, ...] = ()

    @classmethod
    def from_dict(cls, payload: Any) -> Placement:
        data = _as_mapping(payload, "placement")
        return cls(
            constraints=tuple(
                Constraint.from_dict(c)
                for c in _as_list(data.get("constraints"), "placement.constraints")
            )
        )

    def to_dict(self) -> dict[str, Any]:
        if not self.constraints:
            return {}
        return {"constraints": [c.to_dict() for c in self.constraints]}


@dataclass(frozen=True)
class Restart:
    """Restart policy applied when a run fails."""

    policy: str
    active_deadline_seconds: int = 0

    @classmethod
    def create(cls, active_deadline_seconds: int, policy: str) -> Restart:
        """Return a validated restart policy."""
        if not policy:
            raise required("Restart.policy")
        return cls(policy=policy, active_deadline_seconds=int(active_deadline_seconds))

    @classmethod
    def from_dict(cls, payload: Any) -> Restart:
        data = _as_mapping(payload, "restart")
        return cls(
            policy=str(data.get("policy", "")),
            active_deadline_seconds=int(data.get("activeDeadlineSeconds", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeDeadlineSeconds": self.active_deadline_seconds,
            "policy": self.policy,
        }


@dataclass(frozen=True)
class Volume:
    """A host path mounted into the container."""

    container_path: ContainerPath
    host_path: str
    mode: MountMode

    @classmethod
    def create(
        cls,
        container_path: ContainerPath | str,
        host_path: str,
        mode: MountMode | str,
    ) -> Volume:
        """Return a validated volume; path and mode may be given as strings."""
        path = ContainerPath.parse(container_path)
        if not host_path:
            raise required("Volume.hostPath")
        return cls(container_path=path, host_path=host_path, mode=MountMode.parse(mode))

    @classmethod
    def from_dict(cls, payload: Any) -> Volume:
        data = _as_mapping(payload, "volume")
        return cls(
            container_path=ContainerPath.parse(data["containerPath"]),
            host_path=str(data.get("hostPath", "")),
            mode=MountMode.parse(data["mode"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "containerPath": str(self.container_path),
            "hostPath": self.host_path,
            "mode": self.mode.render(),
        }


@dataclass(frozen=True)
class Run:
    """
    Execution specification of a job: command, container, resources, volumes.

    ``cpus``, ``mem`` (MiB) and ``disk`` (MiB) are always sent. Every other
    field is optional and left out of the encoded payload when empty.
    """

    cpus: float
    mem: int
    disk: int
    cmd: str = ""
    args: tuple[str, ...] = ()
    artifacts: tuple[Artifact, ...] = ()
    docker: Docker | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    max_launch_delay: int = 0
    placement: Placement | None = None
    restart: Restart | None = None
    user: str = ""
    volumes: tuple[Volume, ...] = ()

    @classmethod
    def create(
        cls,
        cpus: float,
        mem: int,
        disk: int,
        *,
        cmd: str = "",
        args: tuple[str, ...] | list[str] = (),
        artifacts: tuple[Artifact, ...] | list[Artifact] = (),
        docker: Docker | None = None,
        env: Mapping[str, str] | None = None,
        max_launch_delay: int = 0,
        placement: Placement | None = None,
        restart: Restart | None = None,
        user: str = "",
        volumes: tuple[Volume, ...] | list[Volume] = (),
    ) -> Run:
        """Return a run spec, rejecting non-positive resource quantities."""
        if not mem > 0:
            raise ValidationError(f"Run.mem must be positive, got {mem}")
        if not disk > 0:
            raise ValidationError(f"Run.disk must be positive, got {disk}")
        if not cpus > 0:
            raise ValidationError(f"Run.cpus must be positive, got {cpus}")
        return cls(
            cpus=float(cpus),
            mem=int(mem),
            disk=int(disk),
            cmd=cmd,
            args=tuple(args),
            artifacts=tuple(artifacts),
            docker=docker,
            env=dict(env or {}),
            max_launch_delay=max_launch_delay,
            placement=placement,
            restart=restart,
            user=user,
            volumes=tuple(volumes),
        )

    @classmethod
    def from_dict(cls, payload: Any) -> Run:
        data = _as_mapping(payload, "run")
        docker = data.get("docker")
        placement = data.get("placement")
        restart = data.get("restart")
        return cls(
            cpus=float(data.get("cpus", 0)),
            mem=int(data.get("mem", 0)),
            disk=int(data.get("disk", 0)),
            cmd=str(data.get("cmd", "")),
            args=tuple(str(a) for a in _as_list(data.get("args"), "run.args")),
            artifacts=tuple(
                Artifact.from_dict(a)
                for a in _as_list(data.get("artifacts"), "run.artifacts")
            ),
            docker=Docker.from_dict(docker) if docker is not None else None,
            env={
                str(k): str(v)
                for k, v in _as_mapping(data.get("env") or {}, "run.env").items()
            },
            max_launch_delay=int(data.get("maxLaunchDelay", 0)),
            placement=Placement.from_dict(placement) if placement is not None else None,
            restart=Restart.from_dict(restart) if restart is not None else None,
            user=str(data.get("user", "")),
            volumes=tuple(
                Volume.from_dict(v) for v in _as_list(data.get("volumes"), "run.volumes")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "cpus": self.cpus,
            "mem": self.mem,
            "disk": self.disk,
            "maxLaunchDelay": self.max_launch_delay,
        }
        if self.cmd:
            data["cmd"] = self.cmd
        if self.args:
            data["args"] = list(self.args)
        if self.artifacts:
            data["artifacts"] = [a.to_dict() for a in self.artifacts]
        if self.docker is not None:
            data["docker"] = self.docker.to_dict()
        if self.env:
            data["env"] = dict(self.env)
        if self.placement is not None and self.placement.constraints:
            data["placement"] = self.placement.to_dict()
        if self.restart is not None:
            data["restart"] = self.restart.to_dict()
        if self.user:
            data["user"] = self.user
        if self.volumes:
            data["volumes"] = [v.to_dict() for v in self.volumes]
        return data


@dataclass(frozen=True)
class Labels:
    """Ownership labels attached to a job."""

    location: str = ""
    owner: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> Labels:
        data = _as_mapping(payload, "labels")
        return cls(
            location=str(data.get("location", "")),
            owner=str(data.get("owner", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"location": self.location, "owner": self.owner}

    def get(self, key: str) -> str | None:
        """Return a label by wire name, or None when it is not a known label."""
        return self.to_dict().get(key)


class RunStatus(str, Enum):
    """
    Enumeration of the states Metronome reports for a job run.

    Values:
        INITIAL: The run has been created but not scheduled yet.
        STARTING: The run is being launched.
        ACTIVE: The run is executing.
        SUCCESS: The run completed successfully.
        FAILED: The run completed with an error (or was stopped).
        UNKNOWN: The reported state is not one the client knows.
    """

    INITIAL = "INITIAL"
    STARTING = "STARTING"
    ACTIVE = "ACTIVE"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_wire(cls, token: str | None) -> RunStatus:
        """Map a reported status onto the enumeration (UNKNOWN if unrecognized)."""
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.SUCCESS, RunStatus.FAILED)


@dataclass(frozen=True)
class JobStatus:
    """
    Read-only snapshot of a job run as reported by the service.

    Attributes:
        id: Run identifier.
        job_id: Identifier of the job the run belongs to.
        status: Status token as reported (see ``run_status``).
        created_at: Creation timestamp as reported.
        completed_at: Completion timestamp, None while the run is active.
        tasks: Opaque task descriptions.
    """

    id: str
    job_id: str
    status: str
    created_at: str = ""
    completed_at: str | None = None
    tasks: tuple[Any, ...] = ()

    @property
    def run_status(self) -> RunStatus:
        return RunStatus.from_wire(self.status)

    @classmethod
    def from_dict(cls, payload: Any) -> JobStatus:
        data = _as_mapping(payload, "job status")
        completed_at = data.get("completedAt")
        return cls(
            id=str(data["id"]),
            job_id=str(data.get("jobId", "")),
            status=str(data.get("status", "")),
            created_at=str(data.get("createdAt", "")),
            completed_at=str(completed_at) if completed_at is not None else None,
            tasks=tuple(_as_list(data.get("tasks"), "job status tasks")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "jobId": self.job_id,
            "status": self.status,
            "createdAt": self.created_at,
            "tasks": list(self.tasks),
        }
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        return data


@dataclass(frozen=True)
class Schedule:
    """
    A cron-based schedule attached to a job.

    Attributes:
        id: Schedule identifier, unique per job.
        cron: Five-field cron expression.
        concurrency_policy: What to do when a previous run is still active.
        enabled: Whether the schedule fires.
        starting_deadline_seconds: How late a run may still be started.
        timezone: Timezone the cron expression is evaluated in.
    """

    id: str
    cron: str
    concurrency_policy: str = "ALLOW"
    enabled: bool = True
    starting_deadline_seconds: int = 60
    timezone: str = "GMT"

    @classmethod
    def create(
        cls,
        id: str,
        cron: str,
        *,
        concurrency_policy: str = "ALLOW",
        enabled: bool = True,
        starting_deadline_seconds: int = 60,
        timezone: str = "GMT",
    ) -> Schedule:
        """Return a validated schedule (id and a five-field cron are required)."""
        if not id:
            raise required("Schedule.id")
        if len(cron.split()) != 5:
            raise ValidationError(
                f"Schedule.cron must have five fields, got '{cron}'"
            )
        return cls(
            id=id,
            cron=cron,
            concurrency_policy=concurrency_policy,
            enabled=enabled,
            starting_deadline_seconds=starting_deadline_seconds,
            timezone=timezone,
        )

    @classmethod
    def from_dict(cls, payload: Any) -> Schedule:
        data = _as_mapping(payload, "schedule")
        return cls(
            id=str(data["id"]),
            cron=str(data.get("cron", "")),
            concurrency_policy=str(data.get("concurrencyPolicy", "ALLOW")),
            enabled=bool(data.get("enabled", True)),
            starting_deadline_seconds=int(data.get("startingDeadlineSeconds", 60)),
            timezone=str(data.get("timezone", "GMT")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "cron": self.cron,
            "concurrencyPolicy": self.concurrency_policy,
            "enabled": self.enabled,
            "startingDeadlineSeconds": self.starting_deadline_seconds,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class Job:
    """
    Represents a Metronome job definition.

    Attributes:
        id: Unique identifier of the job.
        run: Execution specification.
        description: Free-form description.
        labels: Optional ownership labels.
        active_runs: Runs in progress (only when embedded in a response).
        schedules: Attached schedules (only when embedded in a response).
        history: Run history (only when embedded in a response).
        history_summary: Success/failure counters (only when embedded).

    The embedded fields are read-only response detail and are never encoded.
    """

    id: str
    run: Run
    description: str = ""
    labels: Labels | None = None
    active_runs: tuple[JobStatus, ...] = ()
    schedules: tuple[Schedule, ...] = ()
    history: Mapping[str, Any] | None = None
    history_summary: Mapping[str, Any] | None = None

    @classmethod
    def create(
        cls,
        id: str,
        run: Run | None,
        description: str = "",
        labels: Labels | None = None,
    ) -> Job:
        """Return a job definition; id and run are mandatory."""
        if not id:
            raise required("Job.id")
        if run is None:
            raise required("Job.run")
        return cls(id=id, run=run, description=description, labels=labels)

    @classmethod
    def from_dict(cls, payload: Any) -> Job:
        data = _as_mapping(payload, "job")
        labels = data.get("labels")
        history = data.get("history")
        summary = data.get("historySummary")
        return cls(
            id=str(data["id"]),
            run=Run.from_dict(data["run"]),
            description=str(data.get("description", "")),
            labels=Labels.from_dict(labels) if labels is not None else None,
            active_runs=tuple(
                JobStatus.from_dict(r)
                for r in _as_list(data.get("activeRuns"), "job.activeRuns")
            ),
            schedules=tuple(
                Schedule.from_dict(s)
                for s in _as_list(data.get("schedules"), "job.schedules")
            ),
            history=dict(_as_mapping(history, "job.history"))
            if history is not None
            else None,
            history_summary=dict(_as_mapping(summary, "job.historySummary"))
            if summary is not None
            else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "run": self.run.to_dict(),
        }
        if self.labels is not None:
            data["labels"] = self.labels.to_dict()
        return data
