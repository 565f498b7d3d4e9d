"""Builders for assembling job definitions step by step.

Builders accumulate raw field values through chained calls and validate once,
in ``build()``, by delegating to the models' validating constructors.
"""

from __future__ import annotations

from typing import Mapping

from metronomeops.core.models import (
    Artifact,
    Constraint,
    Docker,
    Job,
    Labels,
    Placement,
    Restart,
    Run,
    Volume,
)
from metronomeops.core.values import ContainerPath, MountMode, Operator


class RunBuilder:
    """Accumulates a Run specification."""

    def __init__(self, cpus: float = 0.0, mem: int = 0, disk: int = 0):
        self._cpus = cpus
        self._mem = mem
        self._disk = disk
        self._cmd = ""
        self._args: list[str] = []
        self._artifacts: list[Artifact] = []
        self._image: str | None = None
        self._env: dict[str, str] = {}
        self._max_launch_delay = 0
        self._constraints: list[tuple[str, Operator | str, str]] = []
        self._restart: tuple[int, str] | None = None
        self._user = ""
        self._volumes: list[tuple[ContainerPath | str, str, MountMode | str]] = []

    def resources(self, *, cpus: float, mem: int, disk: int) -> RunBuilder:
        self._cpus, self._mem, self._disk = cpus, mem, disk
        return self

    def cmd(self, cmd: str) -> RunBuilder:
        self._cmd = cmd
        return self

    def args(self, *args: str) -> RunBuilder:
        self._args = list(args)
        return self

    def add_arg(self, arg: str) -> RunBuilder:
        self._args.append(arg)
        return self

    def artifact(
        self,
        uri: str,
        *,
        executable: bool = False,
        extract: bool = False,
        cache: bool = False,
    ) -> RunBuilder:
        self._artifacts.append(
            Artifact(uri=uri, executable=executable, extract=extract, cache=cache)
        )
        return self

    def docker(self, image: str) -> RunBuilder:
        self._image = image
        return self

    def env(self, values: Mapping[str, str] | None = None, **kwargs: str) -> RunBuilder:
        self._env.update(values or {})
        self._env.update(kwargs)
        return self

    def max_launch_delay(self, seconds: int) -> RunBuilder:
        self._max_launch_delay = seconds
        return self

    def constraint(
        self, attribute: str, operator: Operator | str, value: str = ""
    ) -> RunBuilder:
        self._constraints.append((attribute, operator, value))
        return self

    def restart(self, policy: str, active_deadline_seconds: int = 0) -> RunBuilder:
        self._restart = (active_deadline_seconds, policy)
        return self

    def user(self, user: str) -> RunBuilder:
        self._user = user
        return self

    def volume(
        self,
        container_path: ContainerPath | str,
        host_path: str,
        mode: MountMode | str = MountMode.RO,
    ) -> RunBuilder:
        self._volumes.append((container_path, host_path, mode))
        return self

    def build(self) -> Run:
        """Validate every accumulated value and return the Run."""
        docker = Docker.create(self._image) if self._image is not None else None
        restart = Restart.create(*self._restart) if self._restart is not None else None
        constraints = tuple(Constraint.create(*c) for c in self._constraints)
        volumes = tuple(Volume.create(*v) for v in self._volumes)
        return Run.create(
            self._cpus,
            self._mem,
            self._disk,
            cmd=self._cmd,
            args=self._args,
            artifacts=self._artifacts,
            docker=docker,
            env=self._env,
            max_launch_delay=self._max_launch_delay,
            placement=Placement(constraints=constraints) if constraints else None,
            restart=restart,
            user=self._user,
            volumes=volumes,
        )


class JobBuilder:
    """Accumulates a Job definition, optionally around a RunBuilder."""

    def __init__(self, job_id: str = ""):
        self._id = job_id
        self._description = ""
        self._labels: Labels | None = None
        self._run: Run | RunBuilder | None = None

    def id(self, job_id: str) -> JobBuilder:
        self._id = job_id
        return self

    def description(self, description: str) -> JobBuilder:
        self._description = description
        return self

    def labels(self, *, location: str = "", owner: str = "") -> JobBuilder:
        self._labels = Labels(location=location, owner=owner)
        return self

    def run(self, run: Run | RunBuilder) -> JobBuilder:
        self._run = run
        return self

    def build(self) -> Job:
        """Validate the job and its run, then return the Job."""
        run = self._run.build() if isinstance(self._run, RunBuilder) else self._run
        return Job.create(self._id, run, self._description, self._labels)
