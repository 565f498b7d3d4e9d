import pytest

from metronomeops.core.builders import JobBuilder, RunBuilder
from metronomeops.core.errors import ValidationError
from metronomeops.core.values import MountMode, Operator


def test_run_builder_accumulates_fields():
    run = (
        RunBuilder(cpus=0.5, mem=64, disk=16)
        .cmd("sleep 10")
        .args("a", "b")
        .add_arg("c")
        .docker("busybox:latest")
        .env(MODE="test")
        .constraint("rack", "LIKE", "rack-.*")
        .restart("ON_FAILURE", 60)
        .volume("/data", "/srv/data", "RW")
        .build()
    )

    assert run.args == ("a", "b", "c")
    assert run.docker is not None and run.docker.image == "busybox:latest"
    assert run.env == {"MODE": "test"}
    assert run.placement is not None
    assert run.placement.constraints[0].operator is Operator.LIKE
    assert run.restart is not None and run.restart.active_deadline_seconds == 60
    assert run.volumes[0].mode is MountMode.RW


def test_run_builder_validates_only_on_build():
    builder = RunBuilder().volume("relative", "/srv", "RO")

    with pytest.raises(ValidationError, match="Run.mem"):
        builder.build()

    builder.resources(cpus=1, mem=32, disk=32)
    with pytest.raises(ValidationError, match="container path"):
        builder.build()


def test_run_builder_rejects_empty_docker_image():
    with pytest.raises(ValidationError, match="Docker.image"):
        RunBuilder(1, 32, 32).docker("").build()


def test_job_builder_builds_nested_run():
    job = (
        JobBuilder("nightly.backup")
        .description("Nightly backup")
        .labels(location="olympus", owner="zeus")
        .run(RunBuilder(1, 128, 64).cmd("backup.sh"))
        .build()
    )

    assert job.id == "nightly.backup"
    assert job.run.cmd == "backup.sh"
    assert job.to_dict()["labels"] == {"location": "olympus", "owner": "zeus"}


def test_job_builder_requires_run():
    with pytest.raises(ValidationError, match="Job.run"):
        JobBuilder("no.run").build()
