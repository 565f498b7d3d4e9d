from dataclasses import replace

import pytest

from metronomeops.core.errors import ValidationError
from metronomeops.core.models import (
    Artifact,
    Constraint,
    Docker,
    Job,
    JobStatus,
    Labels,
    Placement,
    Restart,
    Run,
    RunStatus,
    Schedule,
    Volume,
)
from metronomeops.core.values import ContainerPath, MountMode, Operator


def test_job_decodes_every_run_field(job_payloads):
    job = Job.from_dict(job_payloads[0])

    assert job.id == "job.with.arguments"
    assert job.labels == Labels(location="olympus", owner="zeus")
    assert job.run == Run(
        cpus=1.5,
        mem=128,
        disk=32,
        cmd="nuke --dry --master local",
        args=("nuke", "--dry", "--master", "local"),
        artifacts=(
            Artifact(
                uri="http://foo.test.com/application.zip",
                executable=True,
                extract=True,
                cache=False,
            ),
        ),
        docker=Docker(image="foo/bla:test"),
        env={"CONNECT": "direct", "MON": "test"},
        max_launch_delay=3600,
        placement=Placement(
            constraints=(Constraint("rack", Operator.EQ, "rack-2"),)
        ),
        restart=Restart(policy="NEVER", active_deadline_seconds=120),
        user="root",
        volumes=(Volume(ContainerPath("/mnt/test"), "/etc/guest", MountMode.RW),),
    )


def test_job_without_optional_run_fields_decodes_to_empty(job_payloads):
    job = Job.from_dict(job_payloads[1])

    assert job.run.docker is None
    assert job.run.placement is None
    assert job.run.restart is None
    assert job.run.volumes == ()
    assert job.run.artifacts == ()
    assert job.run.args == ()
    assert job.active_runs == ()
    assert job.history is None


def test_job_without_labels_decodes():
    job = Job.from_dict({"id": "bare", "run": {"cpus": 1, "mem": 32, "disk": 0}})

    assert job.labels is None
    assert job.description == ""


def test_run_encoding_omits_absent_optionals():
    run = Run.create(0.5, 64, 10)

    assert run.to_dict() == {"cpus": 0.5, "mem": 64, "disk": 10, "maxLaunchDelay": 0}


def test_run_encoding_omits_empty_placement():
    run = replace(Run.create(1, 32, 32), placement=Placement())

    assert "placement" not in run.to_dict()


def test_job_encoding_matches_decoded_payload(job_payloads):
    assert Job.from_dict(job_payloads[0]).to_dict() == job_payloads[0]


def test_job_encoding_leaves_out_embedded_detail(run_status_payload, schedule_payload):
    payload = {
        "id": "prod",
        "description": "",
        "run": {"cpus": 1.0, "mem": 32, "disk": 32, "maxLaunchDelay": 0},
        "activeRuns": [run_status_payload],
        "schedules": [schedule_payload],
        "historySummary": {"successCount": 3, "failureCount": 1},
    }

    job = Job.from_dict(payload)

    assert job.active_runs[0].run_status is RunStatus.STARTING
    assert job.schedules[0].id == "every2"
    assert job.history_summary == {"successCount": 3, "failureCount": 1}
    assert set(job.to_dict()) == {"id", "description", "run"}


def test_constraint_decode_rejects_unknown_operator():
    with pytest.raises(ValidationError):
        Constraint.from_dict({"attribute": "rack", "operator": "MAYBE", "value": "x"})


def test_volume_decode_rejects_relative_container_path():
    with pytest.raises(ValidationError):
        Volume.from_dict({"containerPath": "mnt", "hostPath": "/h", "mode": "RO"})


@pytest.mark.parametrize(
    "cpus, mem, disk, field",
    [
        (0, 32, 32, "cpus"),
        (float("nan"), 32, 32, "cpus"),
        (1, 0, 32, "mem"),
        (1, float("nan"), 32, "mem"),
        (1, 32, -1, "disk"),
        (1, 32, float("nan"), "disk"),
    ],
)
def test_run_create_rejects_non_positive_resources(cpus, mem, disk, field):
    with pytest.raises(ValidationError, match=f"Run.{field}"):
        Run.create(cpus, mem, disk)


def test_job_create_requires_id_and_run():
    run = Run.create(1, 32, 32)

    with pytest.raises(ValidationError, match="Job.id"):
        Job.create("", run)
    with pytest.raises(ValidationError, match="Job.run"):
        Job.create("job", None)


def test_validating_constructors_name_the_missing_field():
    with pytest.raises(ValidationError, match="Docker.image"):
        Docker.create("")
    with pytest.raises(ValidationError, match="Restart.policy"):
        Restart.create(10, "")
    with pytest.raises(ValidationError, match="Constraint.attribute"):
        Constraint.create("", Operator.EQ)
    with pytest.raises(ValidationError, match="Volume.hostPath"):
        Volume.create("/data", "", MountMode.RO)


def test_volume_create_accepts_wire_tokens():
    volume = Volume.create("/data", "/srv/data", "RW")

    assert volume.mode is MountMode.RW
    assert volume.to_dict() == {
        "containerPath": "/data",
        "hostPath": "/srv/data",
        "mode": "RW",
    }


def test_job_status_decodes_null_completed_at(run_status_payload):
    status = JobStatus.from_dict(run_status_payload)

    assert status.completed_at is None
    assert status.job_id == "prod"
    assert "completedAt" not in status.to_dict()


def test_run_status_maps_unknown_tokens():
    assert RunStatus.from_wire("ACTIVE") is RunStatus.ACTIVE
    assert RunStatus.from_wire("EXPLODED") is RunStatus.UNKNOWN
    assert RunStatus.from_wire(None) is RunStatus.UNKNOWN


def test_schedule_round_trip(schedule_payload):
    assert Schedule.from_dict(schedule_payload).to_dict() == schedule_payload


def test_schedule_create_requires_five_cron_fields():
    with pytest.raises(ValidationError, match="five fields"):
        Schedule.create("every", "* * *")
