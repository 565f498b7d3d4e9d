from __future__ import annotations

import sys
from pathlib import Path

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

JOB_WITH_ARGUMENTS = {
    "description": "Job with arguments",
    "id": "job.with.arguments",
    "labels": {"location": "olympus", "owner": "zeus"},
    "run": {
        "args": ["nuke", "--dry", "--master", "local"],
        "artifacts": [
            {
                "cache": False,
                "executable": True,
                "extract": True,
                "uri": "http://foo.test.com/application.zip",
            }
        ],
        "cmd": "nuke --dry --master local",
        "cpus": 1.5,
        "disk": 32,
        "docker": {"image": "foo/bla:test"},
        "env": {"CONNECT": "direct", "MON": "test"},
        "maxLaunchDelay": 3600,
        "mem": 128,
        "placement": {
            "constraints": [{"attribute": "rack", "operator": "EQ", "value": "rack-2"}]
        },
        "restart": {"activeDeadlineSeconds": 120, "policy": "NEVER"},
        "user": "root",
        "volumes": [{"containerPath": "/mnt/test", "hostPath": "/etc/guest", "mode": "RW"}],
    },
}

JOB_WITHOUT_ARGUMENTS = {
    "description": "Job without arguments",
    "id": "job.without.arguments",
    "labels": {"location": "olympus", "owner": "zeus"},
    "run": {
        "cmd": "/usr/local/bin/dcos-tests --debug --term-wait 20 --http-addr :8095",
        "cpus": 0.5,
        "disk": 128,
        "env": {"CONNECT": "direct", "MON": "test"},
        "maxLaunchDelay": 3600,
        "mem": 32,
        "user": "root",
    },
}

RUN_STATUS = {
    "completedAt": None,
    "createdAt": "2016-07-15T13:02:59.735+0000",
    "id": "20160715130259A34HX",
    "jobId": "prod",
    "status": "STARTING",
    "tasks": [],
}

SCHEDULE = {
    "id": "every2",
    "cron": "*/2 * * * *",
    "concurrencyPolicy": "ALLOW",
    "enabled": True,
    "startingDeadlineSeconds": 60,
    "timezone": "Etc/GMT",
}


@pytest.fixture
def job_payloads() -> list[dict]:
    return [JOB_WITH_ARGUMENTS, JOB_WITHOUT_ARGUMENTS]


@pytest.fixture
def run_status_payload() -> dict:
    return dict(RUN_STATUS)


@pytest.fixture
def schedule_payload() -> dict:
    return dict(SCHEDULE)
