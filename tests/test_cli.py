import json

import httpx
import pytest
from typer.testing import CliRunner

from metronomeops.cli import cli as cli_module
from metronomeops.cli.common.context import AppContext
from metronomeops.core.adapters.metronome import MetronomeClient
from metronomeops.core.config import Config

runner = CliRunner()


@pytest.fixture
def serve(monkeypatch):
    """Point the CLI at a stubbed Metronome answering with `reply`."""
    requests: list[httpx.Request] = []

    def _install(reply):
        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return reply(request)

        config = Config(url="http://metronome.test")
        client = MetronomeClient(config, transport=httpx.MockTransport(_handler))
        monkeypatch.setattr(
            cli_module,
            "build_context",
            lambda url, timeout, debug: AppContext(config=config, client=client),
        )
        return requests

    return _install


def test_ping(serve):
    serve(lambda r: httpx.Response(200, text="pong"))

    result = runner.invoke(cli_module.app, ["ping"])

    assert result.exit_code == 0
    assert "pong" in result.output


def test_service_error_exits_non_zero(serve):
    serve(lambda r: httpx.Response(503, json={"message": "leader unknown"}))

    result = runner.invoke(cli_module.app, ["ping"])

    assert result.exit_code == 1
    assert "leader unknown" in result.output


def test_schedules_add_rejects_bad_expression_before_any_request(serve):
    requests = serve(lambda r: httpx.Response(201))

    result = runner.invoke(cli_module.app, ["schedules", "add", "prod", "R0//PT2M"])

    assert result.exit_code == 1
    assert requests == []


def test_schedules_add_posts_cron(serve):
    requests = serve(lambda r: httpx.Response(201, content=r.content))

    result = runner.invoke(
        cli_module.app,
        ["schedules", "add", "prod", "R5//PT10M", "--schedule-id", "every10"],
    )

    assert result.exit_code == 0
    assert requests[0].url.path == "/v1/jobs/prod/schedules"
    assert json.loads(requests[0].content)["cron"].endswith("/10 * * * *")


def test_jobs_find_filters_by_label(serve, job_payloads):
    serve(lambda r: httpx.Response(200, json=job_payloads))

    result = runner.invoke(
        cli_module.app, ["jobs", "find", "--label", "owner=hera"]
    )

    assert result.exit_code == 0
    assert "No jobs found" in result.output
