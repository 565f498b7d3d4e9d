"""Commands for inspecting and stopping job runs."""

from datetime import datetime, timedelta, timezone

import typer

from metronomeops.cli.common.context import AppContext
from metronomeops.cli.common.exits import exit_on_error
from metronomeops.cli.common.output import out

app = typer.Typer(help="Inspect and control job runs", no_args_is_help=True)


@app.command("list")
def list_runs(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    hours: int = typer.Option(
        0, "--since-hours", help="Also show history of the last N hours"
    ),
):
    """
    List the active runs of a job.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Loading runs..."):
        if hours > 0:
            since = datetime.now(timezone.utc) - timedelta(hours=hours)
            job = appctx.client.list_runs_since(job_id, since)
            runs = list(job.active_runs)
        else:
            job = None
            runs = appctx.client.list_active_runs(job_id)

    if runs:
        out.runs_table(runs, title="Active runs")
    else:
        out.info("No active runs")

    if job is not None and job.history:
        out.header("History")
        out.json(job.history)


@app.command()
def status(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    run_id: str = typer.Argument(..., help="Run id"),
):
    """
    Show the status of one run.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        run = appctx.client.run_status(job_id, run_id)

    out.runs_table([run], title=f"Run {run.id}")


@app.command()
def stop(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    run_id: str = typer.Argument(..., help="Run id"),
):
    """
    Stop a run.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Stopping run..."):
        result = appctx.client.stop_run(job_id, run_id)

    out.success(f"Stop requested for run {run_id} of {job_id} (HTTP {result.status_code})")
