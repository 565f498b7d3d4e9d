"""Commands for managing Metronome jobs."""

import typer

from metronomeops.cli.common.context import AppContext
from metronomeops.cli.common.exits import die, exit_on_error, ok_exit, warn_exit
from metronomeops.cli.common.options import (
    ConfirmOpt,
    DryRunOpt,
    IdOpt,
    LabelOpt,
    ParallelOpt,
    PollOpt,
    UseOrOpt,
    WatchOpt,
)
from metronomeops.cli.common.output import out
from metronomeops.cli.common.progress import wait_for_runs_with_progress
from metronomeops.cli.tui import select_jobs as tui_select_jobs
from metronomeops.core.jobs import build_selector
from metronomeops.core.jobs import select_jobs as core_select_jobs
from metronomeops.core.models import Job, RunStatus
from metronomeops.core.results import StatusText
from metronomeops.core.runs import start_jobs_parallel

app = typer.Typer(help="Work with Metronome jobs", no_args_is_help=True)


def _selected_jobs(appctx: AppContext, job_id: str | None, label: list[str], use_or: bool) -> list[Job]:
    try:
        selector = build_selector(job_id=job_id, labels=label, use_or=use_or)
    except ValueError as e:
        die(str(e), code=1)

    with exit_on_error(), out.status("Loading jobs..."):
        jobs = core_select_jobs(appctx.client, selector)

    if not jobs:
        warn_exit("No jobs found", code=0)
    return jobs


@app.command()
def find(
    ctx: typer.Context,
    job_id: str | None = IdOpt,
    label: list[str] = LabelOpt,
    use_or: bool = UseOrOpt,
):
    """
    Find jobs using selectors.
    """
    jobs = _selected_jobs(ctx.obj, job_id, label, use_or)
    out.jobs_table(jobs, title="Matched jobs")


@app.command()
def show(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job id")):
    """
    Show one job with its schedules and active runs.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Loading job..."):
        job = appctx.client.get_job(job_id)

    out.jobs_table([job], title=f"Job {job.id}")
    out.kv(
        {
            "cpus": job.run.cpus,
            "mem": job.run.mem,
            "disk": job.run.disk,
            "user": job.run.user or "-",
        }
    )
    if job.history_summary:
        out.kv(job.history_summary)
    if job.schedules:
        out.schedules_table(job.schedules)
    if job.active_runs:
        out.runs_table(job.active_runs, title="Active runs")


@app.command()
def run(
    ctx: typer.Context,
    job_id: str | None = IdOpt,
    label: list[str] = LabelOpt,
    use_or: bool = UseOrOpt,
    parallel: int = ParallelOpt,
    confirm: bool = ConfirmOpt,
    watch: bool = WatchOpt,
    poll: float = PollOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Start runs of jobs chosen with selectors.
    """
    appctx: AppContext = ctx.obj
    jobs = _selected_jobs(appctx, job_id, label, use_or)

    selected = tui_select_jobs(jobs)

    if not selected:
        warn_exit("No jobs selected", code=0)

    out.header("Selected jobs")
    out.jobs_table(selected, title="Selected")

    if dry_run:
        warn_exit("Dry-run enabled: no jobs were started", code=0)

    if confirm and not out.confirm("Start the selected jobs?"):
        ok_exit("Cancelled")

    with exit_on_error(), out.status("Starting jobs..."):
        runs = start_jobs_parallel(appctx.client, [j.id for j in selected], parallel)

    out.success(f"Jobs started: {len(runs)} run(s)")
    out.runs_table(runs, title="Started runs")

    if watch:
        with exit_on_error():
            results = wait_for_runs_with_progress(
                appctx.client,
                runs,
                poll_interval=poll,
                description_by_id={j.id: j.description for j in selected},
            )

        out.run_status_table(results, title="Run status")

        if any(status != RunStatus.SUCCESS for _, status in results):
            raise typer.Exit(1)


@app.command()
def delete(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    confirm: bool = ConfirmOpt,
):
    """
    Delete a job.
    """
    appctx: AppContext = ctx.obj

    if confirm and not out.confirm(f"Delete job {job_id}?"):
        ok_exit("Cancelled")

    with exit_on_error(), out.status("Deleting job..."):
        result = appctx.client.delete_job(job_id)

    if isinstance(result, StatusText):
        out.success(f"Job {job_id} deleted ({result.text})")
    else:
        out.success(f"Job {result.id} deleted")
