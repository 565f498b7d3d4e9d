"""Commands for managing job schedules."""

import typer

from metronomeops.cli.common.context import AppContext
from metronomeops.cli.common.exits import die, exit_on_error, ok_exit, warn_exit
from metronomeops.cli.common.options import ConfirmOpt
from metronomeops.cli.common.output import out
from metronomeops.core.errors import ValidationError
from metronomeops.core.schedules import immediate_schedule, recurrence_schedule

app = typer.Typer(help="Manage job schedules", no_args_is_help=True)


@app.command("list")
def list_schedules(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
):
    """
    List the schedules of a job.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Loading schedules..."):
        schedules = appctx.client.list_schedules(job_id)

    if not schedules:
        warn_exit(f"Job {job_id} has no schedules", code=0)

    out.schedules_table(schedules, title=f"Schedules of {job_id}")


@app.command("add-now")
def add_now(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
):
    """
    Attach a schedule that fires as soon as possible.
    """
    appctx: AppContext = ctx.obj
    schedule = immediate_schedule()

    with exit_on_error(), out.status("Creating schedule..."):
        created = appctx.client.create_schedule(job_id, schedule)

    out.success(f"Schedule {created.id} created")
    out.schedules_table([created])


@app.command("add")
def add(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    expression: str = typer.Argument(
        ..., help="Recurrence R<n>/<start>/<interval>, e.g. R5//PT10M"
    ),
    schedule_id: str | None = typer.Option(None, "--schedule-id", help="Schedule id"),
):
    """
    Attach a schedule built from an ISO-8601 recurrence expression.
    """
    appctx: AppContext = ctx.obj

    try:
        schedule = recurrence_schedule(expression, schedule_id=schedule_id)
    except ValidationError as e:
        die(str(e), code=1)

    with exit_on_error(), out.status("Creating schedule..."):
        created = appctx.client.create_schedule(job_id, schedule)

    out.success(f"Schedule {created.id} created ({created.cron})")


@app.command()
def delete(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    schedule_id: str = typer.Argument(..., help="Schedule id"),
    confirm: bool = ConfirmOpt,
):
    """
    Delete a schedule.
    """
    appctx: AppContext = ctx.obj

    if confirm and not out.confirm(f"Delete schedule {schedule_id} of {job_id}?"):
        ok_exit("Cancelled")

    with exit_on_error(), out.status("Deleting schedule..."):
        result = appctx.client.delete_schedule(job_id, schedule_id)

    out.success(f"Schedule {schedule_id} deleted (HTTP {result.status_code})")
