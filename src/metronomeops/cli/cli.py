"""CLI application for Metronome operations tooling."""

import typer

from metronomeops.cli.commands.jobs import app as jobs_app
from metronomeops.cli.commands.runs import app as runs_app
from metronomeops.cli.commands.schedules import app as schedules_app
from metronomeops.cli.common.context import AppContext, build_context
from metronomeops.cli.common.exits import exit_on_error
from metronomeops.cli.common.options import DebugOpt, TimeoutOpt, UrlOpt
from metronomeops.cli.common.output import out
from metronomeops.core.results import RawPayload

app = typer.Typer(
    help="metronome-ops - Metronome job scheduler tooling",
    no_args_is_help=True,
)

app.add_typer(jobs_app, name="jobs", help="Find / show / start / delete jobs.")
app.add_typer(runs_app, name="runs")
app.add_typer(schedules_app, name="schedules")


@app.callback()
def _init(
    ctx: typer.Context,
    url: str | None = UrlOpt,
    timeout: float | None = TimeoutOpt,
    debug: bool = DebugOpt,
):
    """Build the shared client once per invocation."""
    ctx.obj = build_context(url, timeout, debug)
    ctx.call_on_close(ctx.obj.client.close)


@app.command()
def ping(ctx: typer.Context):
    """
    Check that the Metronome service answers.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        reply = appctx.client.ping()

    out.success(f"{appctx.config.url}: {reply}")


@app.command()
def metrics(ctx: typer.Context):
    """
    Print the service metrics.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Loading metrics..."):
        result = appctx.client.metrics()

    if isinstance(result, RawPayload):
        out.json(result.data)
    else:
        out.info(f"No metrics returned ({result.text})")


if __name__ == "__main__":
    app()
