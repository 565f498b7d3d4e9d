"""Common CLI options for the CLI."""

import typer

UrlOpt = typer.Option(
    None,
    "--url",
    "-u",
    help="Metronome base URL (default: $METRONOME_URL or http://127.0.0.1:9000)",
)

TimeoutOpt = typer.Option(
    None,
    "--timeout",
    "-t",
    help="Request timeout in seconds (default: $METRONOME_REQUEST_TIMEOUT or 5)",
)

DebugOpt = typer.Option(
    False,
    "--debug",
    help="Log every request and response",
)

IdOpt = typer.Option(
    None,
    "--id",
    help="Regex on job id",
)

LabelOpt = typer.Option(
    [],
    "--label",
    help="Label selector (location=... or owner=...). This is reusable.",
    show_default=False,
)

UseOrOpt = typer.Option(
    False,
    "--or",
    help="Use OR instead of AND between selectors",
)

ParallelOpt = typer.Option(
    5,
    "--parallel",
    "-n",
    help="Number of runs to start in parallel",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before changing anything",
)

WatchOpt = typer.Option(
    False,
    "--watch",
    "-w",
    help="Wait until runs are complete",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which jobs would start, but don't start anything",
)

PollOpt = typer.Option(
    5.0,
    "--poll",
    help="Seconds between status checks when watching runs",
)
