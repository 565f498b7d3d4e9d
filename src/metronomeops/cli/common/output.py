"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from metronomeops.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM
from metronomeops.core.models import Job, JobStatus, RunStatus, Schedule

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def status_style(status: RunStatus) -> str:
    """Return the theme style used to render a run status."""
    if status == RunStatus.SUCCESS:
        return "ok"
    if status == RunStatus.FAILED:
        return "err"
    if status == RunStatus.UNKNOWN:
        return "meta"
    return "warn"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def json(self, data: Any) -> None:
        """Pretty-print a JSON-compatible value."""
        console.print_json(data=data)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")
        prompt = questionary.confirm(
            message,
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def jobs_table(self, jobs: Iterable[Job], title: str = "Jobs") -> None:
        t = Table(title=title, show_lines=False)
        t.add_column("Job ID", style="ok", no_wrap=True)
        t.add_column("Description")
        t.add_column("Labels", style="meta")
        t.add_column("Image / cmd", style="meta")

        for j in jobs:
            labels = ""
            if j.labels is not None:
                labels = ", ".join(
                    f"{k}={v}" for k, v in j.labels.to_dict().items() if v
                )
            target = j.run.docker.image if j.run.docker else j.run.cmd
            t.add_row(j.id, j.description, labels, target)

        console.print(t)

    def runs_table(self, runs: Iterable[JobStatus], title: str = "Runs") -> None:
        t = Table(title=title, show_lines=False)
        t.add_column("Job ID", style="ok", no_wrap=True)
        t.add_column("Run ID", style="ok", no_wrap=True)
        t.add_column("Status")
        t.add_column("Created", style="meta")
        t.add_column("Completed", style="meta")

        for r in runs:
            style = status_style(r.run_status)
            t.add_row(
                r.job_id,
                r.id,
                f"[{style}]{r.status or RunStatus.UNKNOWN.value}[/{style}]",
                r.created_at,
                r.completed_at or "",
            )

        console.print(t)

    def run_status_table(
        self, results: Iterable[tuple[JobStatus, RunStatus]], title: str = "Run status"
    ) -> None:
        """Render (run, final status) pairs."""
        t = Table(title=title, show_lines=False)
        t.add_column("Job ID", style="ok", no_wrap=True)
        t.add_column("Run ID", style="ok", no_wrap=True)
        t.add_column("Status")

        for run, status in results:
            style = status_style(status)
            t.add_row(run.job_id, run.id, f"[{style}]{status.value}[/{style}]")

        console.print(t)

    def schedules_table(
        self, schedules: Iterable[Schedule], title: str = "Schedules"
    ) -> None:
        t = Table(title=title, show_lines=False)
        t.add_column("Schedule ID", style="ok", no_wrap=True)
        t.add_column("Cron")
        t.add_column("Timezone", style="meta")
        t.add_column("Enabled")
        t.add_column("Policy", style="meta")
        t.add_column("Deadline (s)", style="meta")

        for s in schedules:
            enabled = "[ok]yes[/]" if s.enabled else "[warn]no[/]"
            t.add_row(
                s.id,
                s.cron,
                s.timezone,
                enabled,
                s.concurrency_policy,
                str(s.starting_deadline_seconds),
            )

        console.print(t)


out = Out()
