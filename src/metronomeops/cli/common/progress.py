"""Progress formatting utilities for the CLI."""

from __future__ import annotations

import time
from typing import Mapping

from rich.console import Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from metronomeops.cli.common.output import console
from metronomeops.core.models import JobStatus, RunStatus
from metronomeops.core.runs import JobRunsAdapter

_MAX_LABEL_WIDTH = 56

_STYLES = {
    RunStatus.SUCCESS: "green",
    RunStatus.FAILED: "red",
    RunStatus.UNKNOWN: "dim",
}


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _display_job_label(
    job_id: str,
    description_by_id: Mapping[str, str] | None,
    *,
    id_width: int,
) -> str:
    """
    Render a job label for the live progress list.

    - With a description: `<id>  <description>` with aligned description column.
    - Without one: just `<id>`.
    """
    description = (description_by_id or {}).get(job_id)
    if not description:
        return job_id

    return f"{job_id.ljust(id_width)}  {_truncate(description, _MAX_LABEL_WIDTH)}"


def _style_for(status: RunStatus) -> str:
    return _STYLES.get(status, "yellow")


def wait_for_runs_with_progress(
    adapter: JobRunsAdapter,
    runs: list[JobStatus],
    poll_interval: float = 5,
    description_by_id: Mapping[str, str] | None = None,
) -> list[tuple[JobStatus, RunStatus]]:
    """
    Poll all runs until they reach a terminal state. Shows:
      - an overall progress bar (x/y completed + failures)
      - per-run spinner rows with elapsed timers (stops per run when finished)

    Returns list of (JobStatus, RunStatus).
    """
    statuses: dict[str, RunStatus] = {r.id: r.run_status for r in runs}
    finished: set[str] = set()
    failures = 0
    id_width = max((len(r.job_id) for r in runs), default=0)

    overall = Progress(
        TextColumn("[bold]Overall[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
        TimeElapsedColumn(),
        console=console,
    )

    per_run = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[job]}[/]"),
        TextColumn("run_id={task.fields[run_id]}"),
        TextColumn(
            "status=[{task.fields[style]}]{task.fields[status]}[/{task.fields[style]}]"
        ),
        TimeElapsedColumn(),
        console=console,
    )

    overall_task_id = overall.add_task("overall", total=max(len(runs), 1), failures=0)

    task_ids = {
        r.id: per_run.add_task(
            "",
            total=1,
            job=_display_job_label(r.job_id, description_by_id, id_width=id_width),
            run_id=r.id,
            status=statuses[r.id].value,
            style=_style_for(statuses[r.id]),
        )
        for r in runs
    }

    with Live(Group(overall, per_run), console=console, refresh_per_second=10, transient=True):
        while len(finished) < len(runs):
            for r in runs:
                if r.id in finished:
                    continue

                st = adapter.run_status(r.job_id, r.id).run_status
                statuses[r.id] = st
                per_run.update(task_ids[r.id], status=st.value, style=_style_for(st))

                if st.is_terminal:
                    finished.add(r.id)

                    if st == RunStatus.FAILED:
                        failures += 1
                        overall.update(overall_task_id, failures=failures)

                    per_run.update(
                        task_ids[r.id],
                        status="DONE" if st == RunStatus.SUCCESS else st.value,
                        completed=1,
                    )
                    overall.advance(overall_task_id, 1)

            if len(finished) < len(runs):
                time.sleep(poll_interval)

        overall.update(overall_task_id, completed=len(runs))

    return [(r, statuses[r.id]) for r in runs]
