"""Terminal UI utilities for metronome-ops."""

from __future__ import annotations

import questionary

from metronomeops.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from metronomeops.core.models import Job

_MAX_DESCRIPTION_WIDTH = 72


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _job_choice_title(job: Job, *, id_width: int) -> str:
    """Format one job choice as `<id>  <description>` with aligned descriptions."""
    if not job.description:
        return job.id
    short = _truncate(job.description, _MAX_DESCRIPTION_WIDTH)
    return f"{job.id.ljust(id_width)}  {short}"


def select_jobs(jobs: list[Job]) -> list[Job]:
    """Display a checkbox prompt to select jobs from a list.

    Args:
        jobs: A list of Job objects to choose from.

    Returns:
        A list of selected Job objects, or an empty list if none selected.
    """
    id_width = max((len(job.id) for job in jobs), default=0)

    choices = [
        questionary.Choice(title=_job_choice_title(job, id_width=id_width), value=job)
        for job in jobs
    ]

    return (
        questionary.checkbox(
            "Select jobs:",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
        ).ask()
        or []
    )
