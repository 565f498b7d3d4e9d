"""Job selection and lookup logic.

Domain-level operations for retrieving and filtering Metronome jobs. This
module is free of CLI concerns (output, prompts, confirmation) so it can be
reused by different frontends (CLI, automation, tests).
"""

from __future__ import annotations

from typing import Iterable, Protocol

from metronomeops.core.models import Job
from metronomeops.core.selectors import (
    AndSelector,
    IdRegexSelector,
    JobSelector,
    LabelSelector,
    OrSelector,
)

LABEL_KEYS = ("location", "owner")


class JobsAdapter(Protocol):
    """Interface for job lookup operations used by the core domain."""

    def list_jobs(self) -> list[Job]:
        """Return all jobs known to the service."""
        ...


def build_selector(
    *,
    job_id: str | None,
    labels: Iterable[str],
    use_or: bool,
) -> JobSelector:
    """
    Build a composite JobSelector from user-provided criteria.

    Args:
        job_id: Optional regular expression matched against job ids.
        labels: Label selectors in the form ``key=value`` where key is
                ``location`` or ``owner``.
        use_or: Combine multiple selectors with OR instead of AND.

    Raises:
        ValueError: If no selector is given or a label selector is malformed.
    """
    selectors: list[JobSelector] = []

    if job_id:
        selectors.append(IdRegexSelector(job_id))

    for label in labels:
        if "=" not in label:
            raise ValueError(f"Invalid label selector: '{label}' (expected key=value)")

        key, value = label.split("=", 1)
        if key not in LABEL_KEYS:
            raise ValueError(
                f"Unknown label '{key}' (expected one of {', '.join(LABEL_KEYS)})"
            )
        selectors.append(LabelSelector(key, value))

    if not selectors:
        raise ValueError("At least one selector is required (--id or --label)")

    if len(selectors) == 1:
        return selectors[0]

    return OrSelector(selectors) if use_or else AndSelector(selectors)


def select_jobs(adapter: JobsAdapter, selector: JobSelector) -> list[Job]:
    """
    Return the jobs matching a selector.

    Args:
        adapter: Adapter used to retrieve all jobs.
        selector: JobSelector instance defining the matching strategy.
    """
    return [job for job in adapter.list_jobs() if selector.matches(job)]
