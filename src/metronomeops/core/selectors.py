"""Job selector abstractions and implementations.

This module defines the selector system used to decide whether a Metronome
job matches a given set of criteria. Selectors encapsulate matching logic
and can be composed using logical operators (AND / OR) to express complex
selection rules.

Selectors are pure, side-effect-free objects and are intended to be
reusable across different frontends such as CLI commands, automation
scripts, and tests.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metronomeops.core.models import Job


class JobSelector(ABC):
    """
    Abstract base class for all job selectors.

    A JobSelector encapsulates a single piece of matching logic that
    determines whether a given Job satisfies a specific criterion.
    """

    @abstractmethod
    def matches(self, job: Job) -> bool:
        """
        Determine whether the given job matches this selector.

        Args:
            job: Job instance to evaluate.

        Returns:
            True if the job matches the selector criteria, False otherwise.
        """
        ...


class IdRegexSelector(JobSelector):
    """
    Selector that matches jobs based on a regular expression applied
    to the job id.
    """

    def __init__(self, pattern: str):
        """
        Create an id-based regex selector.

        Args:
            pattern: Regular expression pattern used to match job ids.
        """
        try:
            self.regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"Invalid regex expression: {exc}") from exc

    def matches(self, job: Job) -> bool:
        return bool(self.regex.search(job.id))


class LabelSelector(JobSelector):
    """
    Selector that matches jobs on one label (``location`` or ``owner``).
    """

    def __init__(self, key: str, value: str):
        """
        Create a label-based selector.

        Args:
            key: Label name to match.
            value: Expected label value.
        """
        self.key = key
        self.value = value

    def matches(self, job: Job) -> bool:
        if job.labels is None:
            return False
        return job.labels.get(self.key) == self.value


class AndSelector(JobSelector):
    """
    Composite selector that matches a job only if all child selectors match.
    """

    def __init__(self, selectors: list[JobSelector]):
        self.selectors = selectors

    def matches(self, job: Job) -> bool:
        return all(s.matches(job) for s in self.selectors)


class OrSelector(JobSelector):
    """
    Composite selector that matches a job if any child selector matches.
    """

    def __init__(self, selectors: list[JobSelector]):
        self.selectors = selectors

    def matches(self, job: Job) -> bool:
        return any(s.matches(job) for s in self.selectors)
