"""Constrained value types used inside Metronome job definitions.

Each type here is a closed set or a pattern-checked string with a single
canonical wire token. Parsing an unknown token is a ValidationError rather
than a silent default, so malformed payloads never reach the service.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from metronomeops.core.errors import ValidationError

CONTAINER_PATH_PATTERN = re.compile(r"^/[^/].*$")


class Operator(str, Enum):
    """
    Comparison operator used by a placement constraint.

    Values:
        EQ: Attribute must equal the value.
        LIKE: Attribute must match the value as a regular expression.
        UNLIKE: Attribute must not match the value.
    """

    EQ = "EQ"
    LIKE = "LIKE"
    UNLIKE = "UNLIKE"

    @classmethod
    def parse(cls, token: str) -> Operator:
        """Return the operator for a wire token."""
        try:
            return cls(token)
        except ValueError as exc:
            raise ValidationError(
                f"Bad constraint operator '{token}'. Must be EQ, LIKE or UNLIKE"
            ) from exc

    def render(self) -> str:
        """Return the canonical wire token."""
        return self.value


class MountMode(str, Enum):
    """
    Access mode of a mounted volume.

    Values:
        RO: Read-only mount.
        RW: Read-write mount.
    """

    RO = "RO"
    RW = "RW"

    @classmethod
    def parse(cls, token: str) -> MountMode:
        """Return the mount mode for a wire token."""
        try:
            return cls(token)
        except ValueError as exc:
            raise ValidationError(
                f"Bad mount mode '{token}'. Must be RO or RW"
            ) from exc

    def render(self) -> str:
        """Return the canonical wire token."""
        return self.value


@dataclass(frozen=True)
class ContainerPath:
    """Absolute path inside the container (never the root itself)."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not CONTAINER_PATH_PATTERN.match(
            self.value
        ):
            raise ValidationError(
                f"Bad container path '{self.value}'. Must match `^/[^/].*$`"
            )

    @classmethod
    def parse(cls, raw: str | ContainerPath) -> ContainerPath:
        """Return a validated container path, accepting an existing one as-is."""
        if isinstance(raw, ContainerPath):
            return raw
        return cls(raw)

    def __str__(self) -> str:
        return self.value
