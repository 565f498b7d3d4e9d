"""Result variants for responses without a typed model.

Most operations decode into a model from ``metronomeops.core.models``. The
replies whose shape the API does not pin down are returned as one of these
explicit variants instead of an untyped blob.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RawPayload:
    """
    A successfully decoded JSON body with no fixed schema.

    Attributes:
        status_code: HTTP status of the response.
        data: The decoded JSON value.
    """

    status_code: int
    data: Any


@dataclass(frozen=True)
class StatusText:
    """
    Placeholder for a successful response that carried no body.

    Attributes:
        status_code: HTTP status of the response.
        text: Standard reason phrase for the status (e.g. ``OK``).
    """

    status_code: int
    text: str

    def __str__(self) -> str:
        return self.text


Opaque = Union[RawPayload, StatusText]
