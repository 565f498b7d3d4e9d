"""Client configuration for Metronome.

The client needs three settings: the service URL, a debug switch and the
per-request timeout. Values can be given explicitly or resolved from the
environment, and the URL is normalized to avoid malformed API paths.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_URL = "http://127.0.0.1:9000"
DEFAULT_REQUEST_TIMEOUT = 5

URL_ENV = "METRONOME_URL"
DEBUG_ENV = "METRONOME_DEBUG"
TIMEOUT_ENV = "METRONOME_REQUEST_TIMEOUT"


def _sanitize_url(url: str | None) -> str:
    """
    Normalize a Metronome base URL.

    - Removes query strings (e.g. '?foo=bar')
    - Removes trailing slashes
    """
    if not url:
        return DEFAULT_URL
    url = url.split("?", 1)[0]
    return url.rstrip("/")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


def _env_timeout(name: str) -> float:
    """Return the timeout from the environment, honoring the default on bad input."""
    raw = os.getenv(name)
    if raw is None:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_REQUEST_TIMEOUT
    return value if value > 0 else DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class Config:
    """
    Settings for a MetronomeClient.

    Attributes:
        url: Base URL of the Metronome service.
        debug: Log every request and response at DEBUG level.
        request_timeout: Timeout in seconds applied to every request.
    """

    url: str = DEFAULT_URL
    debug: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", _sanitize_url(self.url))

    @classmethod
    def from_env(
        cls,
        *,
        url: str | None = None,
        debug: bool | None = None,
        request_timeout: float | None = None,
    ) -> Config:
        """
        Build a configuration from the environment.

        Explicit arguments win over ``METRONOME_URL``, ``METRONOME_DEBUG``
        and ``METRONOME_REQUEST_TIMEOUT``.
        """
        return cls(
            url=url or os.getenv(URL_ENV) or DEFAULT_URL,
            debug=_env_flag(DEBUG_ENV) if debug is None else debug,
            request_timeout=request_timeout or _env_timeout(TIMEOUT_ENV),
        )
