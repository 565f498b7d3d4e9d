"""Error types raised by the Metronome client.

Every failure the library reports derives from MetronomeError so callers can
catch the whole family at once, while the concrete subclasses keep local
validation, transport failures, service rejections and undecodable payloads
apart. None of these are retried internally.
"""

from __future__ import annotations


class MetronomeError(RuntimeError):
    """Base class for all Metronome client errors."""


class ValidationError(MetronomeError, ValueError):
    """Raised when a locally built value violates one of its invariants."""


def required(field: str) -> ValidationError:
    """Return the error used when a mandatory field is missing or empty."""
    return ValidationError(f"{field} is required by the metronome api")


class TransportError(MetronomeError):
    """Raised when a request could not be completed (no service reply)."""


class RequestTimeout(TransportError):
    """Raised when a request exceeds the configured timeout.

    The outcome on the service side is unknown: the request may or may not
    have been processed.
    """


class ServiceError(MetronomeError):
    """
    Raised when the service answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the service.
        body: Raw response body (may be empty).
        message: Service-reported message when the body carried one.
    """

    def __init__(self, status_code: int, body: str = "", message: str | None = None):
        self.status_code = status_code
        self.body = body
        self.message = message
        detail = message or body.strip() or "no response body"
        super().__init__(f"HTTP {status_code}: {detail}")


class DecodeError(MetronomeError):
    """
    Raised when a response body cannot be parsed into the expected shape.

    This can happen on a nominally successful status.
    """

    def __init__(self, reason: str, *, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(reason)
