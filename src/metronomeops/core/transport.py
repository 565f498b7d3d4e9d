"""HTTP transport for the Metronome REST API.

This module issues single request/response exchanges through a pooled
``httpx.Client`` and classifies their outcome:

- the request never completed -> TransportError (RequestTimeout on timeout)
- the service answered with a non-2xx status -> ServiceError
- otherwise -> ApiResponse, left to the caller to decode

It keeps no state between calls besides the connection pool, so one
transport can be shared by concurrent callers. There is no retry logic.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping, Sequence, Union

import httpx

from metronomeops.core.config import Config
from metronomeops.core.errors import (
    DecodeError,
    RequestTimeout,
    ServiceError,
    TransportError,
)

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Union[str, Sequence[str]]]

_BODY_PREVIEW = 200


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


@dataclass(frozen=True)
class ApiResponse:
    """A successful (2xx) response, not yet decoded."""

    status_code: int
    text: str
    content_type: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    @property
    def reason(self) -> str:
        """Standard reason phrase of the status code (e.g. ``OK``)."""
        return _reason(self.status_code)

    def json(self) -> Any:
        """Decode the body as JSON, raising DecodeError if it is not."""
        if self.is_empty:
            raise DecodeError(
                "Empty response body where JSON was expected",
                status_code=self.status_code,
                body=self.text,
            )
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                f"Response body is not valid JSON: {exc}",
                status_code=self.status_code,
                body=self.text,
            ) from exc


def encode_params(params: QueryParams | None) -> list[tuple[str, str]]:
    """Flatten query parameters; sequences become repeated parameters."""
    if not params:
        return []
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, str(v)) for v in value)
    return pairs


def service_message(body: str) -> str | None:
    """Return the message a service error body carries, if it is decodable."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(data, str):
        return data
    if isinstance(data, Mapping):
        message = data.get("message")
        if message is None:
            return None
        details = data.get("details")
        return f"{message} {json.dumps(details)}" if details else str(message)
    return None


class HttpTransport:
    """Issues requests against one Metronome service."""

    def __init__(
        self,
        config: Config,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Create a transport for the configured service.

        Args:
            config: Client configuration (URL, debug, timeout).
            transport: Optional low-level httpx transport (e.g. a test double).
        """
        self.config = config
        if config.debug:
            logging.getLogger("metronomeops").setLevel(logging.DEBUG)
        self.client = httpx.Client(
            base_url=config.url,
            timeout=httpx.Timeout(config.request_timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self.client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        body: Any = None,
    ) -> ApiResponse:
        """
        Issue one request and return the successful response.

        ``request_timeout`` bounds the whole exchange, from sending the
        request to reading the last byte of the body. httpx applies the same
        value to each connect, write and read on top of that.

        Raises:
            RequestTimeout: The configured timeout elapsed.
            TransportError: The request could not be completed.
            ServiceError: The service answered with a non-2xx status.
        """
        query = encode_params(params)
        logger.debug("%s %s params=%s body=%s", method, path, query, body)

        deadline = time.monotonic() + self.config.request_timeout
        try:
            with self.client.stream(method, path, params=query, json=body) as response:
                content = self._read_before(deadline, response, method, path)
        except httpx.TimeoutException as exc:
            raise self._timed_out(method, path) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        text = content.decode(response.encoding or "utf-8", errors="replace")
        logger.debug(
            "%s %s -> %s %s", method, path, response.status_code, text[:_BODY_PREVIEW]
        )

        if not response.is_success:
            raise ServiceError(response.status_code, text, service_message(text))

        return ApiResponse(
            status_code=response.status_code,
            text=text,
            content_type=response.headers.get("content-type", ""),
        )

    def _read_before(
        self, deadline: float, response: httpx.Response, method: str, path: str
    ) -> bytes:
        """Read the whole body, giving up once the deadline has passed."""
        chunks: list[bytes] = []
        if time.monotonic() > deadline:
            raise self._timed_out(method, path)
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise self._timed_out(method, path)
        return b"".join(chunks)

    def _timed_out(self, method: str, path: str) -> RequestTimeout:
        return RequestTimeout(
            f"{method} {path} timed out after {self.config.request_timeout}s"
        )
