"""Exit handling utilities for the CLI."""

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from metronomeops.cli.common.output import out
from metronomeops.core.errors import MetronomeError, RequestTimeout, ServiceError


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


def _describe(exc: MetronomeError) -> str:
    if isinstance(exc, RequestTimeout):
        return f"{exc} (the outcome on the service is unknown)"
    if isinstance(exc, ServiceError) and exc.message:
        return f"Metronome answered HTTP {exc.status_code}: {exc.message}"
    return str(exc)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn client errors raised inside the block into a clean CLI exit."""
    try:
        yield
    except MetronomeError as exc:
        exit_from_exc(exc, message=_describe(exc))
