"""Application context management for the CLI."""

import logging
from dataclasses import dataclass

from rich.logging import RichHandler

from metronomeops.cli.common.output import console
from metronomeops.core.adapters.metronome import MetronomeClient
from metronomeops.core.config import Config


@dataclass
class AppContext:
    """Application context holding the configuration and Metronome client."""

    config: Config
    client: MetronomeClient


def configure_logging(debug: bool) -> None:
    """Route log records through Rich; DEBUG when debugging, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_context(
    url: str | None, timeout: float | None, debug: bool
) -> AppContext:
    """Build the application context from CLI options and the environment.

    Args:
        url: Optional base URL overriding ``METRONOME_URL``.
        timeout: Optional request timeout overriding ``METRONOME_REQUEST_TIMEOUT``.
        debug: Enable request/response logging.

    Returns:
        AppContext: Context with configured client.
    """
    config = Config.from_env(url=url, debug=debug or None, request_timeout=timeout)
    configure_logging(config.debug)
    return AppContext(config=config, client=MetronomeClient(config))
