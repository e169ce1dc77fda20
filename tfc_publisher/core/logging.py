"""Structured logging via structlog.

Configures structlog once at process startup (the CLI does this). Library
modules keep using `logging.getLogger(__name__)`; the stdlib bridge routes
those records to the same stream.

Renderer selection:
  debug=True   `ConsoleRenderer` with colours for local runs.
  debug=False  `JSONRenderer` for machine-parseable CI logs.

Host progress messages (the `logger.log(message)` contract of the release
host) go through `StructlogHostLogger`, so they share the same output.
"""

from __future__ import annotations

import logging
import sys
from typing import Protocol, runtime_checkable

import structlog


@runtime_checkable
class HostLogger(Protocol):
    """Progress logger supplied by the release host."""

    def log(self, message: str) -> None:
        ...


class StructlogHostLogger:
    """Default `HostLogger` that forwards progress messages to structlog."""

    def __init__(self, name: str = "tfc_publisher") -> None:
        self._logger = structlog.get_logger(name)

    def log(self, message: str) -> None:
        self._logger.info(message)


def configure_structlog(debug: bool = False) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe; the last call wins.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging (library modules, httpx) to the same stream.
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if debug else logging.INFO,
    )
