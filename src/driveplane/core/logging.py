"""Structured logging for the DrivePlane server and CLI.

All context travels through structlog's contextvars: the request middleware
binds ``request_id`` and the search coordinator binds index fields such as
``query`` or ``tree_version`` for the duration of an operation. Every output
in ``LoggingConfig.outputs`` becomes one stdlib handler with its own level
and renderer, so uvicorn and library records share the same formatting.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO
from uuid import uuid4

import structlog

from driveplane.config.models import LoggingConfig, LogOutputConfig

if TYPE_CHECKING:
    from structlog.types import Processor

REQUEST_ID_KEY = "request_id"

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


def _console_stream(destination: str) -> TextIO | None:
    """Look up sys.stderr or sys.stdout at call time."""
    if destination in _CONSOLE_DESTINATIONS:
        return getattr(sys, destination)  # type: ignore[no-any-return]
    return None


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)


def set_request_id(request_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one if needed."""
    rid = request_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(**{REQUEST_ID_KEY: rid})
    return rid


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars(REQUEST_ID_KEY)


@contextmanager
def index_context(**fields: Any) -> Iterator[None]:
    """Attach index fields to every line logged inside the block.

    Fields bound by an outer block are restored on exit.
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _renderer(output: LogOutputConfig) -> Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    stream = _console_stream(output.destination)
    return structlog.dev.ConsoleRenderer(
        colors=stream is not None and stream.isatty(),
        pad_event_to=0,
        pad_level=False,
    )


def _handler(output: LogOutputConfig, level: str, shared: list[Processor]) -> logging.Handler:
    """One handler per configured output: stream or appended file."""
    handler: logging.Handler
    stream = _console_stream(output.destination)
    if stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    handler.setLevel(output.level or level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(output),
            ],
            foreign_pre_chain=shared,
        )
    )
    return handler


def configure_logging(config: LoggingConfig | None = None, *, level: str | None = None) -> None:
    """Route structlog through stdlib handlers built from a LoggingConfig.

    Args:
        config: Outputs and root level. Defaults to one console output on stderr.
        level: Overrides the root level of ``config``.
    """
    config = config or LoggingConfig()
    root_level = (level or config.level).upper()
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(root_level)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration (tests, `dpl serve` after the CLI group) must take effect
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for old in root_logger.handlers[:]:
        root_logger.removeHandler(old)
        old.close()
    root_logger.setLevel(root_level)
    for output in config.outputs:
        root_logger.addHandler(_handler(output, root_level, shared))

    # uvicorn access lines duplicate the request logging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]
