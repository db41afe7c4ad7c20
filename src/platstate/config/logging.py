"""structlog setup for platstate.

Everything is written to stderr so stdout stays reserved for command
results. Modules keep using ``logging.getLogger(__name__)``; their records go
through the same processor chain as native structlog events.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

import structlog

PACKAGE_LOGGER = "platstate"
ROUTE_LOGGER = "platstate.route"
ROUTE_EVENT = "route-parameter-manager"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: ``platstate`` loggers emit DEBUG; otherwise WARNING and up.
        log_json: One JSON object per line instead of console formatting.
    """
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def route_backend_sink(*, verbose: bool = False) -> Callable[[bool, str], None]:
    """Build the ``(is_warning, text)`` sink handed to the routing backend.

    Warnings always reach the log; other messages only when *verbose*.
    """
    log = structlog.get_logger(ROUTE_LOGGER)

    def sink(is_warning: bool, text: str) -> None:
        if is_warning:
            log.warning(ROUTE_EVENT, message=text)
        elif verbose:
            log.debug(ROUTE_EVENT, message=text)

    return sink
