"""
Structured logging for shadowbridge entry points.

Library modules only call ``logging.getLogger(__name__)``. Whoever drives the
orchestrator (the ``shadowbridge`` CLI, a host application) calls
``setup_logging`` once, and every stdlib record is rendered by structlog.
"""

import logging
import sys
from typing import IO, Optional

import structlog

from .config import settings

_QUIET_LOGGERS = ("httpcore", "httpx")


def _processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    log_level: Optional[str] = None,
    *,
    json_logs: Optional[bool] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Route stdlib and structlog output through one structlog renderer.

    Args:
        log_level: Override level (default: settings.log_level)
        json_logs: Force JSON lines on or off; by default JSON is used unless
            the level is DEBUG
        stream: Destination for log lines (default: stderr, leaving stdout to
            command output)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    pre_chain = _processors()
    if json_logs:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def transfer_log_context(**values: object):
    """Attach transfer identifiers (network, direction, asset) to log lines inside the block."""
    return structlog.contextvars.bound_contextvars(**values)
