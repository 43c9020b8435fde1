"""structlog configuration for calinterval.

Output is attached to the ``calinterval`` logger only, so a host application's
root logging setup is left alone. Two output modes:
- Human (default): console-formatted output
- JSON (log_json): structured JSON lines
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "calinterval"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


class _CalintervalHandler(logging.StreamHandler):
    """Marker type so reconfiguration replaces only the handler installed here."""


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route calinterval log records through structlog's formatter.

    Safe to call repeatedly: the previously installed handler is replaced.

    Args:
        verbose: Log calinterval events at DEBUG. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Destination for log lines (default: stderr).
    """
    output = stream if stream is not None else sys.stderr

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=output.isatty())

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = _CalintervalHandler(output)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    lib_logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in lib_logger.handlers if isinstance(h, _CalintervalHandler)]:
        lib_logger.removeHandler(existing)
    lib_logger.addHandler(handler)
    lib_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    lib_logger.propagate = False
