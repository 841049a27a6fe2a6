"""Structured logging via structlog.

Configures structlog once per process, from the CLI entry point. All
subsequent calls to `structlog.get_logger()` (or `logging.getLogger()` via
the stdlib bridge) use this configuration.

Renderer selection:
  json_logs=False: `ConsoleRenderer` for humans at a terminal.
  json_logs=True:  `JSONRenderer` for machine-parseable logs in pipelines.

Everything is written to stderr: stdout is reserved for the report.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_structlog(debug: bool = False, json_logs: bool = False) -> None:
    """Configure structlog for the process lifetime.

    Calling it again replaces the previous configuration.
    """
    level = logging.DEBUG if debug else logging.WARNING

    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # Detector modules log through stdlib loggers; send them to the same stream.
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )
