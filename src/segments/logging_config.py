"""structlog setup for the segments service.

Application modules log through ``logging.getLogger(__name__)``; records
from them and from uvicorn/SQLAlchemy all pass through one structlog
``ProcessorFormatter`` on the root handler, so every line carries the
request's ``trace_id`` (and ``segment_id`` on segment-scoped routes).
"""

import logging
import sys

import structlog

# Libraries whose INFO output would drown the service's own events
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Install the root handler. JSON lines in deployments, console output locally."""
    pre_chain = _pre_chain()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, segment_id: str | None = None) -> None:
    """Attach the trace id, and the segment being configured if any, to later log lines."""
    structlog.contextvars.bind_contextvars(trace_id=trace_id)
    if segment_id:
        structlog.contextvars.bind_contextvars(segment_id=segment_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
