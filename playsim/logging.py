# playsim/logging.py

import logging

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import add_logger_name


def configure_logging(log_level: str = "INFO", json_logs: bool = True):
    """Configure structured logging for playsim.

    JSON output for services, a console renderer for the CLI demo.
    """
    logging.basicConfig(format="%(message)s", level=log_level.upper())

    renderer = JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            add_log_level,
            add_logger_name,
            TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values) -> None:
    """Attach values (e.g. a request id) to every log line of the current task."""
    clear_contextvars()
    bind_contextvars(**values)


def clear_request_context() -> None:
    clear_contextvars()


def get_logger(name: str):
    """Get a structured logger instance."""
    return structlog.get_logger(name)
