"""
Structured logging for the research engine, built on structlog.

Events are rendered as one JSON object per line. Each research run binds its
run id into the structlog context, so every event emitted while the run is
streaming can be correlated. Values under credential-like keys never reach
the output.
"""
import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator, MutableMapping

import structlog

REDACTED = "***"
SECRET_KEY_SUFFIXES = ("api_key", "credentials", "token", "secret")


def redact_secrets(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Mask values logged under credential-like keys."""
    for key in list(event_dict):
        if key.lower().endswith(SECRET_KEY_SUFFIXES) and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _log_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _configure_logging() -> None:
    """Configure stdlib logging and structlog from LOG_LEVEL (default: INFO)."""
    level = _log_level()
    logging.basicConfig(format="%(message)s", level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


_configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger bound with its module name.

    Args:
        name: Logger name, usually ``__name__`` (e.g. "deep_research_agent.search.fetcher")

    Returns:
        structlog BoundLogger with ``logger=name`` bound
    """
    return structlog.get_logger(name).bind(logger=name)


@contextmanager
def bind_run_context(**values) -> Iterator[None]:
    """
    Bind run-scoped values (run id, topic) into the structlog context.

    Args:
        **values: Key/value pairs merged into every log event inside the block
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
