"""Structured logging setup.

Configures structlog once for the process and routes stdlib logging
(uvicorn, httpx, the openai SDK) through the same renderer.
"""

import logging
import sys

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

SERVICE_NAME = "chatrelay"


def add_service_name(_, __, event_dict: EventDict) -> EventDict:
    """Tag every event with the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Set up logging for the application.

    Args:
        json_logs: Render log lines as JSON instead of the console format
        log_level: Root log level name
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        add_service_name,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Console renderer pretty-prints exceptions itself
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_renderer: Processor
    if json_logs:
        log_renderer = structlog.processors.JSONRenderer()
    else:
        log_renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            log_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        # Let uvicorn records reach the root handler
        logging.getLogger(name).handlers.clear()
        logging.getLogger(name).propagate = True

    # Request lines from the SDK's httpx client are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> BoundLogger:
    """Get a structlog logger bound to the given name."""
    return structlog.stdlib.get_logger(name)
