"""
Logger Implementation
=====================

Configures structlog for structured logging with:
- JSON output in production
- Colored console output in development
- Service name binding
- Bounded rendering of long id lists

Version: 0.1.0
"""

import datetime
import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


SERVICE_VERSION = "0.1.0"

# Longest list/tuple rendered in full; longer ones are cut with a count.
MAX_LOGGED_ITEMS = 20


def _add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO timestamp to log entries."""
    event_dict["timestamp"] = datetime.datetime.now(datetime.UTC).isoformat()
    return event_dict


def _service_context(service_name: str) -> Processor:
    """Build a processor that stamps every entry with the service identity."""

    def add_service_context(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("version", SERVICE_VERSION)
        return event_dict

    return add_service_context


def _truncate_sequences(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Cut long node id lists so a large graph cannot flood one log line."""
    for key, value in list(event_dict.items()):
        if isinstance(value, (list, tuple)) and len(value) > MAX_LOGGED_ITEMS:
            event_dict[key] = [
                *value[:MAX_LOGGED_ITEMS],
                f"... ({len(value) - MAX_LOGGED_ITEMS} more)",
            ]
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "requirement-map",
) -> None:
    """
    Configure structlog for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output JSON format (True for production)
        service_name: Name of the service for context
    """
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    # Disable noisy loggers
    for noisy_logger in ["httpx", "httpcore", "asyncio", "uvicorn.access"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _add_timestamp,
        _service_context(service_name),
        _truncate_sequences,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        # Production: JSON output
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        # Development: Colored console output
        shared_processors.append(structlog.dev.set_exc_info)
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(
                show_locals=True,
                max_frames=10,
            ),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_handler = logging.StreamHandler(sys.stdout)
    root_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(root_handler)


def get_logger(name: str | None = None) -> "BoundLogger":
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        BoundLogger: Structured logger with context binding support

    Example:
        logger = get_logger(__name__)
        logger.info("layout_computed", node_count=12, edge_count=9)
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables to all subsequent logs in this context.

    Example:
        bind_context(request_id="abc123")
        logger.info("layout_computed")  # Will include request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
