"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from shared.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("layout_computed", node_count=12, iterations=50)
    logger.debug("dangling_dependency_ignored", node_id="REQ-1", dependency_id="REQ-9")
"""

from shared.logging.logger import bind_context, clear_context, get_logger, setup_logging


__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "setup_logging",
]
