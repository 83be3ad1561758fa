import logging
import sys
from typing import Any

import structlog

from terangabuild.config import get_config


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structured logging for the application."""
    config = get_config()
    level = (level or config.log_level).upper()
    if json_logs is None:
        json_logs = config.log_format == "json"

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        # Production: JSON logs
        processors = shared_processors + [structlog.processors.JSONRenderer()]
    else:
        # Development: Pretty console logs
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        level=level,
    )
