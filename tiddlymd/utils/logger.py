"""
Logging configuration for tiddlymd
"""

import logging
from typing import cast

import structlog
from rich.console import Console
from rich.logging import RichHandler

from tiddlymd.config import get_settings


def setup_logging(level: str | None = None) -> None:
    """Set up structured logging with rich formatting

    Args:
        level: Overrides the configured log level (e.g. from the CLI)
    """

    settings = get_settings()

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    ]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    # Replace handlers from an earlier call
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return cast("structlog.stdlib.BoundLogger", structlog.get_logger(name))
