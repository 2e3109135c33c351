"""
Structured logging configuration for the calculation engine.

Calculation events are emitted through structlog so that hosts embedding the
engine can ship them to a log aggregator as JSON, or read them as plain
console output during development.

Usage:
    from ma_retirement.core.logging_config import setup_logging, get_logger

    # Once, at host startup
    setup_logging()

    # In your code
    logger = get_logger(__name__)
    logger.info("pension_calculated", group="GROUP_1", claiming_age=62)
"""

import logging
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from ma_retirement.config import settings


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structured logging for the engine.

    Sets up both stdlib logging and structlog. JSON output is used when
    LOG_FORMAT is "json" or the environment is production; otherwise logs
    are human-readable console lines.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    fmt = (log_format or settings.LOG_FORMAT).lower()
    use_json = fmt == "json" or settings.ENVIRONMENT == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ],
        ),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_engine_handlers(use_json)


def _configure_engine_handlers(use_json: bool = False) -> None:
    """Route the service modules' stdlib loggers through a JSON formatter."""
    if not use_json:
        return

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    engine_logger = logging.getLogger("ma_retirement")
    engine_logger.handlers.clear()
    engine_logger.addHandler(handler)
    engine_logger.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger with context support
    """
    return structlog.get_logger(name)


def log_calculation(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    duration_ms: float,
    cache_hit: bool = False,
    **kwargs,
) -> None:
    """Log a completed engine calculation with its timing."""
    logger.info(
        "calculation_completed",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        cache_hit=cache_hit,
        **kwargs,
    )
