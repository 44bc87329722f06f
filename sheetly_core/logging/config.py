"""
Logging Setup
=============
Structured logging for services embedding sheetly-core.

Usage:
    from sheetly_core.logging import setup_logging

    setup_logging(service_name="sheetly-auth")

Module loggers are plain ``structlog.get_logger(__name__)`` calls; this
routes them through the stdlib root handler so library and application
records share one stream.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, List

import structlog

service_name_var: ContextVar[str] = ContextVar("service_name", default="unknown")


def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Stamp the configured service name on every record."""
    event_dict.setdefault("service", service_name_var.get())
    return event_dict


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> logging.Logger:
    """
    Configure logging for a service.

    Args:
        service_name: Name of the service (e.g., "sheetly-auth")
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines for production, console text otherwise

    Returns:
        Configured root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=_shared_processors() + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    structlog.get_logger(__name__).info(
        "logging.configured",
        service=service_name,
        json_output=json_output,
    )

    return root_logger


def get_logger(name: str) -> Any:
    """Get a structlog logger with the given name."""
    return structlog.get_logger(name)
