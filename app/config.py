"""Logging configuration for the gateway health service."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from pythonjsonlogger import jsonlogger

from app.core.settings import settings

_HANDLER_MARKER = "_gateway_health_handler"


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def setup_logging() -> None:
    """Configure application logging.

    Safe to call more than once: handlers installed by a previous call are
    replaced instead of stacked.
    """
    log_level = getattr(logging, settings.log_level)

    # Configure JSON formatter
    json_formatter = jsonlogger.JsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        rename_fields={"timestamp": "@timestamp", "level": "severity"},
    )

    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(json_formatter)
    console_handler.setLevel(log_level)
    handlers.append(_mark(console_handler))

    # File handler with rotation
    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_dir / "gateway-health.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(json_formatter)
        file_handler.setLevel(log_level)
        handlers.append(_mark(file_handler))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "app_name": settings.app_name,
            "app_version": settings.app_version,
        },
    )
