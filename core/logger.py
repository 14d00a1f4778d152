#!/usr/bin/env python3
"""
Service logger setup

Configures a named service logger from LoggingConfig: console output,
optional file output, and an optional single-line JSON format for log
shipping.

USAGE:
    from core.logger import setup_service_logger

    logger = setup_service_logger("takeover_service", level="INFO")
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from core.config import get_settings


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def __init__(self, service_name: str, environment: str):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service_name,
            "environment": self.environment,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Calling it twice for the same service does not stack handlers.
    """
    config = get_settings().logging
    logger = logging.getLogger(service_name)
    logger.setLevel((level or config.log_level).upper())

    if getattr(logger, "_takeover_configured", False):
        return logger

    if config.enable_structured:
        formatter: logging.Formatter = StructuredFormatter(service_name, config.environment)
    else:
        formatter = logging.Formatter(config.log_format)

    if config.enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        logger.addHandler(console)

    target_file = log_file or config.log_file
    if target_file:
        file_handler = logging.FileHandler(target_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger._takeover_configured = True
    return logger


__all__ = ["setup_service_logger", "StructuredFormatter"]
