#!/usr/bin/env python3
"""
Core Module for Takeover Services

Shared infrastructure used by the takeover microservice.

COMPONENTS:
    - config/: Environment-driven configuration (logging, takeover policy)
    - logger.py: Service logger setup driven by LoggingConfig

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger("takeover_service")
"""

__version__ = "2.0.0"
