"""
Takeover Service Factory

Factory for creating TakeoverService from platform settings.
The storage backend is supplied by the host; this module wires logging
and policy configuration around it.
"""

import logging
from typing import Optional

from core.config import AppConfig, get_settings
from core.logger import setup_service_logger

from .protocols import TakeoverRepositoryProtocol, EventBusProtocol
from .takeover_service import TakeoverService

logger = logging.getLogger(__name__)


def create_takeover_service(
    repository: TakeoverRepositoryProtocol,
    event_bus: Optional[EventBusProtocol] = None,
    config: Optional[AppConfig] = None,
) -> TakeoverService:
    """
    Create TakeoverService with platform settings

    Args:
        repository: Storage backend implementing TakeoverRepositoryProtocol
        event_bus: Optional event bus for event publishing
        config: Optional settings (loads from environment if not provided)

    Returns:
        TakeoverService instance
    """
    if config is None:
        config = get_settings()

    setup_service_logger("microservices.takeover_service", level=config.logging.log_level)

    if event_bus is None:
        logger.warning("Takeover service will operate without event publishing")

    service = TakeoverService(
        repository=repository,
        event_bus=event_bus,
        config=config.takeover,
    )
    logger.info(
        f"Takeover service created: safety_margin_bp={config.takeover.safety_margin_bp}, "
        f"grace_period_seconds={config.takeover.grace_period_seconds}"
    )
    return service


__all__ = ["create_takeover_service"]
