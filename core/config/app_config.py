#!/usr/bin/env python3
"""Takeover platform main configuration

Combines the logging and takeover policy sub-configs.
"""
import os
from dataclasses import dataclass, field

from .logging_config import LoggingConfig
from .takeover_config import TakeoverConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class AppConfig:
    """Main platform configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    takeover: TakeoverConfig = field(default_factory=TakeoverConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            logging=LoggingConfig.from_env(),
            takeover=TakeoverConfig.from_env(),
        )
