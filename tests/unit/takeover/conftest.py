"""
Unit Test Fixtures for Takeover Service

Engine functions are pure, so unit tests need only campaign snapshots and
the default policy.
"""

import pytest

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.takeover_config import TakeoverConfig
from microservices.takeover_service.contribution_admission import ContributionAdmission


@pytest.fixture
def admission() -> ContributionAdmission:
    """Admission gate with default policy (no grace window)"""
    return ContributionAdmission(TakeoverConfig())


@pytest.fixture
def grace_admission() -> ContributionAdmission:
    """Admission gate with a one hour grace window"""
    return ContributionAdmission(TakeoverConfig(grace_period_seconds=3600))
