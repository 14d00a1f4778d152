"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (TakeoverService with mocked repository)
    - unit/       : Unit tests (pure engine functions, no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("ENVIRONMENT", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

# Import shared fixtures from tests/fixtures
from tests.fixtures import (
    REFERENCE_START,
    REFERENCE_END,
    make_campaign,
)


# =============================================================================
# Campaign Fixtures
# =============================================================================

@pytest.fixture
def reference_campaign():
    """Open campaign with the reference parameters and nothing contributed"""
    return make_campaign()


@pytest.fixture
def mid_campaign() -> int:
    """A time inside the reference campaign window"""
    return REFERENCE_START + 3600


@pytest.fixture
def after_campaign() -> int:
    """A time after the reference campaign has expired"""
    return REFERENCE_END + 1


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "component: Component tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "golden: safety net tests - DO NOT MODIFY")
