"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── golden/      🔒 Characterization (never modify)
    ├── settings/    Config and logging setup
    └── takeover/    Pure engine logic

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit/golden -v          # Only golden tests
    pytest tests/unit -m golden -v       # By marker
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "golden: safety net tests - DO NOT MODIFY"
    )
