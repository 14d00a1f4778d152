"""
Shared Test Fixtures

Centralized factories and generators used across all test layers.

Structure:
    - common.py: Base ID generators
    - generators.py: Random data generators
    - takeover_fixtures.py: Campaign and contribution factories
"""

# Common utilities
from .common import (
    make_campaign_id,
    make_wallet,
)

# Random generators
from .generators import (
    random_wallets,
    random_amount,
    random_amounts,
)

# Takeover service fixtures
from .takeover_fixtures import (
    REFERENCE_START,
    REFERENCE_END,
    REFERENCE_ORIGINAL_SUPPLY,
    REFERENCE_PARTICIPATION_BP,
    REFERENCE_REWARD_RATE_BP,
    REFERENCE_RESERVE,
    REFERENCE_MARGIN_BP,
    REFERENCE_PARTICIPATION,
    REFERENCE_EFFECTIVE_RESERVE,
    REFERENCE_CAPACITY,
    make_campaign,
    make_contribution,
    make_create_request,
)

__all__ = [
    "make_campaign_id",
    "make_wallet",
    "random_wallets",
    "random_amount",
    "random_amounts",
    "REFERENCE_START",
    "REFERENCE_END",
    "REFERENCE_ORIGINAL_SUPPLY",
    "REFERENCE_PARTICIPATION_BP",
    "REFERENCE_REWARD_RATE_BP",
    "REFERENCE_RESERVE",
    "REFERENCE_MARGIN_BP",
    "REFERENCE_PARTICIPATION",
    "REFERENCE_EFFECTIVE_RESERVE",
    "REFERENCE_CAPACITY",
    "make_campaign",
    "make_contribution",
    "make_create_request",
]
