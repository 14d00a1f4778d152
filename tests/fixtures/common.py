"""
Common/Shared Fixtures

Base factories and generators used across test layers.
"""
import uuid
from typing import Optional


def make_campaign_id() -> str:
    """Generate a unique campaign ID"""
    return f"tko_test_{uuid.uuid4().hex[:12]}"


def make_wallet(prefix: Optional[str] = None) -> str:
    """Generate a unique contributor wallet"""
    prefix = prefix or "wallet"
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
