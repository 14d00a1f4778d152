#!/usr/bin/env python3
"""Takeover policy configuration

Defaults for campaign creation and admission policy. Every ratio is in
basis points (1/10000) except the reward rate, which is quoted in
hundredths (150 = 1.5x).
"""
import os
from dataclasses import dataclass

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class TakeoverConfig:
    """Takeover campaign policy settings"""

    # ===========================================
    # New token supply split
    # ===========================================
    reward_pool_bp: int = 8000          # 80% of new supply reserved for rewards
    safety_margin_bp: int = 200         # 2% of the reserve is never promised

    # ===========================================
    # Campaign defaults
    # ===========================================
    default_reward_rate_bp: int = 150   # 1.5x
    default_target_participation_bp: int = 500
    default_duration_days: int = 7
    max_duration_days: int = 30

    # ===========================================
    # Admission policy
    # ===========================================
    # Seconds after end_time during which a goal-met, unfinalized campaign
    # still admits contributions. 0 closes admission at end_time.
    grace_period_seconds: int = 0

    # Utilization thresholds for advisory risk levels
    risk_medium_bp: int = 8000
    risk_high_bp: int = 9500

    @classmethod
    def from_env(cls) -> 'TakeoverConfig':
        """Load takeover policy from environment variables"""
        return cls(
            reward_pool_bp=_int(os.getenv("TAKEOVER_REWARD_POOL_BP", ""), 8000),
            safety_margin_bp=_int(os.getenv("TAKEOVER_SAFETY_MARGIN_BP", ""), 200),
            default_reward_rate_bp=_int(os.getenv("TAKEOVER_DEFAULT_REWARD_RATE_BP", ""), 150),
            default_target_participation_bp=_int(os.getenv("TAKEOVER_DEFAULT_PARTICIPATION_BP", ""), 500),
            default_duration_days=_int(os.getenv("TAKEOVER_DEFAULT_DURATION_DAYS", ""), 7),
            max_duration_days=_int(os.getenv("TAKEOVER_MAX_DURATION_DAYS", ""), 30),
            grace_period_seconds=_int(os.getenv("TAKEOVER_GRACE_PERIOD_SECONDS", ""), 0),
            risk_medium_bp=_int(os.getenv("TAKEOVER_RISK_MEDIUM_BP", ""), 8000),
            risk_high_bp=_int(os.getenv("TAKEOVER_RISK_HIGH_BP", ""), 9500),
        )
