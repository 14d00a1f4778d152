"""
Contribution Admission

Decides how much of a proposed contribution a campaign can accept. The
ceiling is max_safe_contribution: after any admission,
total_contributed + admitted_amount <= max_safe_contribution.

Admission is computed against a snapshot and never writes. The host must
hold the campaign lock from reading the snapshot until the admitted amount
is persisted; otherwise two callers can both spend the same headroom.
"""

import logging
from typing import Optional

from core.config.takeover_config import TakeoverConfig

from .basis_points import BASIS_POINTS, apply_rate, ratio_bp
from .models import (
    Campaign,
    AdmissionResult,
    RewardEstimate,
    RiskLevel,
)
from .protocols import CampaignClosedError, InvalidAmountError

logger = logging.getLogger(__name__)


class ContributionAdmission:
    """Admission gate for proposed contributions"""

    def __init__(self, config: Optional[TakeoverConfig] = None):
        config = config or TakeoverConfig()
        self.grace_period_seconds = config.grace_period_seconds
        self.risk_medium_bp = config.risk_medium_bp
        self.risk_high_bp = config.risk_high_bp

    # ====================
    # Window checks
    # ====================

    def is_open(self, campaign: Campaign, now: int) -> bool:
        """True when the campaign accepts contributions at `now`"""
        if campaign.finalized or now < campaign.start_time:
            return False
        if now < campaign.end_time:
            return True
        # Grace window: only a goal-met campaign awaiting finalization
        return (
            self.grace_period_seconds > 0
            and campaign.total_contributed >= campaign.min_goal
            and now < campaign.end_time + self.grace_period_seconds
        )

    def _ensure_open(self, campaign: Campaign, now: int) -> None:
        if self.is_open(campaign, now):
            return
        if campaign.finalized:
            reason = "campaign is finalized"
        elif now < campaign.start_time:
            reason = "campaign has not started yet"
        else:
            reason = "campaign has ended"
        raise CampaignClosedError(
            f"Campaign {campaign.campaign_id} is closed: {reason}",
            campaign_id=campaign.campaign_id,
        )

    # ====================
    # Calculations
    # ====================

    @staticmethod
    def headroom(campaign: Campaign) -> int:
        """Remaining safe capacity; never negative"""
        return max(0, campaign.max_safe_contribution - campaign.total_contributed)

    def classify_risk(self, total_after: int, max_safe_contribution: int) -> RiskLevel:
        """
        Advisory risk from post-admission utilization.

        Compared by cross-multiplication so no rounding moves a boundary.
        """
        scaled_total = total_after * BASIS_POINTS
        if scaled_total < self.risk_medium_bp * max_safe_contribution:
            return RiskLevel.LOW
        if scaled_total < self.risk_high_bp * max_safe_contribution:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    def admit(self, campaign: Campaign, proposed_amount: int, now: int) -> AdmissionResult:
        """
        Admit, scale down, or reject a proposed contribution.

        Args:
            campaign: Current campaign snapshot
            proposed_amount: Amount the contributor offers, smallest units
            now: Current time, unix seconds

        Returns:
            AdmissionResult. A full campaign yields rejected=True with
            admitted_amount=0; an oversized proposal is trimmed to the
            remaining headroom with scaled=True.

        Raises:
            CampaignClosedError: If finalized or outside the admission window
            InvalidAmountError: If proposed_amount is not a positive int
        """
        self._ensure_open(campaign, now)

        if isinstance(proposed_amount, bool) or not isinstance(proposed_amount, int):
            raise InvalidAmountError(
                f"Contribution amount must be an integer, got {type(proposed_amount).__name__}",
                amount=proposed_amount,
            )
        if proposed_amount <= 0:
            raise InvalidAmountError("Contribution amount must be positive", amount=proposed_amount)

        headroom = campaign.max_safe_contribution - campaign.total_contributed
        scaled = False
        rejected = False

        if headroom <= 0:
            admitted = 0
            rejected = True
            logger.info(f"Campaign {campaign.campaign_id} is at its safety ceiling, rejecting {proposed_amount}")
        elif proposed_amount <= headroom:
            admitted = proposed_amount
        else:
            admitted = headroom
            scaled = True
            logger.info(
                f"Scaling contribution to campaign {campaign.campaign_id}: "
                f"proposed={proposed_amount}, admitted={admitted}"
            )

        total_after = campaign.total_contributed + admitted
        return AdmissionResult(
            proposed_amount=proposed_amount,
            admitted_amount=admitted,
            scaled=scaled,
            rejected=rejected,
            risk_level=self.classify_risk(total_after, campaign.max_safe_contribution),
            headroom_before=max(0, headroom),
            utilization_bp=ratio_bp(total_after, campaign.max_safe_contribution),
        )

    def estimate_reward(self, campaign: Campaign, amount: int) -> RewardEstimate:
        """
        Preview the reward a contribution would earn on success.

        Uses the amount admission would accept right now; does not check the
        admission window.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError("Contribution amount must be a positive integer", amount=amount)

        admitted = min(amount, self.headroom(campaign))
        return RewardEstimate(
            contribution_amount=amount,
            admitted_amount=admitted,
            reward_amount=apply_rate(admitted, campaign.reward_rate_bp),
            reward_rate_bp=campaign.reward_rate_bp,
        )


__all__ = ["ContributionAdmission"]
