"""
Settlement Resolver

Computes each contributor's terminal claim once a campaign is finalized:
a refund of the admitted amount on failure, or the rate-multiplied reward on
success. The resolver never marks a claim as paid; the host flips `claimed`
with a compare-and-set in the same unit of work as the payout.
"""

import logging
from typing import Iterable, List

from .basis_points import apply_rate, mul_div
from .goal_calculator import GoalCalculator
from .models import (
    Campaign,
    Contribution,
    ClaimKind,
    ClaimResult,
)
from .protocols import (
    AlreadyClaimedError,
    InvalidParametersError,
    NotFinalizedError,
)

logger = logging.getLogger(__name__)


class SettlementResolver:
    """Reward and refund resolution for finalized campaigns"""

    @staticmethod
    def total_owed(campaign: Campaign) -> int:
        """Nominal reward owed across all contributors"""
        return apply_rate(campaign.total_contributed, campaign.reward_rate_bp)

    @staticmethod
    def resolve(campaign: Campaign, contribution: Contribution) -> ClaimResult:
        """
        Resolve the claim for one contribution.

        Raises:
            NotFinalizedError: If the campaign is not finalized
            AlreadyClaimedError: If the contribution was already claimed
            InvalidParametersError: If the contribution is for another campaign
        """
        if contribution.campaign_id != campaign.campaign_id:
            raise InvalidParametersError(
                f"Contribution belongs to campaign {contribution.campaign_id}, "
                f"not {campaign.campaign_id}",
                field="campaign_id",
            )
        if not campaign.finalized:
            raise NotFinalizedError(
                f"Campaign {campaign.campaign_id} is not finalized",
                campaign_id=campaign.campaign_id,
            )
        if contribution.claimed:
            raise AlreadyClaimedError(
                f"Contribution by {contribution.contributor} to {campaign.campaign_id} already claimed",
                campaign_id=campaign.campaign_id,
                contributor=contribution.contributor,
            )

        if not campaign.successful:
            return ClaimResult(
                campaign_id=campaign.campaign_id,
                contributor=contribution.contributor,
                kind=ClaimKind.REFUND,
                amount=contribution.amount,
                nominal_amount=contribution.amount,
            )

        nominal = apply_rate(contribution.amount, campaign.reward_rate_bp)
        total_owed = SettlementResolver.total_owed(campaign)
        effective_reserve = GoalCalculator.effective_reserve(
            campaign.reward_reserve, campaign.safety_margin_bp
        )

        if total_owed <= effective_reserve:
            return ClaimResult(
                campaign_id=campaign.campaign_id,
                contributor=contribution.contributor,
                kind=ClaimKind.REWARD,
                amount=nominal,
                nominal_amount=nominal,
            )

        # Admission should have kept total_owed within the reserve. Reaching
        # this branch means reserve accounting drifted after admission.
        amount = mul_div(nominal, effective_reserve, total_owed)
        logger.warning(
            f"ScaledSettlement: campaign={campaign.campaign_id} total_owed={total_owed} "
            f"effective_reserve={effective_reserve} contributor={contribution.contributor} "
            f"nominal={nominal} paid={amount}"
        )
        return ClaimResult(
            campaign_id=campaign.campaign_id,
            contributor=contribution.contributor,
            kind=ClaimKind.REWARD,
            amount=amount,
            nominal_amount=nominal,
            scaled=True,
        )

    @staticmethod
    def resolve_all(
        campaign: Campaign, contributions: Iterable[Contribution]
    ) -> List[ClaimResult]:
        """Resolve every unclaimed contribution; claimed rows are skipped"""
        return [
            SettlementResolver.resolve(campaign, contribution)
            for contribution in contributions
            if not contribution.claimed
        ]


__all__ = ["SettlementResolver"]
