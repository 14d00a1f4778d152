"""
Campaign Status

Raw progress figures for display: status, goal progress, headroom and
countdown. Formatting belongs to the presentation layer.
"""

from typing import Optional

from core.config.takeover_config import TakeoverConfig

from .basis_points import BASIS_POINTS, ratio_bp
from .contribution_admission import ContributionAdmission
from .finalization_policy import FinalizationPolicy
from .models import Campaign, CampaignProgress, TakeoverStatus


def derive_status(campaign: Campaign, now: int) -> TakeoverStatus:
    """Display status; a finalized campaign reports its committed outcome"""
    if campaign.finalized:
        return TakeoverStatus.SUCCESSFUL if campaign.successful else TakeoverStatus.FAILED
    if now < campaign.start_time:
        return TakeoverStatus.UPCOMING
    if now >= campaign.end_time:
        return TakeoverStatus.EXPIRED
    return TakeoverStatus.ACTIVE


def describe(
    campaign: Campaign, now: int, config: Optional[TakeoverConfig] = None
) -> CampaignProgress:
    """Build the progress snapshot for one campaign"""
    admission = ContributionAdmission(config)
    decision = FinalizationPolicy.evaluate(campaign, now)

    return CampaignProgress(
        campaign_id=campaign.campaign_id,
        status=derive_status(campaign, now),
        total_contributed=campaign.total_contributed,
        min_goal=campaign.min_goal,
        progress_bp=min(BASIS_POINTS, ratio_bp(campaign.total_contributed, campaign.min_goal)),
        remaining_to_goal=max(0, campaign.min_goal - campaign.total_contributed),
        headroom=admission.headroom(campaign),
        utilization_bp=ratio_bp(campaign.total_contributed, campaign.max_safe_contribution),
        risk_level=admission.classify_risk(
            campaign.total_contributed, campaign.max_safe_contribution
        ),
        time_remaining=max(0, campaign.end_time - now),
        is_goal_met=decision.is_goal_met,
        is_expired=decision.is_expired,
        can_finalize=not campaign.finalized and decision.ready,
    )


__all__ = ["derive_status", "describe"]
