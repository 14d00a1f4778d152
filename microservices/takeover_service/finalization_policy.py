"""
Finalization Policy

Open -> ReadyGoalMet | ReadyExpired -> Finalized{Successful | Failed}

A campaign may finalize as soon as its goal is met, or once it has expired.
Finalized is terminal: the committed `successful` flag is never recomputed.
"""

import logging
from typing import Iterable, List, Tuple

from .models import (
    Campaign,
    FinalizationDecision,
    FinalizationOutcome,
    FinalizationReason,
)
from .protocols import AlreadyFinalizedError, FinalizationNotReadyError

logger = logging.getLogger(__name__)


class FinalizationPolicy:
    """Finalization readiness and commit rules"""

    @staticmethod
    def evaluate(campaign: Campaign, now: int) -> FinalizationDecision:
        """
        Decide whether the campaign may finalize at `now`.

        Depends only on total_contributed, min_goal, end_time and now.
        """
        is_goal_met = campaign.total_contributed >= campaign.min_goal
        is_expired = now > campaign.end_time

        if is_goal_met:
            reason = FinalizationReason.GOAL_MET
            outcome = FinalizationOutcome.SUCCESSFUL
        elif is_expired:
            reason = FinalizationReason.EXPIRED
            outcome = FinalizationOutcome.FAILED
        else:
            reason = FinalizationReason.NOT_READY
            outcome = FinalizationOutcome.ACTIVE

        return FinalizationDecision(
            ready=is_goal_met or is_expired,
            reason=reason,
            expected_outcome=outcome,
            is_goal_met=is_goal_met,
            is_expired=is_expired,
        )

    @staticmethod
    def commit(campaign: Campaign, now: int) -> Campaign:
        """
        Produce the finalized snapshot for the host to persist.

        The host must persist it with a compare-and-set on `finalized`.

        Raises:
            AlreadyFinalizedError: If the snapshot is already finalized
            FinalizationNotReadyError: If the goal is unmet and time remains
        """
        if campaign.finalized:
            raise AlreadyFinalizedError(
                f"Campaign {campaign.campaign_id} is already finalized",
                campaign_id=campaign.campaign_id,
                successful=campaign.successful,
            )

        decision = FinalizationPolicy.evaluate(campaign, now)
        if not decision.ready:
            raise FinalizationNotReadyError(
                f"Campaign {campaign.campaign_id} cannot finalize: goal not met and not expired",
                campaign_id=campaign.campaign_id,
            )

        successful = decision.expected_outcome == FinalizationOutcome.SUCCESSFUL
        logger.info(
            f"Finalizing campaign {campaign.campaign_id}: reason={decision.reason.value}, "
            f"successful={successful}"
        )
        return Campaign.model_validate(
            {**campaign.model_dump(), "finalized": True, "successful": successful}
        )

    @staticmethod
    def select_ready(
        campaigns: Iterable[Campaign], now: int
    ) -> List[Tuple[Campaign, FinalizationDecision]]:
        """Unfinalized campaigns that may finalize at `now`, with their decisions"""
        ready = []
        for campaign in campaigns:
            if campaign.finalized:
                continue
            decision = FinalizationPolicy.evaluate(campaign, now)
            if decision.ready:
                ready.append((campaign, decision))
        return ready


__all__ = ["FinalizationPolicy"]
