"""
Takeover Service - Business Logic Layer

Drives the funding safety engine against a repository:
- Campaign creation with goal and ceiling derivation
- Serialized contribution admission (campaign lock around read-compute-write)
- Finalization with compare-and-set on `finalized`, then claim initialization
- Claims with compare-and-set on `claimed`
- Auto-finalization sweep and claim listing

The engine modules are pure; every write and every lock lives here.
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from core.config import get_settings
from core.config.takeover_config import TakeoverConfig

from .campaign_status import describe
from .contribution_admission import ContributionAdmission
from .finalization_policy import FinalizationPolicy
from .goal_calculator import GoalCalculator
from .models import (
    Campaign,
    CampaignProgress,
    ClaimKind,
    ClaimResult,
    ClaimSummary,
    ContributionResponse,
    CreateTakeoverRequest,
    FinalizationDecision,
    FinalizationSummary,
    RewardEstimate,
    TakeoverEvent,
    SECONDS_PER_DAY,
)
from .protocols import (
    TakeoverRepositoryProtocol,
    EventBusProtocol,
    TakeoverServiceError,
    AlreadyClaimedError,
    AlreadyFinalizedError,
    CampaignNotFoundError,
    ContributionNotFoundError,
    InvalidParametersError,
)
from .settlement_resolver import SettlementResolver

logger = logging.getLogger(__name__)


class TakeoverService:
    """
    Takeover Service - host orchestration

    Holds no campaign state of its own. Each operation reads a fresh
    snapshot from the repository, asks the engine for a decision, and
    persists it under the repository's serialization primitives.
    """

    def __init__(
        self,
        repository: TakeoverRepositoryProtocol,
        event_bus: Optional[EventBusProtocol] = None,
        config: Optional[TakeoverConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize takeover service with dependencies.

        Args:
            repository: Takeover repository for data access
            event_bus: Event bus for publishing events (optional)
            config: Takeover policy; defaults to the environment settings
            clock: Returns the current unix time in seconds (optional)
        """
        self.repository = repository
        self.event_bus = event_bus
        self.config = config or get_settings().takeover
        self.clock = clock or (lambda: int(time.time()))
        self.admission = ContributionAdmission(self.config)

    def _now(self, now: Optional[int]) -> int:
        return self.clock() if now is None else now

    @staticmethod
    def _normalize_contributor(contributor: str) -> str:
        if not contributor or not contributor.strip():
            raise InvalidParametersError("contributor is required", field="contributor")
        return contributor.strip()

    async def _get_campaign(self, campaign_id: str) -> Campaign:
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
        return campaign

    # ====================
    # Campaign Creation
    # ====================

    async def create_takeover(
        self,
        request: CreateTakeoverRequest,
        authority: str,
        now: Optional[int] = None,
    ) -> Campaign:
        """
        Launch a takeover campaign.

        Splits the new token supply, derives the goal and ceiling, validates
        the schedule, and stores the campaign. Nothing is stored unless every
        check passes.

        Raises:
            InvalidParametersError: If any parameter is malformed
        """
        if not authority or not authority.strip():
            raise InvalidParametersError("authority is required", field="authority")

        now = self._now(now)
        participation_bp = (
            request.target_participation_bp
            if request.target_participation_bp is not None
            else self.config.default_target_participation_bp
        )
        reward_rate_bp = (
            request.reward_rate_bp
            if request.reward_rate_bp is not None
            else self.config.default_reward_rate_bp
        )

        allocation = GoalCalculator.allocate_supply(
            request.new_token_supply, self.config.reward_pool_bp
        )
        goal = GoalCalculator.compute_goal(
            original_supply=request.original_supply,
            target_participation_bp=participation_bp,
            reward_rate_bp=reward_rate_bp,
            reward_reserve=allocation.reward_reserve,
            safety_margin_bp=self.config.safety_margin_bp,
        )

        start_time = request.start_time if request.start_time is not None else now
        if request.end_time is not None and request.duration_days is not None:
            raise InvalidParametersError(
                "Specify either end_time or duration_days, not both", field="duration_days"
            )
        if request.end_time is not None:
            end_time = request.end_time
        else:
            duration_days = (
                request.duration_days
                if request.duration_days is not None
                else self.config.default_duration_days
            )
            end_time = start_time + duration_days * SECONDS_PER_DAY
        GoalCalculator.validate_schedule(start_time, end_time, self.config.max_duration_days)

        campaign = Campaign(
            campaign_id=f"tko_{uuid.uuid4().hex[:16]}",
            authority=authority.strip(),
            token_name=request.token_name,
            original_supply=request.original_supply,
            target_participation_bp=participation_bp,
            reward_rate_bp=reward_rate_bp,
            reward_reserve=allocation.reward_reserve,
            safety_margin_bp=self.config.safety_margin_bp,
            min_goal=goal.min_goal,
            max_safe_contribution=goal.max_safe_contribution,
            start_time=start_time,
            end_time=end_time,
            metadata={
                **request.metadata,
                "new_token_supply": allocation.total_supply,
                "liquidity_pool": allocation.liquidity_pool,
                "capacity_bound": goal.capacity_bound,
            },
        )
        campaign = await self.repository.save_campaign(campaign)

        await self._publish_event("takeover.created", {
            "campaign_id": campaign.campaign_id,
            "authority": campaign.authority,
            "min_goal": campaign.min_goal,
            "max_safe_contribution": campaign.max_safe_contribution,
            "reward_rate_bp": campaign.reward_rate_bp,
            "end_time": campaign.end_time,
        })

        logger.info(
            f"Takeover created: {campaign.campaign_id}, min_goal={campaign.min_goal}, "
            f"max_safe={campaign.max_safe_contribution}"
        )
        return campaign

    async def get_campaign(self, campaign_id: str) -> Campaign:
        """Get campaign by ID"""
        return await self._get_campaign(campaign_id)

    # ====================
    # Contributions
    # ====================

    async def contribute(
        self,
        campaign_id: str,
        contributor: str,
        amount: int,
        now: Optional[int] = None,
    ) -> ContributionResponse:
        """
        Admit a contribution and persist the admitted amount.

        The snapshot read, the admission decision and the write all happen
        under the campaign lock, so concurrent contributions see each other's
        totals. A rejected admission writes nothing.

        Raises:
            CampaignNotFoundError: If the campaign does not exist
            CampaignClosedError: If the campaign is not accepting contributions
            InvalidAmountError: If amount is not a positive int
        """
        contributor = self._normalize_contributor(contributor)
        now = self._now(now)

        async with self.repository.campaign_lock(campaign_id):
            campaign = await self._get_campaign(campaign_id)
            admission = self.admission.admit(campaign, amount, now)

            if admission.rejected:
                existing = await self.repository.get_contribution(campaign_id, contributor)
                return ContributionResponse(
                    campaign_id=campaign_id,
                    contributor=contributor,
                    admission=admission,
                    contribution=existing,
                    total_contributed=campaign.total_contributed,
                )

            contribution = await self.repository.record_contribution(
                campaign_id, contributor, admission.admitted_amount
            )
            total_after = campaign.total_contributed + admission.admitted_amount

        await self._publish_event("takeover.contribution_admitted", {
            "campaign_id": campaign_id,
            "contributor": contributor,
            "proposed_amount": admission.proposed_amount,
            "admitted_amount": admission.admitted_amount,
            "scaled": admission.scaled,
            "risk_level": admission.risk_level.value,
            "total_contributed": total_after,
            "headroom_after": admission.headroom_after,
        })

        logger.info(
            f"Contribution admitted: campaign={campaign_id}, contributor={contributor}, "
            f"admitted={admission.admitted_amount}, total={total_after}"
        )
        return ContributionResponse(
            campaign_id=campaign_id,
            contributor=contributor,
            admission=admission,
            contribution=contribution,
            total_contributed=total_after,
        )

    async def estimate_reward(self, campaign_id: str, amount: int) -> RewardEstimate:
        """Preview the reward for a contribution of `amount`"""
        campaign = await self._get_campaign(campaign_id)
        return self.admission.estimate_reward(campaign, amount)

    # ====================
    # Finalization
    # ====================

    async def evaluate_finalization(
        self, campaign_id: str, now: Optional[int] = None
    ) -> FinalizationDecision:
        """Check whether a campaign may finalize now"""
        campaign = await self._get_campaign(campaign_id)
        return FinalizationPolicy.evaluate(campaign, self._now(now))

    async def finalize(self, campaign_id: str, now: Optional[int] = None) -> Campaign:
        """
        Finalize a campaign exactly once.

        Raises:
            CampaignNotFoundError: If the campaign does not exist
            AlreadyFinalizedError: If it was already finalized, including by a
                concurrent caller that won the compare-and-set
            FinalizationNotReadyError: If the goal is unmet and time remains
        """
        now = self._now(now)

        async with self.repository.campaign_lock(campaign_id):
            campaign = await self._get_campaign(campaign_id)
            finalized = FinalizationPolicy.commit(campaign, now)

            if not await self.repository.mark_finalized(campaign_id, finalized.successful):
                current = await self._get_campaign(campaign_id)
                raise AlreadyFinalizedError(
                    f"Campaign {campaign_id} was finalized concurrently",
                    campaign_id=campaign_id,
                    successful=current.successful,
                )

            claims = SettlementResolver.resolve_all(
                finalized, await self.repository.list_contributions(campaign_id)
            )
            await self.repository.record_claimable(campaign_id, claims)

        await self._publish_event("takeover.finalized", {
            "campaign_id": campaign_id,
            "successful": finalized.successful,
            "total_contributed": finalized.total_contributed,
            "min_goal": finalized.min_goal,
        })
        await self._publish_event("takeover.claims_initialized", {
            "campaign_id": campaign_id,
            "kind": (ClaimKind.REWARD if finalized.successful else ClaimKind.REFUND).value,
            "claim_count": len(claims),
            "total_claimable": sum(claim.amount for claim in claims),
        })

        logger.info(f"Campaign {campaign_id} finalized, successful={finalized.successful}")
        return finalized

    async def auto_finalize(self, now: Optional[int] = None) -> FinalizationSummary:
        """
        Finalize every open campaign that is ready.

        A campaign finalized by someone else mid-sweep is reported in
        `errors` and the sweep continues.
        """
        now = self._now(now)
        campaigns = await self.repository.list_open_campaigns()
        ready = FinalizationPolicy.select_ready(campaigns, now)

        logger.info(f"Found {len(ready)} takeovers ready for auto-finalization")

        summary = FinalizationSummary(total_processed=len(ready))
        for campaign, decision in ready:
            try:
                finalized = await self.finalize(campaign.campaign_id, now)
                summary.finalized.append({
                    "campaign_id": finalized.campaign_id,
                    "successful": finalized.successful,
                    "reason": decision.reason.value,
                })
            except TakeoverServiceError as e:
                logger.warning(f"Failed to auto-finalize {campaign.campaign_id}: {e}")
                summary.errors.append({"campaign_id": campaign.campaign_id, "error": str(e)})

        return summary

    # ====================
    # Claims
    # ====================

    async def claim(self, campaign_id: str, contributor: str) -> ClaimResult:
        """
        Resolve and record a contributor's claim, at most once.

        The returned ClaimResult authorizes the ledger transfer; recording
        it here is what prevents a second payout.

        Raises:
            CampaignNotFoundError: If the campaign does not exist
            ContributionNotFoundError: If the contributor has no contribution
            NotFinalizedError: If the campaign is not finalized
            AlreadyClaimedError: If already claimed, including by a concurrent
                caller that won the compare-and-set
        """
        contributor = self._normalize_contributor(contributor)
        campaign = await self._get_campaign(campaign_id)
        contribution = await self.repository.get_contribution(campaign_id, contributor)
        if not contribution:
            raise ContributionNotFoundError(
                f"No contribution by {contributor} to campaign {campaign_id}"
            )

        result = SettlementResolver.resolve(campaign, contribution)

        if not await self.repository.mark_claimed(campaign_id, contributor, result):
            raise AlreadyClaimedError(
                f"Contribution by {contributor} to {campaign_id} already claimed",
                campaign_id=campaign_id,
                contributor=contributor,
            )

        if result.scaled:
            await self._publish_event("takeover.settlement_scaled", {
                "campaign_id": campaign_id,
                "contributor": contributor,
                "nominal_amount": result.nominal_amount,
                "amount": result.amount,
            })

        await self._publish_event("takeover.claimed", {
            "campaign_id": campaign_id,
            "contributor": contributor,
            "kind": result.kind.value,
            "amount": result.amount,
        })

        logger.info(
            f"Claim recorded: campaign={campaign_id}, contributor={contributor}, "
            f"kind={result.kind.value}, amount={result.amount}"
        )
        return result

    async def get_claims(
        self, contributor: str, include_claimed: bool = False
    ) -> List[ClaimSummary]:
        """List a contributor's positions in finalized campaigns"""
        contributor = self._normalize_contributor(contributor)
        contributions = await self.repository.list_contributor_contributions(contributor)
        if not contributions:
            return []

        campaigns = {
            c.campaign_id: c
            for c in await self.repository.list_campaigns(
                [contribution.campaign_id for contribution in contributions]
            )
        }

        claims = []
        for contribution in contributions:
            campaign = campaigns.get(contribution.campaign_id)
            if not campaign or not campaign.finalized:
                continue

            if contribution.claimed:
                if not include_claimed:
                    continue
                kind = contribution.claim_kind or (
                    ClaimKind.REWARD if campaign.successful else ClaimKind.REFUND
                )
                claimable = 0
            else:
                result = SettlementResolver.resolve(campaign, contribution)
                kind = result.kind
                claimable = result.amount

            claims.append(ClaimSummary(
                campaign_id=campaign.campaign_id,
                token_name=campaign.token_name,
                contribution_amount=contribution.amount,
                kind=kind,
                claimable_amount=claimable,
                claimed=contribution.claimed,
                claim_amount=contribution.claim_amount,
            ))

        return claims

    # ====================
    # Progress
    # ====================

    async def get_progress(
        self, campaign_id: str, now: Optional[int] = None
    ) -> CampaignProgress:
        """Progress figures for display"""
        campaign = await self._get_campaign(campaign_id)
        return describe(campaign, self._now(now), self.config)

    # ====================
    # Events
    # ====================

    async def _publish_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Publish event to event bus"""
        if not self.event_bus:
            return

        try:
            await self.event_bus.publish_event(TakeoverEvent(event_type=event_type, data=data))
        except Exception as e:
            logger.warning(f"Failed to publish event {event_type}: {e}")


__all__ = ["TakeoverService"]
