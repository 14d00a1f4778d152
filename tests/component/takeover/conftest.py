"""
Takeover Service Component Test Fixtures

Provides mocks for takeover service component testing:
- MockTakeoverRepository: in-memory TakeoverRepositoryProtocol
- takeover_service: TakeoverService wired to the mocks with a fixed clock
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from core.config.takeover_config import TakeoverConfig
from microservices.takeover_service.models import Campaign, Contribution, ClaimResult
from microservices.takeover_service.takeover_service import TakeoverService
from tests.fixtures import REFERENCE_START


# =============================================================================
# Mock Repository Implementation
# =============================================================================


class MockTakeoverRepository:
    """
    Mock implementation of TakeoverRepositoryProtocol for testing.

    Reads yield to the event loop so unserialized callers would interleave.
    Campaign writes are re-validated, so an overflowing total fails loudly
    the way a database constraint would.
    """

    def __init__(self):
        self.campaigns: Dict[str, Campaign] = {}
        self.contributions: Dict[Tuple[str, str], Contribution] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

        # Simulate another node winning the compare-and-set
        self.lose_finalize_race = False
        self.lose_claim_race = False

        # Track method calls for verification
        self.method_calls = []

    def reset(self):
        """Reset all stored data"""
        self.campaigns.clear()
        self.contributions.clear()
        self._locks.clear()
        self.method_calls.clear()

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    @asynccontextmanager
    async def campaign_lock(self, campaign_id: str):
        """Per-campaign asyncio lock"""
        lock = self._locks.setdefault(campaign_id, asyncio.Lock())
        async with lock:
            yield

    # Campaigns

    async def save_campaign(self, campaign: Campaign) -> Campaign:
        self.method_calls.append(("save_campaign", campaign.campaign_id))
        self.campaigns[campaign.campaign_id] = campaign
        return campaign.model_copy(deep=True)

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        self.method_calls.append(("get_campaign", campaign_id))
        await asyncio.sleep(0)
        campaign = self.campaigns.get(campaign_id)
        return campaign.model_copy(deep=True) if campaign else None

    async def list_open_campaigns(self) -> List[Campaign]:
        return [c.model_copy(deep=True) for c in self.campaigns.values() if not c.finalized]

    async def list_campaigns(self, campaign_ids: List[str]) -> List[Campaign]:
        return [
            self.campaigns[cid].model_copy(deep=True)
            for cid in dict.fromkeys(campaign_ids)
            if cid in self.campaigns
        ]

    async def mark_finalized(self, campaign_id: str, successful: bool) -> bool:
        self.method_calls.append(("mark_finalized", campaign_id, successful))
        campaign = self.campaigns[campaign_id]
        if self.lose_finalize_race:
            self.campaigns[campaign_id] = self._update(campaign, finalized=True, successful=successful)
            return False
        if campaign.finalized:
            return False
        self.campaigns[campaign_id] = self._update(campaign, finalized=True, successful=successful)
        return True

    # Contributions

    async def get_contribution(self, campaign_id: str, contributor: str) -> Optional[Contribution]:
        await asyncio.sleep(0)
        contribution = self.contributions.get((campaign_id, contributor))
        return contribution.model_copy(deep=True) if contribution else None

    async def list_contributions(self, campaign_id: str) -> List[Contribution]:
        return [
            c.model_copy(deep=True)
            for (cid, _), c in self.contributions.items()
            if cid == campaign_id
        ]

    async def list_contributor_contributions(self, contributor: str) -> List[Contribution]:
        return [
            c.model_copy(deep=True)
            for (_, who), c in self.contributions.items()
            if who == contributor
        ]

    async def record_contribution(self, campaign_id: str, contributor: str, amount: int) -> Contribution:
        self.method_calls.append(("record_contribution", campaign_id, contributor, amount))
        await asyncio.sleep(0)

        key = (campaign_id, contributor)
        existing = self.contributions.get(key)
        campaign = self.campaigns[campaign_id]
        self.campaigns[campaign_id] = self._update(
            campaign,
            total_contributed=campaign.total_contributed + amount,
            contributor_count=campaign.contributor_count + (0 if existing else 1),
        )

        if existing:
            contribution = existing.model_copy(update={"amount": existing.amount + amount})
        else:
            contribution = Contribution(
                campaign_id=campaign_id,
                contributor=contributor,
                amount=amount,
                created_at=datetime.now(timezone.utc),
            )
        self.contributions[key] = contribution
        return contribution.model_copy(deep=True)

    async def record_claimable(self, campaign_id: str, claims: List[ClaimResult]) -> int:
        self.method_calls.append(("record_claimable", campaign_id, len(claims)))
        updated = 0
        for claim in claims:
            key = (campaign_id, claim.contributor)
            contribution = self.contributions.get(key)
            if not contribution or contribution.claimed:
                continue
            self.contributions[key] = contribution.model_copy(update={
                "claim_kind": claim.kind,
                "claim_amount": claim.amount,
            })
            updated += 1
        return updated

    async def mark_claimed(self, campaign_id: str, contributor: str, claim: ClaimResult) -> bool:
        self.method_calls.append(("mark_claimed", campaign_id, contributor, claim.amount))
        key = (campaign_id, contributor)
        contribution = self.contributions[key]
        if self.lose_claim_race or contribution.claimed:
            return False
        self.contributions[key] = contribution.model_copy(update={
            "claimed": True,
            "claim_kind": claim.kind,
            "claim_amount": claim.amount,
            "claimed_at": datetime.now(timezone.utc),
        })
        return True

    @staticmethod
    def _update(campaign: Campaign, **changes) -> Campaign:
        return Campaign.model_validate({**campaign.model_dump(), **changes})

    # Test helpers

    def add_campaign(self, campaign: Campaign) -> Campaign:
        self.campaigns[campaign.campaign_id] = campaign
        return campaign


# =============================================================================
# Fixed Clock
# =============================================================================


class FixedClock:
    """Settable clock for the service"""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


# =============================================================================
# Pytest Fixtures
# =============================================================================


@pytest.fixture
def mock_repository() -> MockTakeoverRepository:
    """In-memory takeover repository"""
    return MockTakeoverRepository()


@pytest.fixture
def clock() -> FixedClock:
    """Clock starting one hour into the reference campaign window"""
    return FixedClock(REFERENCE_START + 3600)


@pytest.fixture
def takeover_service(mock_repository, mock_event_bus, clock) -> TakeoverService:
    """TakeoverService with mocked dependencies and default policy"""
    return TakeoverService(
        repository=mock_repository,
        event_bus=mock_event_bus,
        config=TakeoverConfig(),
        clock=clock,
    )
