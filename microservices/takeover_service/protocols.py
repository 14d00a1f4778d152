"""
Takeover Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from typing import Any, AsyncContextManager, List, Optional, Protocol

from .models import (
    Campaign,
    Contribution,
    ClaimResult,
)


# ====================
# Repository Protocol
# ====================


class TakeoverRepositoryProtocol(Protocol):
    """
    Protocol for the takeover data store.

    The store owns all shared state. Implementations must make
    campaign_lock serialize every read-compute-write on one campaign
    (row lock or equivalent), and must implement mark_finalized and
    mark_claimed as compare-and-set operations.
    """

    async def initialize(self) -> None:
        """Initialize repository connection"""
        ...

    async def close(self) -> None:
        """Close repository connection"""
        ...

    def campaign_lock(self, campaign_id: str) -> AsyncContextManager[None]:
        """Serialize read-compute-write on one campaign"""
        ...

    # Campaign operations
    async def save_campaign(self, campaign: Campaign) -> Campaign:
        """Insert a new campaign"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign snapshot by ID"""
        ...

    async def list_open_campaigns(self) -> List[Campaign]:
        """List campaigns that are not yet finalized"""
        ...

    async def list_campaigns(self, campaign_ids: List[str]) -> List[Campaign]:
        """Get several campaigns by ID"""
        ...

    async def mark_finalized(self, campaign_id: str, successful: bool) -> bool:
        """
        Set finalized/successful if the campaign is not finalized yet.

        Returns False when the campaign was already finalized.
        """
        ...

    # Contribution operations
    async def get_contribution(
        self, campaign_id: str, contributor: str
    ) -> Optional[Contribution]:
        """Get one contributor's row for a campaign"""
        ...

    async def list_contributions(self, campaign_id: str) -> List[Contribution]:
        """List all contributions for a campaign"""
        ...

    async def list_contributor_contributions(self, contributor: str) -> List[Contribution]:
        """List a contributor's rows across campaigns"""
        ...

    async def record_contribution(
        self, campaign_id: str, contributor: str, amount: int
    ) -> Contribution:
        """
        Add an admitted amount to the contributor's row and the campaign total
        in one write. Called only while holding campaign_lock.
        """
        ...

    async def record_claimable(self, campaign_id: str, claims: List[ClaimResult]) -> int:
        """
        Store each unclaimed contribution's claim kind and amount at
        finalization. Claimed rows are left untouched.

        Returns the number of rows updated.
        """
        ...

    async def mark_claimed(
        self, campaign_id: str, contributor: str, claim: ClaimResult
    ) -> bool:
        """
        Set claimed and record the claim if not already claimed.

        Returns False when the contribution was already claimed.
        """
        ...


# ====================
# Event Bus Protocol
# ====================


class EventBusProtocol(Protocol):
    """Protocol for event bus operations"""

    async def publish_event(self, event: Any) -> bool:
        """Publish an event to the event bus"""
        ...

    async def close(self) -> None:
        """Close event bus connection"""
        ...


# ====================
# Custom Exceptions
# ====================


class TakeoverServiceError(Exception):
    """Base exception for takeover service errors"""
    pass


class InvalidParametersError(TakeoverServiceError):
    """Raised when a campaign configuration is malformed"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CampaignClosedError(TakeoverServiceError):
    """Raised when a campaign is finalized or outside its admission window"""

    def __init__(self, message: str, campaign_id: Optional[str] = None):
        super().__init__(message)
        self.campaign_id = campaign_id


class InvalidAmountError(TakeoverServiceError):
    """Raised when a proposed contribution amount is not a positive int"""

    def __init__(self, message: str, amount: Any = None):
        super().__init__(message)
        self.amount = amount


class AlreadyFinalizedError(TakeoverServiceError):
    """Raised on a second finalization attempt"""

    def __init__(self, message: str, campaign_id: Optional[str] = None, successful: Optional[bool] = None):
        super().__init__(message)
        self.campaign_id = campaign_id
        self.successful = successful


class FinalizationNotReadyError(TakeoverServiceError):
    """Raised when finalizing a campaign whose goal is unmet and time remains"""

    def __init__(self, message: str, campaign_id: Optional[str] = None):
        super().__init__(message)
        self.campaign_id = campaign_id


class NotFinalizedError(TakeoverServiceError):
    """Raised when resolving a claim before finalization"""

    def __init__(self, message: str, campaign_id: Optional[str] = None):
        super().__init__(message)
        self.campaign_id = campaign_id


class AlreadyClaimedError(TakeoverServiceError):
    """Raised when a contribution has already been claimed"""

    def __init__(self, message: str, campaign_id: Optional[str] = None, contributor: Optional[str] = None):
        super().__init__(message)
        self.campaign_id = campaign_id
        self.contributor = contributor


class CampaignNotFoundError(TakeoverServiceError):
    """Raised when campaign is not found"""
    pass


class ContributionNotFoundError(TakeoverServiceError):
    """Raised when a contributor has no row for a campaign"""
    pass


__all__ = [
    "TakeoverRepositoryProtocol",
    "EventBusProtocol",
    "TakeoverServiceError",
    "InvalidParametersError",
    "CampaignClosedError",
    "InvalidAmountError",
    "AlreadyFinalizedError",
    "FinalizationNotReadyError",
    "NotFinalizedError",
    "AlreadyClaimedError",
    "CampaignNotFoundError",
    "ContributionNotFoundError",
]
