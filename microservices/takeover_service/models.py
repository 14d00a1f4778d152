"""
Takeover Service Data Models

Pydantic models for takeover campaigns, contributions and the decisions the
funding safety engine returns. Every monetary field is a strict int in the
token's smallest unit; floats, bools and numeric strings are rejected.
"""

from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

from .basis_points import BASIS_POINTS, divide_by_rate


# ====================
# Business Constants
# ====================

MIN_REWARD_RATE_BP = 100   # 1.0x
MAX_REWARD_RATE_BP = 200   # 2.0x
MIN_PARTICIPATION_BP = 1
MAX_PARTICIPATION_BP = BASIS_POINTS
SECONDS_PER_DAY = 86400


# ====================
# Enumerations
# ====================

class RiskLevel(str, Enum):
    """Advisory utilization level after an admission"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ClaimKind(str, Enum):
    """Terminal claim type"""
    REWARD = "reward"
    REFUND = "refund"


class FinalizationOutcome(str, Enum):
    """Outcome a finalization would commit"""
    ACTIVE = "active"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class FinalizationReason(str, Enum):
    """Why a campaign is or is not ready to finalize"""
    GOAL_MET = "goal_met"
    EXPIRED = "expired"
    NOT_READY = "not_ready"


class TakeoverStatus(str, Enum):
    """Display status derived from campaign state and time"""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    EXPIRED = "expired"
    SUCCESSFUL = "successful"
    FAILED = "failed"


# ====================
# Core Data Models
# ====================

class Campaign(BaseModel):
    """
    Takeover campaign snapshot.

    Owned by the host store. The engine reads a snapshot and returns
    decisions; it never mutates one in place.
    """
    campaign_id: str = Field(..., min_length=1, description="Unique campaign identifier")
    authority: Optional[str] = Field(None, description="Creator wallet or account")
    token_name: Optional[str] = Field(None, max_length=100)

    # Supply and rate configuration
    original_supply: StrictInt = Field(..., gt=0, description="Original token supply at creation")
    target_participation_bp: StrictInt = Field(
        ..., ge=MIN_PARTICIPATION_BP, le=MAX_PARTICIPATION_BP,
        description="Share of original supply the creator wants contributed",
    )
    reward_rate_bp: StrictInt = Field(
        ..., ge=MIN_REWARD_RATE_BP, le=MAX_REWARD_RATE_BP,
        description="Payout multiplier in hundredths (150 = 1.5x)",
    )
    reward_reserve: StrictInt = Field(..., gt=0, description="New tokens set aside for rewards")
    safety_margin_bp: StrictInt = Field(..., ge=0, lt=BASIS_POINTS, description="Unpromised cushion")

    # Derived at creation by GoalCalculator
    min_goal: StrictInt = Field(..., gt=0)
    max_safe_contribution: StrictInt = Field(..., gt=0)

    # Mutable state owned by the host
    total_contributed: StrictInt = Field(default=0, ge=0)
    contributor_count: StrictInt = Field(default=0, ge=0)
    start_time: StrictInt = Field(..., ge=0, description="Unix seconds")
    end_time: StrictInt = Field(..., ge=0, description="Unix seconds")
    finalized: bool = False
    successful: bool = False

    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_invariants(self) -> "Campaign":
        """Reject snapshots that break the campaign invariants"""
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        if self.min_goal > self.original_supply:
            raise ValueError("min_goal cannot exceed original_supply")
        if self.max_safe_contribution > divide_by_rate(self.reward_reserve, self.reward_rate_bp):
            raise ValueError("max_safe_contribution exceeds what reward_reserve can pay")
        if self.total_contributed > self.max_safe_contribution:
            raise ValueError("total_contributed exceeds max_safe_contribution")
        if self.successful and not self.finalized:
            raise ValueError("successful is only meaningful once finalized")
        return self


class Contribution(BaseModel):
    """One contributor's admitted total for one campaign"""
    campaign_id: str = Field(..., min_length=1)
    contributor: str = Field(..., min_length=1, max_length=64)
    amount: StrictInt = Field(default=0, ge=0, description="Admitted amount counted toward the total")
    claimed: bool = False
    claim_kind: Optional[ClaimKind] = Field(None, description="Set at finalization")
    claim_amount: Optional[StrictInt] = Field(None, ge=0, description="Claimable at finalization, paid once claimed")
    created_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None

    @field_validator("contributor")
    @classmethod
    def validate_contributor(cls, v):
        """Validate contributor is not blank"""
        if not v.strip():
            raise ValueError("contributor cannot be empty")
        return v.strip()


# ====================
# Engine Results
# ====================

class GoalResult(BaseModel):
    """Funding goal and contribution ceiling for a new campaign"""
    min_goal: int
    max_safe_contribution: int
    participation_amount: int
    capacity_amount: int
    effective_reserve: int

    @property
    def capacity_bound(self) -> bool:
        """True when the reserve, not participation, sets the goal"""
        return self.capacity_amount < self.participation_amount


class SupplyAllocation(BaseModel):
    """Split of the new token supply"""
    total_supply: int
    reward_reserve: int
    liquidity_pool: int


class AdmissionResult(BaseModel):
    """Decision for one proposed contribution"""
    proposed_amount: int
    admitted_amount: int
    scaled: bool = False
    rejected: bool = False
    risk_level: RiskLevel
    headroom_before: int
    utilization_bp: int = Field(..., description="Post-admission utilization of the ceiling")

    @property
    def headroom_after(self) -> int:
        return self.headroom_before - self.admitted_amount


class RewardEstimate(BaseModel):
    """Preview of what a contribution would earn if the campaign succeeds"""
    contribution_amount: int
    admitted_amount: int
    reward_amount: int
    reward_rate_bp: int


class FinalizationDecision(BaseModel):
    """Whether a campaign may finalize now, and how"""
    ready: bool
    reason: FinalizationReason
    expected_outcome: FinalizationOutcome
    is_goal_met: bool
    is_expired: bool


class ClaimResult(BaseModel):
    """Terminal claim for one contribution"""
    campaign_id: str
    contributor: str
    kind: ClaimKind
    amount: int
    nominal_amount: int
    scaled: bool = False


class CampaignProgress(BaseModel):
    """Raw progress figures for the presentation layer"""
    campaign_id: str
    status: TakeoverStatus
    total_contributed: int
    min_goal: int
    progress_bp: int
    remaining_to_goal: int
    headroom: int
    utilization_bp: int
    risk_level: RiskLevel
    time_remaining: int
    is_goal_met: bool
    is_expired: bool
    can_finalize: bool


# ====================
# Service Request/Response Models
# ====================

class CreateTakeoverRequest(BaseModel):
    """Request to launch a takeover campaign"""
    token_name: Optional[str] = Field(None, max_length=100)
    original_supply: StrictInt
    new_token_supply: StrictInt
    target_participation_bp: Optional[StrictInt] = None
    reward_rate_bp: Optional[StrictInt] = None
    start_time: Optional[StrictInt] = None
    end_time: Optional[StrictInt] = None
    duration_days: Optional[StrictInt] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ContributionResponse(BaseModel):
    """Outcome of a contribution attempt"""
    campaign_id: str
    contributor: str
    admission: AdmissionResult
    contribution: Optional[Contribution] = None
    total_contributed: int


class FinalizationSummary(BaseModel):
    """Result of an auto-finalization sweep"""
    finalized: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    total_processed: int = 0


class ClaimSummary(BaseModel):
    """A contributor's claim position in one finalized campaign"""
    campaign_id: str
    token_name: Optional[str] = None
    contribution_amount: int
    kind: ClaimKind
    claimable_amount: int
    claimed: bool
    claim_amount: Optional[int] = None


class TakeoverEvent(BaseModel):
    """Event published to the event bus"""
    event_type: str
    source: str = "takeover_service"
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    # Constants
    "MIN_REWARD_RATE_BP",
    "MAX_REWARD_RATE_BP",
    "MIN_PARTICIPATION_BP",
    "MAX_PARTICIPATION_BP",
    "SECONDS_PER_DAY",
    # Enums
    "RiskLevel",
    "ClaimKind",
    "FinalizationOutcome",
    "FinalizationReason",
    "TakeoverStatus",
    # Core Models
    "Campaign",
    "Contribution",
    # Engine Results
    "GoalResult",
    "SupplyAllocation",
    "AdmissionResult",
    "RewardEstimate",
    "FinalizationDecision",
    "ClaimResult",
    "CampaignProgress",
    # Request/Response
    "CreateTakeoverRequest",
    "ContributionResponse",
    "FinalizationSummary",
    "ClaimSummary",
    "TakeoverEvent",
]
