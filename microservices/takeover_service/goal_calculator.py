"""
Goal Calculator

Derives a campaign's funding goal and contribution ceiling. This is the only
place the goal/overflow formulas live; every caller that needs these numbers
goes through it.

Two methods are computed and the smaller one wins:
- participation: the share of original supply the creator asked for
- capacity: the largest total the cushioned reward reserve can pay out

Every floor division here makes its result smaller, so truncation can only
lower the goal or the ceiling.
"""

import logging

from .basis_points import (
    BASIS_POINTS,
    apply_bp,
    complement_bp,
    divide_by_rate,
)
from .models import (
    GoalResult,
    SupplyAllocation,
    MIN_REWARD_RATE_BP,
    MAX_REWARD_RATE_BP,
    MIN_PARTICIPATION_BP,
    MAX_PARTICIPATION_BP,
    SECONDS_PER_DAY,
)
from .protocols import InvalidParametersError

logger = logging.getLogger(__name__)


def _check_int(field: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParametersError(
            f"{field} must be an integer, got {type(value).__name__}", field=field
        )


class GoalCalculator:
    """Funding goal and ceiling calculations"""

    DEFAULT_REWARD_POOL_BP = 8000  # 80% of new supply pays rewards

    @staticmethod
    def validate_parameters(
        original_supply: int,
        target_participation_bp: int,
        reward_rate_bp: int,
        reward_reserve: int,
        safety_margin_bp: int,
    ) -> None:
        """
        Validate campaign configuration.

        Raises:
            InvalidParametersError: naming the first offending field
        """
        _check_int("original_supply", original_supply)
        _check_int("target_participation_bp", target_participation_bp)
        _check_int("reward_rate_bp", reward_rate_bp)
        _check_int("reward_reserve", reward_reserve)
        _check_int("safety_margin_bp", safety_margin_bp)

        if original_supply <= 0:
            raise InvalidParametersError("original_supply must be positive", field="original_supply")
        if reward_reserve <= 0:
            raise InvalidParametersError("reward_reserve must be positive", field="reward_reserve")
        if not MIN_REWARD_RATE_BP <= reward_rate_bp <= MAX_REWARD_RATE_BP:
            raise InvalidParametersError(
                f"reward_rate_bp must be between {MIN_REWARD_RATE_BP} and {MAX_REWARD_RATE_BP} "
                f"(1.0x to 2.0x), got {reward_rate_bp}",
                field="reward_rate_bp",
            )
        if not MIN_PARTICIPATION_BP <= target_participation_bp <= MAX_PARTICIPATION_BP:
            raise InvalidParametersError(
                f"target_participation_bp must be between {MIN_PARTICIPATION_BP} and "
                f"{MAX_PARTICIPATION_BP}, got {target_participation_bp}",
                field="target_participation_bp",
            )
        if not 0 <= safety_margin_bp < BASIS_POINTS:
            raise InvalidParametersError(
                f"safety_margin_bp must be within [0, {BASIS_POINTS}), got {safety_margin_bp}",
                field="safety_margin_bp",
            )

    @staticmethod
    def effective_reserve(reward_reserve: int, safety_margin_bp: int) -> int:
        """Reward reserve minus the safety cushion"""
        return apply_bp(reward_reserve, complement_bp(safety_margin_bp))

    @staticmethod
    def compute_goal(
        original_supply: int,
        target_participation_bp: int,
        reward_rate_bp: int,
        reward_reserve: int,
        safety_margin_bp: int,
    ) -> GoalResult:
        """
        Compute the minimum goal and the contribution ceiling.

        Args:
            original_supply: Original token supply, smallest units
            target_participation_bp: Share of supply the creator targets
            reward_rate_bp: Payout multiplier in hundredths (150 = 1.5x)
            reward_reserve: New tokens reserved to pay rewards
            safety_margin_bp: Share of the reserve never promised

        Returns:
            GoalResult with min_goal = min(participation, capacity) and
            max_safe_contribution = capacity

        Raises:
            InvalidParametersError: On malformed input, or when the inputs are
                too small to produce a positive goal
        """
        GoalCalculator.validate_parameters(
            original_supply,
            target_participation_bp,
            reward_rate_bp,
            reward_reserve,
            safety_margin_bp,
        )

        participation_amount = apply_bp(original_supply, target_participation_bp)
        effective_reserve = GoalCalculator.effective_reserve(reward_reserve, safety_margin_bp)
        capacity_amount = divide_by_rate(effective_reserve, reward_rate_bp)

        min_goal = min(participation_amount, capacity_amount)
        if min_goal <= 0:
            raise InvalidParametersError(
                "Parameters yield a zero funding goal; supply or reserve is too small",
                field="min_goal",
            )

        logger.debug(
            f"Goal computed: participation={participation_amount}, capacity={capacity_amount}, "
            f"min_goal={min_goal}"
        )

        return GoalResult(
            min_goal=min_goal,
            max_safe_contribution=capacity_amount,
            participation_amount=participation_amount,
            capacity_amount=capacity_amount,
            effective_reserve=effective_reserve,
        )

    @staticmethod
    def allocate_supply(
        new_token_supply: int, reward_pool_bp: int = DEFAULT_REWARD_POOL_BP
    ) -> SupplyAllocation:
        """
        Split the new token supply into the reward reserve and liquidity pool.

        The liquidity pool takes the remainder, so the two always sum to the
        full supply.
        """
        _check_int("new_token_supply", new_token_supply)
        _check_int("reward_pool_bp", reward_pool_bp)
        if new_token_supply <= 0:
            raise InvalidParametersError("new_token_supply must be positive", field="new_token_supply")
        if not 0 < reward_pool_bp <= BASIS_POINTS:
            raise InvalidParametersError(
                f"reward_pool_bp must be within (0, {BASIS_POINTS}]", field="reward_pool_bp"
            )

        reward_reserve = apply_bp(new_token_supply, reward_pool_bp)
        return SupplyAllocation(
            total_supply=new_token_supply,
            reward_reserve=reward_reserve,
            liquidity_pool=new_token_supply - reward_reserve,
        )

    @staticmethod
    def validate_schedule(start_time: int, end_time: int, max_duration_days: int) -> None:
        """
        Validate a campaign window: at least one day, at most max_duration_days.

        Raises:
            InvalidParametersError: If the window is inverted or out of range
        """
        _check_int("start_time", start_time)
        _check_int("end_time", end_time)
        if start_time < 0:
            raise InvalidParametersError("start_time cannot be negative", field="start_time")
        if start_time >= end_time:
            raise InvalidParametersError("start_time must be before end_time", field="end_time")

        duration = end_time - start_time
        if duration < SECONDS_PER_DAY:
            raise InvalidParametersError("Duration must be at least 1 day", field="end_time")
        if duration > max_duration_days * SECONDS_PER_DAY:
            raise InvalidParametersError(
                f"Duration must be between 1 and {max_duration_days} days", field="end_time"
            )


__all__ = ["GoalCalculator"]
