"""
Basis Point Math

Integer fixed-point helpers for every money path in the takeover service.
Ratios are basis points (1/10000). The reward rate is quoted in hundredths
(150 = 1.5x), so it has its own scale. All division floors, and no helper
accepts a float.
"""

BASIS_POINTS = 10000
REWARD_RATE_SCALE = 100


def _require_int(name: str, value) -> None:
    # bool is an int subclass; a flag is never an amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) without leaving integer arithmetic"""
    _require_int("a", a)
    _require_int("b", b)
    _require_int("denominator", denominator)
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (a * b) // denominator


def apply_bp(amount: int, bp: int) -> int:
    """amount * bp / 10000, floored"""
    return mul_div(amount, bp, BASIS_POINTS)


def complement_bp(bp: int) -> int:
    """10000 - bp, for bp in [0, 10000]"""
    _require_int("bp", bp)
    if bp < 0 or bp > BASIS_POINTS:
        raise ValueError(f"basis points must be within [0, {BASIS_POINTS}], got {bp}")
    return BASIS_POINTS - bp


def ratio_bp(numerator: int, denominator: int) -> int:
    """numerator / denominator expressed in basis points, floored"""
    return mul_div(numerator, BASIS_POINTS, denominator)


def apply_rate(amount: int, rate: int) -> int:
    """amount scaled by a reward rate quoted in hundredths, floored"""
    return mul_div(amount, rate, REWARD_RATE_SCALE)


def divide_by_rate(amount: int, rate: int) -> int:
    """floor(amount / multiplier); the result times the multiplier never exceeds amount"""
    return mul_div(amount, REWARD_RATE_SCALE, rate)


__all__ = [
    "BASIS_POINTS",
    "REWARD_RATE_SCALE",
    "mul_div",
    "apply_bp",
    "complement_bp",
    "ratio_bp",
    "apply_rate",
    "divide_by_rate",
]
