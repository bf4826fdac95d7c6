"""Scaling and swap fee helpers.

The curve math runs on 18-decimal amounts. Tokens with fewer decimals are
scaled up on the way in and back down on the way out, each direction rounded
in the pool's favor.
"""

from collections.abc import Sequence
from decimal import Decimal

from eclp.math.fixed_point import Bfp

from .errors import InvalidFeeError, InvalidScalingFactorError, LengthMismatch


def check_scaling_factor(scaling_factor: int) -> None:
    if scaling_factor <= 0:
        raise InvalidScalingFactorError(f"Scaling factor must be positive, got {scaling_factor}")


def check_swap_fee(swap_fee: Decimal) -> None:
    if swap_fee < 0 or swap_fee >= 1:
        raise InvalidFeeError(f"Swap fee must be in range [0, 1), got {swap_fee}")


def scale_up(amount: int, scaling_factor: int) -> Bfp:
    """Scale token amount to 18 decimals for internal math.

    Args:
        amount: Amount in token's native decimals
        scaling_factor: Factor to scale by (e.g., 10^12 for 6-decimal tokens)

    Raises:
        InvalidScalingFactorError: If scaling_factor <= 0
    """
    check_scaling_factor(scaling_factor)
    return Bfp.from_wei(amount * scaling_factor)


def scale_down_down(bfp: Bfp, scaling_factor: int) -> int:
    """Scale 18-decimal result back to token decimals, rounding down."""
    check_scaling_factor(scaling_factor)
    return bfp.value // scaling_factor


def scale_down_up(bfp: Bfp, scaling_factor: int) -> int:
    """Scale 18-decimal result back to token decimals, rounding up."""
    check_scaling_factor(scaling_factor)
    if bfp.value == 0:
        return 0
    return (bfp.value - 1) // scaling_factor + 1


def upscale_amounts(amounts: Sequence[int], scaling_factors: Sequence[int]) -> list[int]:
    """Scale a per-token amount list to 18 decimals.

    Raises:
        LengthMismatch: If the lists differ in length
    """
    if len(amounts) != len(scaling_factors):
        raise LengthMismatch(f"Expected {len(scaling_factors)} amounts, got {len(amounts)}")
    return [scale_up(a, f).value for a, f in zip(amounts, scaling_factors)]


def downscale_amounts_down(amounts: Sequence[int], scaling_factors: Sequence[int]) -> list[int]:
    """Scale 18-decimal amounts back to native decimals, rounding down."""
    return [scale_down_down(Bfp.from_wei(a), f) for a, f in zip(amounts, scaling_factors)]


def downscale_amounts_up(amounts: Sequence[int], scaling_factors: Sequence[int]) -> list[int]:
    """Scale 18-decimal amounts back to native decimals, rounding up."""
    return [scale_down_up(Bfp.from_wei(a), f) for a, f in zip(amounts, scaling_factors)]


def subtract_swap_fee_amount(amount: int, swap_fee: Decimal) -> int:
    """Subtract swap fee from an exact input amount.

    The deducted fee is rounded up, so the retained fee is never smaller
    than computed.

    Args:
        amount: Input amount before fee
        swap_fee: Fee as decimal (e.g., 0.003 for 0.3%), must be in [0, 1)

    Returns:
        Amount after fee deduction

    Raises:
        InvalidFeeError: If swap_fee is not in range [0, 1)
    """
    check_swap_fee(swap_fee)
    amount_bfp = Bfp.from_wei(amount)
    fee_amount = amount_bfp.mul_up(Bfp.from_decimal(swap_fee))
    return amount_bfp.sub(fee_amount).value


def add_swap_fee_amount(amount: int, swap_fee: Decimal) -> int:
    """Gross up a computed input amount for the swap fee.

    Formula: amount_with_fee = amount / (1 - fee), rounded up.

    Raises:
        InvalidFeeError: If swap_fee is not in range [0, 1)
    """
    check_swap_fee(swap_fee)
    complement = Bfp.from_decimal(swap_fee).complement()  # 1 - fee
    return Bfp.from_wei(amount).div_up(complement).value
