"""Signed fixed-point helpers for the elliptic curve math.

The curve math works with signed quantities (rotated coordinates, offsets,
quadratic coefficients), which `Bfp` cannot represent since it clamps at zero.
Values come in two precisions:

- 18 decimals (`ONE`): parameters and balances as supplied by callers.
- 38 decimals (`ONE_XP`): extra precision for intermediate results. Rounding
  errors at this precision stay far below one 18-decimal unit even after the
  invariant formula amplifies them.

"Mag" operations round the magnitude of the result (toward zero for down,
away from zero for up), matching on-chain signed fixed-point libraries.
"""

from __future__ import annotations

from math import isqrt

from eclp.math.fixed_point import div_trunc

ONE = 10**18
ONE_XP = 10**38
XP_SCALE = ONE_XP // ONE


def _div_up_mag(numerator: int, denominator: int) -> int:
    if denominator == 0:
        raise ZeroDivisionError("Signed fixed-point division by zero")
    if numerator == 0:
        return 0
    magnitude = (abs(numerator) - 1) // abs(denominator) + 1
    return magnitude if (numerator > 0) == (denominator > 0) else -magnitude


def mul_down_mag(a: int, b: int) -> int:
    return div_trunc(a * b, ONE)


def mul_up_mag(a: int, b: int) -> int:
    return _div_up_mag(a * b, ONE)


def div_down_mag(a: int, b: int) -> int:
    return div_trunc(a * ONE, b)


def div_up_mag(a: int, b: int) -> int:
    return _div_up_mag(a * ONE, b)


def mul_xp(a: int, b: int) -> int:
    """Multiply two 38-decimal values, truncating toward zero."""
    return div_trunc(a * b, ONE_XP)


def div_xp(a: int, b: int) -> int:
    """Divide two 38-decimal values, truncating toward zero."""
    return div_trunc(a * ONE_XP, b)


def to_xp(a: int) -> int:
    """Lift an 18-decimal value to 38 decimals (exact)."""
    return a * XP_SCALE


def from_xp_down(a: int) -> int:
    """Drop a 38-decimal value to 18 decimals, rounding toward -inf."""
    return a // XP_SCALE


def from_xp_up(a: int) -> int:
    """Drop a 38-decimal value to 18 decimals, rounding toward +inf."""
    return -((-a) // XP_SCALE)


def sqrt_xp(a: int) -> int:
    """Square root of a 38-decimal value, rounded down.

    Raises:
        ValueError: If a is negative
    """
    if a < 0:
        raise ValueError(f"Square root of negative value {a}")
    return isqrt(a * ONE_XP)


def sqrt_xp_up(a: int) -> int:
    """Square root of a 38-decimal value, rounded up."""
    if a < 0:
        raise ValueError(f"Square root of negative value {a}")
    scaled = a * ONE_XP
    root = isqrt(scaled)
    if root * root < scaled:
        root += 1
    return root
