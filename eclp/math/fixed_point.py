"""18-decimal fixed-point math for pool accounting.

`Bfp` is the unsigned 18-decimal type used for balances, share amounts and
fee percentages. The log/exp helpers follow Balancer's LogExpMath.sol and are
what the price oracle uses to compress prices and invariants:
https://github.com/balancer-labs/balancer-v2-monorepo/blob/6c9e24e22d0c46cca6dd15861d3d33da61a60b98/pkg/solidity-utils/contracts/math/LogExpMath.sol

All values are stored as integers scaled by 10^18.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar

__all__ = [
    # Classes
    "Bfp",
    # Errors
    "LogExpMathError",
    "OutOfBounds",
    "InvalidExponent",
    # Functions
    "ln",
    "exp",
    # Constants
    "ONE_18",
    "ONE_20",
    "ONE_36",
]

ONE_18 = 10**18
ONE_20 = 10**20
ONE_36 = 10**36

MAX_NATURAL_EXPONENT = 130 * ONE_18
MIN_NATURAL_EXPONENT = -41 * ONE_18

# ln(x) is computed with 36 decimals when x is in (0.9, 1.1)
LN_36_LOWER_BOUND = ONE_18 - 10**17
LN_36_UPPER_BOUND = ONE_18 + 10**17

# x_n = 2^(7-n), a_n = e^x_n, with 18 decimals for n = 0, 1 and 20 for the rest
X_18 = {
    0: 128 * ONE_18,
    1: 64 * ONE_18,
}
A_18 = {
    0: 38877084059945950922200000000000000000000000000000000000,  # e^128
    1: 6235149080811616882910000000,  # e^64
}

X_20 = {
    2: 3_200_000_000_000_000_000_000,
    3: 1_600_000_000_000_000_000_000,
    4: 800_000_000_000_000_000_000,
    5: 400_000_000_000_000_000_000,
    6: 200_000_000_000_000_000_000,
    7: 100_000_000_000_000_000_000,
    8: 50_000_000_000_000_000_000,
    9: 25_000_000_000_000_000_000,
    10: 12_500_000_000_000_000_000,
    11: 6_250_000_000_000_000_000,
}
A_20 = {
    2: 7_896_296_018_268_069_516_100_000_000_000_000,  # e^32
    3: 888_611_052_050_787_263_676_000_000,  # e^16
    4: 298_095_798_704_172_827_474_000,  # e^8
    5: 5_459_815_003_314_423_907_810,  # e^4
    6: 738_905_609_893_065_022_723,  # e^2
    7: 271_828_182_845_904_523_536,  # e^1
    8: 164_872_127_070_012_814_685,  # e^0.5
    9: 128_402_541_668_774_148_407,  # e^0.25
    10: 113_314_845_306_682_631_683,  # e^0.125
    11: 106_449_445_891_785_942_956,  # e^0.0625
}


class LogExpMathError(Exception):
    """Base error for log/exp computations."""

    pass


class OutOfBounds(LogExpMathError):
    """Argument of ln is zero, negative or does not fit in int256."""

    pass


class InvalidExponent(LogExpMathError):
    """Argument of exp is outside [-41, 130]."""

    pass


def div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero.

    Python's // floors toward -inf; on-chain integer division truncates.
    The two only differ when the operands have different signs.

    Raises:
        ZeroDivisionError: If b is zero
    """
    if b == 0:
        raise ZeroDivisionError("Division by zero in div_trunc")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _ln(a: int) -> int:
    """Natural log of a positive 18-decimal value, 18-decimal result.

    Digit extraction against the precomputed powers of e, then an arctanh
    series for the remainder.
    """
    if a < ONE_18:
        # ln(a) = -ln(1/a)
        return -_ln((ONE_18 * ONE_18) // a)

    sum_val = 0

    for i in range(2):
        if a >= A_18[i] * ONE_18:
            a //= A_18[i]
            sum_val += X_18[i]

    # 20 decimals from here on
    sum_val *= 100
    a *= 100

    for i in range(2, 12):
        if a >= A_20[i]:
            a = (a * ONE_20) // A_20[i]
            sum_val += X_20[i]

    # ln(a) = 2 * arctanh((a-1)/(a+1)) = 2 * (z + z^3/3 + z^5/5 + ...)
    z = ((a - ONE_20) * ONE_20) // (a + ONE_20)
    z_squared = (z * z) // ONE_20

    num = z
    series_sum = num
    for i in range(3, 12, 2):
        num = (num * z_squared) // ONE_20
        series_sum += num // i

    series_sum *= 2

    return (sum_val + series_sum) // 100


def _ln_36(x: int) -> int:
    """Natural log with 36-decimal result, for x close to one."""
    x *= ONE_18

    # z is negative for x < 1, so divisions truncate toward zero
    z = div_trunc((x - ONE_36) * ONE_36, x + ONE_36)
    z_squared = div_trunc(z * z, ONE_36)

    num = z
    series_sum = num
    for i in range(3, 16, 2):
        num = div_trunc(num * z_squared, ONE_36)
        series_sum += div_trunc(num, i)

    return series_sum * 2


def ln(a: int) -> int:
    """Natural logarithm of an 18-decimal value.

    Args:
        a: Positive 18-decimal fixed-point value

    Returns:
        ln(a) as a signed 18-decimal fixed-point integer

    Raises:
        OutOfBounds: If a is not positive or does not fit in int256
    """
    if a <= 0 or a >= (1 << 255):
        raise OutOfBounds(f"ln argument {a} out of bounds")
    if LN_36_LOWER_BOUND < a < LN_36_UPPER_BOUND:
        return div_trunc(_ln_36(a), ONE_18)
    return _ln(a)


def exp(x: int) -> int:
    """Compute e^x where x is 18-decimal fixed-point.

    Raises:
        InvalidExponent: If x is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        return (ONE_18 * ONE_18) // exp(-x)

    if x >= X_18[0]:
        x -= X_18[0]
        first_an = A_18[0]
    elif x >= X_18[1]:
        x -= X_18[1]
        first_an = A_18[1]
    else:
        first_an = 1

    x *= 100

    product = ONE_20
    for i in range(2, 10):
        if x >= X_20[i]:
            x -= X_20[i]
            product = (product * A_20[i]) // ONE_20

    # Taylor series up to x^12/12!
    series_sum = ONE_20
    term = x
    series_sum += term
    for i in range(2, 13):
        term = ((term * x) // ONE_20) // i
        series_sum += term

    return (((product * series_sum) // ONE_20) * first_an) // 100


class Bfp:
    """Unsigned 18-decimal fixed-point number stored as int.

    Example: 1.5 is stored as 1_500_000_000_000_000_000. Every operation
    names its rounding direction; callers pick the one that favors the pool.
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: int) -> None:
        self.value = value

    @classmethod
    def from_wei(cls, wei: int) -> Bfp:
        """Create from a raw value already scaled to 18 decimals."""
        return cls(wei)

    @classmethod
    def from_decimal(cls, d: Decimal) -> Bfp:
        """Create from a decimal, scaled by 10^18 with ROUND_HALF_UP.

        Raises:
            ValueError: If d is negative
        """
        if d < 0:
            raise ValueError(f"Bfp.from_decimal requires non-negative input, got {d}")
        scaled = (d * cls.ONE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(scaled))

    @classmethod
    def from_int(cls, i: int) -> Bfp:
        """Create from a whole number of units."""
        return cls(i * cls.ONE)

    def to_decimal(self) -> Decimal:
        return Decimal(self.value) / Decimal(self.ONE)

    def mul_down(self, other: Bfp) -> Bfp:
        """(a * b) // 10^18"""
        return Bfp((self.value * other.value) // self.ONE)

    def mul_up(self, other: Bfp) -> Bfp:
        product = self.value * other.value
        if product == 0:
            return Bfp(0)
        return Bfp((product - 1) // self.ONE + 1)

    def div_down(self, other: Bfp) -> Bfp:
        """(a * 10^18) // b"""
        if other.value == 0:
            raise ZeroDivisionError("Bfp division by zero")
        return Bfp((self.value * self.ONE) // other.value)

    def div_up(self, other: Bfp) -> Bfp:
        if other.value == 0:
            raise ZeroDivisionError("Bfp division by zero")
        numerator = self.value * self.ONE
        if numerator == 0:
            return Bfp(0)
        return Bfp((numerator - 1) // other.value + 1)

    def complement(self) -> Bfp:
        """Return 1 - self, clamped to 0."""
        return Bfp(max(0, self.ONE - self.value))

    def add(self, other: Bfp) -> Bfp:
        return Bfp(self.value + other.value)

    def sub(self, other: Bfp) -> Bfp:
        """Subtract other from self, clamped to 0."""
        result = self.value - other.value
        if result < 0:
            return Bfp(0)
        return Bfp(result)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Bfp):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Bfp({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())
