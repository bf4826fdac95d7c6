"""E-CLP invariant and swap math.

The curve is the lower-left arc of the ellipse

    ||A (t - r chi)|| = r,    A = [[c/lambda, -s/lambda], [s, c]]

where t = (x, y) are the pool balances and r is the invariant. chi places the
ellipse so that the arc meets the y axis at price beta and the x axis at price
alpha:

    chi = (lambda c tau_beta.x + s tau_beta.y, -lambda s tau_alpha.x + c tau_alpha.y)

Everything is computed with 38-decimal integers and rounded to 18 decimals
at the end, in the direction that favors the pool.

IMPORTANT: Swap functions must be given an invariant bracket whose upper side
overestimates the true invariant. They solve the curve with the upper side,
which overestimates the balance being solved for and therefore underpays
outputs and overcharges inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from eclp.math.signed_fixed_point import (
    ONE,
    ONE_XP,
    div_xp,
    from_xp_down,
    from_xp_up,
    mul_xp,
    sqrt_xp,
    to_xp,
)

from .errors import (
    AssetBoundsExceeded,
    CurveDomainViolation,
    MaxBalancesExceeded,
    MaxInvariantExceeded,
)
from .params import CurveParams, DerivedParams, Vector2, normalized_rotation
from .validation import a_chi_sq

# 1e16 tokens
MAX_BALANCES = 10**34
# 3e19 tokens
MAX_INVARIANT = 3 * 10**37

# Relative error assumed for the point invariant: 1e-16 at 18 decimals
_INVARIANT_RELATIVE_ERROR = 100


@dataclass(frozen=True)
class InvariantBracket:
    """Two-sided estimate of the invariant, 18 decimals.

    upper overestimates the true invariant and is what swaps solve with;
    lower is the point estimate used for payouts to liquidity providers.
    """

    upper: int
    lower: int

    def __post_init__(self) -> None:
        if self.upper < self.lower:
            raise ValueError(f"Invariant bracket upper {self.upper} < lower {self.lower}")

    @classmethod
    def from_estimate(cls, invariant: int, err: int) -> InvariantBracket:
        """Bracket a point estimate: the error is added twice, to the upper side only."""
        return cls(upper=invariant + 2 * err, lower=invariant)


@dataclass(frozen=True)
class _Geometry:
    """Curve quantities shared by every computation, 38 decimals."""

    c: int
    s: int
    lam: int
    lam_inv_sq: int
    chi: Vector2
    a_chi: Vector2
    q_xx: int
    q_xy: int
    q_yy: int


def _geometry(params: CurveParams, derived: DerivedParams) -> _Geometry:
    c, s = normalized_rotation(params)
    lam = to_xp(params.lam)
    lam_inv_sq = div_xp(ONE_XP, mul_xp(lam, lam))

    chi = Vector2(
        mul_xp(mul_xp(lam, c), derived.tau_beta.x) + mul_xp(s, derived.tau_beta.y),
        -mul_xp(mul_xp(lam, s), derived.tau_alpha.x) + mul_xp(c, derived.tau_alpha.y),
    )
    a_chi = Vector2(
        div_xp(derived.w, lam) + derived.z,
        mul_xp(lam, derived.u) + derived.v,
    )

    # Q = A^T A, the quadratic form of the ellipse; det(Q) = 1 / lambda^2
    c_sq = mul_xp(c, c)
    s_sq = mul_xp(s, s)
    return _Geometry(
        c=c,
        s=s,
        lam=lam,
        lam_inv_sq=lam_inv_sq,
        chi=chi,
        a_chi=a_chi,
        q_xx=mul_xp(c_sq, lam_inv_sq) + s_sq,
        q_xy=mul_xp(mul_xp(s, c), ONE_XP - lam_inv_sq),
        q_yy=mul_xp(s_sq, lam_inv_sq) + c_sq,
    )


def _check_balances(balances: Sequence[int]) -> tuple[int, int]:
    if len(balances) != 2:
        raise ValueError(f"E-CLP pools hold exactly two tokens, got {len(balances)} balances")
    x, y = balances
    for i, balance in enumerate((x, y)):
        if balance < 0:
            raise CurveDomainViolation(f"Balance at index {i} is negative: {balance}")
        if balance > MAX_BALANCES:
            raise MaxBalancesExceeded(f"Balance at index {i} exceeds {MAX_BALANCES}: {balance}")
    return x, y


def _invariant_xp(x: int, y: int, g: _Geometry, params: CurveParams, derived: DerivedParams) -> int:
    x = to_xp(x)
    y = to_xp(y)

    at = Vector2(
        div_xp(mul_xp(g.c, x) - mul_xp(g.s, y), g.lam),
        mul_xp(g.s, x) + mul_xp(g.c, y),
    )
    at_a_chi = mul_xp(at.x, g.a_chi.x) + mul_xp(at.y, g.a_chi.y)
    at_at = mul_xp(at.x, at.x) + mul_xp(at.y, at.y)
    denominator = a_chi_sq(params, derived) - ONE_XP

    discriminant = mul_xp(at_a_chi, at_a_chi) - mul_xp(denominator, at_at)
    # Negative only through rounding when the balances sit at a curve endpoint
    root = sqrt_xp(max(discriminant, 0))
    return div_xp(at_a_chi + root, denominator)


def calculate_invariant_with_error(
    balances: Sequence[int],
    params: CurveParams,
    derived: DerivedParams,
) -> tuple[int, int]:
    """Calculate the invariant r for the given balances.

    r = (At.Achi + sqrt((At.Achi)^2 - ((Achi)^2 - 1) (At)^2)) / ((Achi)^2 - 1)

    Args:
        balances: The two balances, 18 decimals
        params: Curve parameters
        derived: Derived parameters

    Returns:
        (invariant, err): the invariant rounded down and a bound on its
        absolute error, both 18 decimals

    Raises:
        MaxBalancesExceeded: If a balance exceeds MAX_BALANCES
        MaxInvariantExceeded: If the bracketed invariant exceeds MAX_INVARIANT
    """
    x, y = _check_balances(balances)
    g = _geometry(params, derived)
    invariant = max(from_xp_down(_invariant_xp(x, y, g, params, derived)), 0)

    err = 1 + (invariant * _INVARIANT_RELATIVE_ERROR + ONE - 1) // ONE
    if invariant + 2 * err > MAX_INVARIANT:
        raise MaxInvariantExceeded(f"Invariant {invariant} exceeds {MAX_INVARIANT}")
    return invariant, err


def calculate_invariant(
    balances: Sequence[int],
    params: CurveParams,
    derived: DerivedParams,
) -> int:
    """Point estimate of the invariant, rounded down."""
    invariant, _ = calculate_invariant_with_error(balances, params, derived)
    return invariant


def _max_balance(g: _Geometry, derived: DerivedParams, r: int, index: int) -> int:
    """Largest balance of token `index` on the curve with invariant r (38 decimals).

    Token 0 peaks at price alpha, token 1 at price beta.
    """
    if index == 0:
        tau_a = derived.tau_alpha
        a_inv_tau_x = mul_xp(mul_xp(g.lam, g.c), tau_a.x) + mul_xp(g.s, tau_a.y)
        return mul_xp(r, g.chi.x - a_inv_tau_x)
    tau_b = derived.tau_beta
    a_inv_tau_y = -mul_xp(mul_xp(g.lam, g.s), tau_b.x) + mul_xp(g.c, tau_b.y)
    return mul_xp(r, g.chi.y - a_inv_tau_y)


def _check_asset_bounds(g: _Geometry, derived: DerivedParams, r: int, new_balance: int, index: int) -> None:
    if new_balance > MAX_BALANCES:
        raise MaxBalancesExceeded(f"Balance {new_balance} exceeds {MAX_BALANCES}")
    max_balance = from_xp_up(_max_balance(g, derived, r, index))
    if new_balance > max_balance:
        raise AssetBoundsExceeded(
            f"Balance of token {index} would reach {new_balance}, curve maximum is {max_balance}"
        )


def _solve_y_given_x(x: int, g: _Geometry, r: int) -> int:
    """Solve the ellipse for y on the lower-left arc (38 decimals).

    With x' = x - r chi.x and y' = y - r chi.y:
        q_yy y'^2 + 2 q_xy x' y' + q_xx x'^2 - r^2 = 0
        y' = (-q_xy x' - sqrt(q_yy r^2 - x'^2 / lambda^2)) / q_yy
    Rounding the square root down overestimates y.
    """
    x_off = x - mul_xp(r, g.chi.x)
    discriminant = mul_xp(g.q_yy, mul_xp(r, r)) - mul_xp(mul_xp(x_off, x_off), g.lam_inv_sq)
    if discriminant < 0:
        raise AssetBoundsExceeded(f"No point on the curve with x = {x}")
    y_off = div_xp(-mul_xp(g.q_xy, x_off) - sqrt_xp(discriminant), g.q_yy)
    return mul_xp(r, g.chi.y) + y_off


def _solve_x_given_y(y: int, g: _Geometry, r: int) -> int:
    """Mirror image of _solve_y_given_x."""
    y_off = y - mul_xp(r, g.chi.y)
    discriminant = mul_xp(g.q_xx, mul_xp(r, r)) - mul_xp(mul_xp(y_off, y_off), g.lam_inv_sq)
    if discriminant < 0:
        raise AssetBoundsExceeded(f"No point on the curve with y = {y}")
    x_off = div_xp(-mul_xp(g.q_xy, y_off) - sqrt_xp(discriminant), g.q_xx)
    return mul_xp(r, g.chi.x) + x_off


def _solve_other(balance: int, solve_for_y: bool, g: _Geometry, r: int) -> int:
    if solve_for_y:
        return _solve_y_given_x(to_xp(balance), g, r)
    return _solve_x_given_y(to_xp(balance), g, r)


def calc_out_given_in(
    balances: Sequence[int],
    amount_in: int,
    token_in_is_first: bool,
    params: CurveParams,
    derived: DerivedParams,
    invariant: InvariantBracket,
) -> int:
    """Calculate output amount for a given input.

    Fee should be subtracted from amount_in BEFORE calling this function.

    Args:
        balances: Current balances, 18 decimals
        amount_in: Input amount after fees, 18 decimals
        token_in_is_first: True if token 0 is sold into the pool
        params: Curve parameters
        derived: Derived parameters
        invariant: Invariant bracket of the current balances

    Returns:
        Output amount, rounded down

    Raises:
        AssetBoundsExceeded: If the new input balance passes the end of the curve
        CurveDomainViolation: If the solved output balance exceeds the current one
    """
    x, y = _check_balances(balances)
    ix_in, ix_out = (0, 1) if token_in_is_first else (1, 0)
    current = (x, y)
    g = _geometry(params, derived)
    r = to_xp(invariant.upper)

    new_balance_in = current[ix_in] + amount_in
    _check_asset_bounds(g, derived, r, new_balance_in, ix_in)

    new_balance_out = max(from_xp_up(_solve_other(new_balance_in, token_in_is_first, g, r)), 0)
    if new_balance_out > current[ix_out]:
        raise CurveDomainViolation(
            f"Solved balance {new_balance_out} exceeds current balance {current[ix_out]}"
        )
    return current[ix_out] - new_balance_out


def calc_in_given_out(
    balances: Sequence[int],
    amount_out: int,
    token_in_is_first: bool,
    params: CurveParams,
    derived: DerivedParams,
    invariant: InvariantBracket,
) -> int:
    """Calculate input amount for a given output.

    Fee should be added to the result AFTER calling this function.

    Returns:
        Input amount before fees, rounded up

    Raises:
        AssetBoundsExceeded: If amount_out exceeds the output balance or the
            solved input balance passes the end of the curve
        CurveDomainViolation: If the solved input balance is below the current one
    """
    x, y = _check_balances(balances)
    ix_in, ix_out = (0, 1) if token_in_is_first else (1, 0)
    current = (x, y)
    g = _geometry(params, derived)
    r = to_xp(invariant.upper)

    if amount_out > current[ix_out]:
        raise AssetBoundsExceeded(f"Output {amount_out} exceeds balance {current[ix_out]}")
    new_balance_out = current[ix_out] - amount_out

    new_balance_in = from_xp_up(_solve_other(new_balance_out, not token_in_is_first, g, r))
    _check_asset_bounds(g, derived, r, new_balance_in, ix_in)
    if new_balance_in < current[ix_in]:
        raise CurveDomainViolation(
            f"Solved balance {new_balance_in} is below current balance {current[ix_in]}"
        )
    return new_balance_in - current[ix_in]


def calculate_price(
    balances: Sequence[int],
    params: CurveParams,
    derived: DerivedParams,
    invariant: int,
) -> int:
    """Spot price of token 0 in units of token 1, 18 decimals.

    The price is the ratio of the components of the ellipse's gradient,
    Q (t - r chi), at the current balances.
    """
    x, y = _check_balances(balances)
    g = _geometry(params, derived)
    r = to_xp(invariant)

    x_off = to_xp(x) - mul_xp(r, g.chi.x)
    y_off = to_xp(y) - mul_xp(r, g.chi.y)
    grad_x = mul_xp(g.q_xx, x_off) + mul_xp(g.q_xy, y_off)
    grad_y = mul_xp(g.q_xy, x_off) + mul_xp(g.q_yy, y_off)
    if grad_y == 0:
        raise CurveDomainViolation("Price is undefined at the current balances")
    return from_xp_down(div_xp(grad_x, grad_y))
