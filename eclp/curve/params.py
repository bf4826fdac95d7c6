"""E-CLP curve parameter dataclasses.

The curve is an ellipse in balance space, rotated by an angle phi and
stretched by lambda, truncated to the price range [alpha, beta]. The pool
stores it as two immutable structs assembled once at construction:

- CurveParams: the five user-facing parameters, 18 decimals
- DerivedParams: nine quantities precomputed from them, 38 decimals
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from eclp.math.signed_fixed_point import ONE, ONE_XP, div_xp, mul_xp, sqrt_xp, to_xp


@dataclass(frozen=True)
class Vector2:
    """Signed 2-D point."""

    x: int
    y: int


@dataclass(frozen=True)
class CurveParams:
    """Geometric description of the price curve.

    Attributes:
        alpha: Lower price bound (token 0 priced in token 1), 18 decimals
        beta: Upper price bound, 18 decimals
        c: cos(phi) of the rotation angle, 18 decimals
        s: sin(phi) of the rotation angle, 18 decimals
        lam: Stretch factor lambda (>= 1), 18 decimals
    """

    alpha: int
    beta: int
    c: int
    s: int
    lam: int

    @classmethod
    def from_decimals(
        cls,
        alpha: Decimal | str,
        beta: Decimal | str,
        c: Decimal | str,
        s: Decimal | str,
        lam: Decimal | str,
    ) -> CurveParams:
        """Build parameters from human-readable decimals."""
        return cls(
            alpha=_to_fixed(alpha),
            beta=_to_fixed(beta),
            c=_to_fixed(c),
            s=_to_fixed(s),
            lam=_to_fixed(lam),
        )


@dataclass(frozen=True)
class DerivedParams:
    """Quantities derived from CurveParams, 38 decimals.

    Attributes:
        tau_alpha: Unit vector for price alpha on the untransformed circle
        tau_beta: Unit vector for price beta on the untransformed circle
        u: s c (tau_beta.x - tau_alpha.x)
        v: s^2 tau_beta.y + c^2 tau_alpha.y
        w: s c (tau_beta.y - tau_alpha.y)
        z: c^2 tau_beta.x + s^2 tau_alpha.x
        d_sq: c^2 + s^2 of the supplied (c, s)
    """

    tau_alpha: Vector2
    tau_beta: Vector2
    u: int
    v: int
    w: int
    z: int
    d_sq: int


def _to_fixed(value: Decimal | str) -> int:
    scaled = (Decimal(value) * ONE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(scaled)


def normalized_rotation(params: CurveParams) -> tuple[int, int]:
    """Return (c, s) at 38 decimals, rescaled so that c^2 + s^2 = 1."""
    c = to_xp(params.c)
    s = to_xp(params.s)
    norm = sqrt_xp(mul_xp(c, c) + mul_xp(s, s))
    return div_xp(c, norm), div_xp(s, norm)


def tau(params: CurveParams, price: int) -> Vector2:
    """Unit vector of the circle point whose transformed price is `price`.

    zeta(p) = lambda (c p - s) / (c + s p) maps a price on the ellipse to the
    price on the circle; eta(q) = (q, 1) / sqrt(1 + q^2).
    """
    c, s = normalized_rotation(params)
    lam = to_xp(params.lam)
    px = to_xp(price)

    zeta = div_xp(mul_xp(lam, mul_xp(c, px) - s), c + mul_xp(s, px))
    norm = sqrt_xp(ONE_XP + mul_xp(zeta, zeta))
    return Vector2(div_xp(zeta, norm), div_xp(ONE_XP, norm))


def derive_params(params: CurveParams) -> DerivedParams:
    """Precompute the derived parameters for a curve."""
    c, s = normalized_rotation(params)
    tau_alpha = tau(params, params.alpha)
    tau_beta = tau(params, params.beta)

    sc = mul_xp(s, c)
    c_sq = mul_xp(c, c)
    s_sq = mul_xp(s, s)

    raw_c = to_xp(params.c)
    raw_s = to_xp(params.s)

    return DerivedParams(
        tau_alpha=tau_alpha,
        tau_beta=tau_beta,
        u=mul_xp(sc, tau_beta.x - tau_alpha.x),
        v=mul_xp(s_sq, tau_beta.y) + mul_xp(c_sq, tau_alpha.y),
        w=mul_xp(sc, tau_beta.y - tau_alpha.y),
        z=mul_xp(c_sq, tau_beta.x) + mul_xp(s_sq, tau_alpha.x),
        d_sq=mul_xp(raw_c, raw_c) + mul_xp(raw_s, raw_s),
    )
