"""Construction-time validation of curve parameters.

Both checks run once when a pool is built. A pool whose parameters fail
validation never becomes usable.
"""

from __future__ import annotations

import structlog

from eclp.math.signed_fixed_point import ONE, ONE_XP, div_xp, mul_down_mag, mul_xp, to_xp

from .errors import (
    DerivedDsqWrong,
    DerivedTauNotNormalized,
    DerivedUWrong,
    DerivedVWrong,
    DerivedWWrong,
    DerivedZWrong,
    InvariantDenominatorWrong,
    PriceBoundsWrong,
    RotationVectorNotNormalized,
    RotationVectorWrong,
    StretchingFactorWrong,
)
from .params import CurveParams, DerivedParams, Vector2

logger = structlog.get_logger()

# 1e-15 at 18 decimals
_ROTATION_VECTOR_NORM_ACCURACY = 10**3
_MIN_STRETCH_FACTOR = ONE
_MAX_STRETCH_FACTOR = 10**8 * ONE

# 1e-15 at 38 decimals
_DERIVED_TAU_NORM_ACCURACY_XP = 10**23
_DERIVED_DSQ_NORM_ACCURACY_XP = 10**23
# 1e5 at 38 decimals
_MAX_INV_INVARIANT_DENOMINATOR_XP = 10**43


def validate_params(params: CurveParams) -> None:
    """Check the user-facing curve parameters.

    Raises:
        RotationVectorWrong: If c or s is outside [0, 1]
        RotationVectorNotNormalized: If c^2 + s^2 differs from 1 by more than 1e-15
        StretchingFactorWrong: If lambda is outside [1, 1e8]
        PriceBoundsWrong: Unless 0 < alpha < beta
    """
    if not (0 <= params.c <= ONE and 0 <= params.s <= ONE):
        raise RotationVectorWrong(f"Rotation vector ({params.c}, {params.s}) outside [0, 1]")

    norm = mul_down_mag(params.c, params.c) + mul_down_mag(params.s, params.s)
    if abs(norm - ONE) > _ROTATION_VECTOR_NORM_ACCURACY:
        raise RotationVectorNotNormalized(f"c^2 + s^2 = {norm}, expected {ONE}")

    if not (_MIN_STRETCH_FACTOR <= params.lam <= _MAX_STRETCH_FACTOR):
        raise StretchingFactorWrong(f"lambda {params.lam} outside [1, 1e8]")

    if not (0 < params.alpha < params.beta):
        raise PriceBoundsWrong(f"Price bounds alpha={params.alpha} beta={params.beta}")


def _check_unit(vector: Vector2, name: str) -> None:
    norm = mul_xp(vector.x, vector.x) + mul_xp(vector.y, vector.y)
    if abs(norm - ONE_XP) > _DERIVED_TAU_NORM_ACCURACY_XP:
        raise DerivedTauNotNormalized(f"|{name}|^2 = {norm}")


def a_chi_sq(params: CurveParams, derived: DerivedParams) -> int:
    """(A chi)^2 at 38 decimals.

    (A chi).x = w / lambda + z and (A chi).y = lambda u + v.
    """
    lam = to_xp(params.lam)
    a_chi_x = div_xp(derived.w, lam) + derived.z
    a_chi_y = mul_xp(lam, derived.u) + derived.v
    return mul_xp(a_chi_x, a_chi_x) + mul_xp(a_chi_y, a_chi_y)


def validate_derived_params_limits(params: CurveParams, derived: DerivedParams) -> None:
    """Check derived parameters against the bounds the invariant math relies on.

    Raises:
        InvalidDerivedParams: Subclass naming the offending quantity
    """
    _check_unit(derived.tau_alpha, "tau_alpha")
    _check_unit(derived.tau_beta, "tau_beta")

    if abs(derived.u) > ONE_XP:
        raise DerivedUWrong(f"u = {derived.u}")
    if abs(derived.v) > ONE_XP:
        raise DerivedVWrong(f"v = {derived.v}")
    if abs(derived.w) > ONE_XP:
        raise DerivedWWrong(f"w = {derived.w}")
    if abs(derived.z) > ONE_XP:
        raise DerivedZWrong(f"z = {derived.z}")

    if abs(derived.d_sq - ONE_XP) > _DERIVED_DSQ_NORM_ACCURACY_XP:
        raise DerivedDsqWrong(f"d_sq = {derived.d_sq}")

    denominator = a_chi_sq(params, derived) - ONE_XP
    if denominator <= 0:
        raise InvariantDenominatorWrong(f"(A chi)^2 - 1 = {denominator} is not positive")
    mul_denominator = div_xp(ONE_XP, denominator)
    if mul_denominator > _MAX_INV_INVARIANT_DENOMINATOR_XP:
        raise InvariantDenominatorWrong(f"1 / ((A chi)^2 - 1) = {mul_denominator}")

    logger.debug(
        "eclp_params_validated",
        alpha=params.alpha,
        beta=params.beta,
        lam=params.lam,
        invariant_denominator=denominator,
    )
