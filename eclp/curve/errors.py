"""Elliptic curve error classes.

Parameter errors can only happen at pool construction. Domain violations are
raised by the swap and invariant math and abort the whole action.
"""


class CurveError(Exception):
    """Base error for E-CLP curve operations."""

    pass


class InvalidParams(CurveError):
    """Curve parameters are outside their valid ranges."""

    pass


class RotationVectorWrong(InvalidParams):
    """c or s is outside [0, 1]."""

    pass


class RotationVectorNotNormalized(InvalidParams):
    """c^2 + s^2 is not 1 within tolerance."""

    pass


class StretchingFactorWrong(InvalidParams):
    """lambda is outside [1, 1e8]."""

    pass


class PriceBoundsWrong(InvalidParams):
    """Price bounds must satisfy 0 < alpha < beta."""

    pass


class InvalidDerivedParams(CurveError):
    """Derived parameters are inconsistent with the curve parameters."""

    pass


class DerivedTauNotNormalized(InvalidDerivedParams):
    """tau(alpha) or tau(beta) is not a unit vector within tolerance."""

    pass


class DerivedUWrong(InvalidDerivedParams):
    """|u| exceeds 1."""

    pass


class DerivedVWrong(InvalidDerivedParams):
    """|v| exceeds 1."""

    pass


class DerivedWWrong(InvalidDerivedParams):
    """|w| exceeds 1."""

    pass


class DerivedZWrong(InvalidDerivedParams):
    """|z| exceeds 1."""

    pass


class DerivedDsqWrong(InvalidDerivedParams):
    """d_sq is not 1 within tolerance."""

    pass


class InvariantDenominatorWrong(InvalidDerivedParams):
    """1 / ((A chi)^2 - 1) is too large for a stable invariant computation."""

    pass


class CurveDomainViolation(CurveError):
    """Balances or amounts fall outside the domain of the curve."""

    pass


class AssetBoundsExceeded(CurveDomainViolation):
    """A balance would move past the end of the curve's price range."""

    pass


class MaxBalancesExceeded(CurveDomainViolation):
    """A balance exceeds the supported maximum."""

    pass


class MaxInvariantExceeded(CurveDomainViolation):
    """The invariant exceeds the supported maximum."""

    pass
