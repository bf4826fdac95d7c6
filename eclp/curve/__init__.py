"""Elliptic concentrated liquidity (E-CLP) curve.

This package provides the curve parameters, their validation, and the math
engine the pool consumes:
- CurveParams / DerivedParams: immutable curve description
- ECLPMathEngine: invariant, swap and price computations
"""

from .eclp_math import (
    MAX_BALANCES,
    MAX_INVARIANT,
    InvariantBracket,
    calc_in_given_out,
    calc_out_given_in,
    calculate_invariant,
    calculate_invariant_with_error,
    calculate_price,
)
from .engine import DEFAULT_MATH_ENGINE, ECLPMathEngine, MathEngine
from .errors import (
    AssetBoundsExceeded,
    CurveDomainViolation,
    CurveError,
    InvalidDerivedParams,
    InvalidParams,
    MaxBalancesExceeded,
    MaxInvariantExceeded,
)
from .params import CurveParams, DerivedParams, Vector2, derive_params
from .validation import validate_derived_params_limits, validate_params

__all__ = [
    # Parameters
    "CurveParams",
    "DerivedParams",
    "Vector2",
    "derive_params",
    "validate_params",
    "validate_derived_params_limits",
    # Engine
    "MathEngine",
    "ECLPMathEngine",
    "DEFAULT_MATH_ENGINE",
    "InvariantBracket",
    "calculate_invariant",
    "calculate_invariant_with_error",
    "calc_out_given_in",
    "calc_in_given_out",
    "calculate_price",
    "MAX_BALANCES",
    "MAX_INVARIANT",
    # Errors
    "CurveError",
    "InvalidParams",
    "InvalidDerivedParams",
    "CurveDomainViolation",
    "AssetBoundsExceeded",
    "MaxBalancesExceeded",
    "MaxInvariantExceeded",
]
