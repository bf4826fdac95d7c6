"""Math engine interface consumed by the pool.

The pool never calls the curve functions directly; it goes through a
`MathEngine`. This keeps the orchestration testable with a scripted engine
and lets the numeric implementation change without touching the accounting.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from . import eclp_math
from .eclp_math import InvariantBracket
from .params import CurveParams, DerivedParams
from .validation import validate_derived_params_limits, validate_params


@runtime_checkable
class MathEngine(Protocol):
    """Protocol for the E-CLP numeric engine.

    All balances and amounts are 18-decimal integers. Every method is a pure
    function of its arguments and raises CurveDomainViolation (or a subclass)
    instead of saturating when inputs fall outside the curve.
    """

    def validate_params(self, params: CurveParams) -> None:
        """Raise InvalidParams if the curve parameters are unusable."""
        ...

    def validate_derived_params_limits(self, params: CurveParams, derived: DerivedParams) -> None:
        """Raise InvalidDerivedParams if the derived parameters are unusable."""
        ...

    def calculate_invariant(
        self, balances: Sequence[int], params: CurveParams, derived: DerivedParams
    ) -> int:
        """Point estimate of the invariant."""
        ...

    def calculate_invariant_with_error(
        self, balances: Sequence[int], params: CurveParams, derived: DerivedParams
    ) -> tuple[int, int]:
        """Point estimate of the invariant and a bound on its error."""
        ...

    def calc_out_given_in(
        self,
        balances: Sequence[int],
        amount_in: int,
        token_in_is_first: bool,
        params: CurveParams,
        derived: DerivedParams,
        invariant: InvariantBracket,
    ) -> int:
        """Output amount for an input amount (fees already deducted)."""
        ...

    def calc_in_given_out(
        self,
        balances: Sequence[int],
        amount_out: int,
        token_in_is_first: bool,
        params: CurveParams,
        derived: DerivedParams,
        invariant: InvariantBracket,
    ) -> int:
        """Input amount for an output amount (fees not included)."""
        ...

    def calculate_price(
        self,
        balances: Sequence[int],
        params: CurveParams,
        derived: DerivedParams,
        invariant: int,
    ) -> int:
        """Spot price of token 0 in units of token 1."""
        ...


class ECLPMathEngine:
    """Default MathEngine backed by eclp.curve.eclp_math."""

    def validate_params(self, params: CurveParams) -> None:
        validate_params(params)

    def validate_derived_params_limits(self, params: CurveParams, derived: DerivedParams) -> None:
        validate_derived_params_limits(params, derived)

    def calculate_invariant(
        self, balances: Sequence[int], params: CurveParams, derived: DerivedParams
    ) -> int:
        return eclp_math.calculate_invariant(balances, params, derived)

    def calculate_invariant_with_error(
        self, balances: Sequence[int], params: CurveParams, derived: DerivedParams
    ) -> tuple[int, int]:
        return eclp_math.calculate_invariant_with_error(balances, params, derived)

    def calc_out_given_in(
        self,
        balances: Sequence[int],
        amount_in: int,
        token_in_is_first: bool,
        params: CurveParams,
        derived: DerivedParams,
        invariant: InvariantBracket,
    ) -> int:
        return eclp_math.calc_out_given_in(
            balances, amount_in, token_in_is_first, params, derived, invariant
        )

    def calc_in_given_out(
        self,
        balances: Sequence[int],
        amount_out: int,
        token_in_is_first: bool,
        params: CurveParams,
        derived: DerivedParams,
        invariant: InvariantBracket,
    ) -> int:
        return eclp_math.calc_in_given_out(
            balances, amount_out, token_in_is_first, params, derived, invariant
        )

    def calculate_price(
        self,
        balances: Sequence[int],
        params: CurveParams,
        derived: DerivedParams,
        invariant: int,
    ) -> int:
        return eclp_math.calculate_price(balances, params, derived, invariant)


DEFAULT_MATH_ENGINE = ECLPMathEngine()
