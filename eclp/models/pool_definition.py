"""Pydantic model for an E-CLP pool definition.

Curve parameters and fees are given as decimal strings so that definitions
can be written by hand without 18-decimal integers.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eclp.models.types import Address, Uint256


class CurveParamsDefinition(BaseModel):
    """Human-readable curve parameters."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    alpha: Decimal
    beta: Decimal
    c: Decimal
    s: Decimal
    lam: Decimal = Field(alias="lambda")


class PoolDefinition(BaseModel):
    """Everything needed to build an ECLPPool."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: Address
    tokens: list[Address]
    scaling_factors: list[Uint256] = Field(alias="scalingFactors")
    swap_fee: Decimal = Field(alias="swapFee")
    params: CurveParamsDefinition
    oracle_enabled: bool = Field(default=False, alias="oracleEnabled")

    @field_validator("tokens")
    @classmethod
    def _two_distinct_tokens(cls, tokens: list[str]) -> list[str]:
        if len(tokens) != 2:
            raise ValueError(f"E-CLP pools hold exactly two tokens, got {len(tokens)}")
        if tokens[0].lower() == tokens[1].lower():
            raise ValueError("Pool tokens must be distinct")
        return tokens
