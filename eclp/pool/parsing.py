"""Building pools from definitions."""

from __future__ import annotations

from typing import Any

import structlog

from eclp.curve.params import CurveParams
from eclp.models.pool_definition import PoolDefinition

from .eclp_pool import ECLPPool

logger = structlog.get_logger()


def parse_pool_definition(data: PoolDefinition | dict[str, Any], **kwargs: Any) -> ECLPPool:
    """Build an ECLPPool from a definition.

    Args:
        data: A PoolDefinition or its JSON-shaped dict
        **kwargs: Collaborators passed through to ECLPPool (engine, ledger,
            controls, fee_provider, ...)

    Raises:
        pydantic.ValidationError: If the dict is not a valid definition
        InvalidParams: If the curve parameters are unusable
        InvalidDerivedParams: If the derived parameters are unusable
    """
    definition = data if isinstance(data, PoolDefinition) else PoolDefinition.model_validate(data)
    p = definition.params
    params = CurveParams.from_decimals(alpha=p.alpha, beta=p.beta, c=p.c, s=p.s, lam=p.lam)

    logger.debug(
        "eclp_pool_definition_parsed",
        pool=definition.address,
        alpha=str(p.alpha),
        beta=str(p.beta),
        lam=str(p.lam),
    )
    return ECLPPool(
        address=definition.address,
        tokens=definition.tokens,
        scaling_factors=definition.scaling_factors,
        params=params,
        swap_fee_percentage=definition.swap_fee,
        oracle_enabled=definition.oracle_enabled,
        **kwargs,
    )
