"""Accounting core of a two-token elliptic concentrated liquidity pool."""

from eclp.context import BlockContext
from eclp.invariant import UNKNOWN_INVARIANT, KnownInvariant, UnknownInvariant
from eclp.pool import ECLPPool, parse_pool_definition

__version__ = "0.1.0"
__all__ = [
    "BlockContext",
    "ECLPPool",
    "KnownInvariant",
    "UnknownInvariant",
    "UNKNOWN_INVARIANT",
    "parse_pool_definition",
    "__version__",
]
