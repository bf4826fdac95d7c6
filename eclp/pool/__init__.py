"""E-CLP pool accounting and orchestration.

- ECLPPool: swap, initial join, join and exit entry points
- ShareLedger / InMemoryShareLedger: share bookkeeping collaborator
- PoolControls / CapConfig: pause and cap gates
- parse_pool_definition: build a pool from a PoolDefinition
"""

from .eclp_pool import ECLPPool
from .errors import (
    CapExceeded,
    InsufficientShares,
    InvalidFeeError,
    InvalidScalingFactorError,
    InvalidTokenPair,
    LengthMismatch,
    PoolError,
    PoolPaused,
    UnsupportedExitKind,
    UnsupportedJoinKind,
)
from .ledger import InMemoryShareLedger, ShareLedger
from .parsing import parse_pool_definition
from .results import ExitResult, JoinResult
from .scaling import (
    add_swap_fee_amount,
    scale_down_down,
    scale_down_up,
    scale_up,
    subtract_swap_fee_amount,
)
from .state import DEFAULT_CAP_CONFIG, CapConfig, PoolControls, PoolState

__all__ = [
    # Pool
    "ECLPPool",
    "JoinResult",
    "ExitResult",
    "parse_pool_definition",
    # Collaborators
    "ShareLedger",
    "InMemoryShareLedger",
    "PoolControls",
    "CapConfig",
    "DEFAULT_CAP_CONFIG",
    "PoolState",
    # Scaling
    "scale_up",
    "scale_down_down",
    "scale_down_up",
    "subtract_swap_fee_amount",
    "add_swap_fee_amount",
    # Errors
    "PoolError",
    "InvalidTokenPair",
    "LengthMismatch",
    "UnsupportedJoinKind",
    "UnsupportedExitKind",
    "CapExceeded",
    "PoolPaused",
    "InvalidFeeError",
    "InvalidScalingFactorError",
    "InsufficientShares",
]
