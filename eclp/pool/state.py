"""Pool state and the externally owned gates the pool reads."""

from __future__ import annotations

from dataclasses import dataclass, field

from eclp.invariant import UNKNOWN_INVARIANT, LastInvariant
from eclp.oracle.sampler import OracleState
from eclp.safe_int import UINT256_MAX


@dataclass(frozen=True)
class CapConfig:
    """Liquidity cap thresholds, in shares.

    Attributes:
        cap_enabled: Whether joins are checked at all
        per_address_cap: Maximum share balance of any single recipient
        global_cap: Maximum total share supply
    """

    cap_enabled: bool = False
    per_address_cap: int = UINT256_MAX
    global_cap: int = UINT256_MAX


# Default configuration instance (no cap)
DEFAULT_CAP_CONFIG = CapConfig()


@dataclass
class PoolControls:
    """Pause flag and cap settings, owned by the caller and read on every action."""

    paused: bool = False
    cap: CapConfig = DEFAULT_CAP_CONFIG


@dataclass(frozen=True)
class PoolState:
    """Everything the pool itself writes. Replaced wholesale on commit."""

    last_invariant: LastInvariant = UNKNOWN_INVARIANT
    oracle: OracleState = field(default_factory=OracleState)
