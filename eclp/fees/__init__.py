"""Protocol fee accounting.

This package converts invariant growth into protocol fee shares:
- ProtocolFeeConfig / ProtocolFeeProvider: per-action fee settings
- FeeAccountant: fee shares due before a join or exit
- ProtocolFeeShares: the computed split between the two treasuries
"""

from .accountant import DEFAULT_FEE_ACCOUNTANT, FeeAccountant, calc_protocol_fees
from .config import (
    DEFAULT_PROTOCOL_FEE_CONFIG,
    ProtocolFeeConfig,
    ProtocolFeeProvider,
    StaticProtocolFeeProvider,
    protocol_fee_config_from_env,
)
from .result import ProtocolFeeShares

__all__ = [
    "ProtocolFeeConfig",
    "DEFAULT_PROTOCOL_FEE_CONFIG",
    "ProtocolFeeProvider",
    "StaticProtocolFeeProvider",
    "protocol_fee_config_from_env",
    "FeeAccountant",
    "DEFAULT_FEE_ACCOUNTANT",
    "calc_protocol_fees",
    "ProtocolFeeShares",
]
