"""Protocol fee configuration."""

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(frozen=True)
class ProtocolFeeConfig:
    """Protocol fee settings, read fresh for every action.

    Attributes:
        protocol_swap_fee_perc: Share of invariant growth taken as protocol
            fees, in [0, 1]
        gyro_portion: Portion of the protocol fees paid to the Gyro treasury,
            in [0, 1]. The Balancer treasury receives the rest.
        gyro_treasury: Recipient of the Gyro portion
        bal_treasury: Recipient of the remainder
    """

    protocol_swap_fee_perc: Decimal = Decimal(0)
    gyro_portion: Decimal = Decimal(0)
    gyro_treasury: str = ZERO_ADDRESS
    bal_treasury: str = ZERO_ADDRESS

    def __post_init__(self) -> None:
        for name in ("protocol_swap_fee_perc", "gyro_portion"):
            value = getattr(self, name)
            if value < 0 or value > 1:
                raise ValueError(f"{name} must be in range [0, 1], got {value}")


# Default configuration instance (no protocol fees)
DEFAULT_PROTOCOL_FEE_CONFIG = ProtocolFeeConfig()


@runtime_checkable
class ProtocolFeeProvider(Protocol):
    """Source of protocol fee settings for a pool."""

    def get_protocol_fee_config(self, pool_address: str) -> ProtocolFeeConfig:
        """Return the settings that apply to `pool_address` right now."""
        ...


class StaticProtocolFeeProvider:
    """Provider returning the same settings for every pool."""

    def __init__(self, config: ProtocolFeeConfig = DEFAULT_PROTOCOL_FEE_CONFIG) -> None:
        self.config = config

    def get_protocol_fee_config(self, pool_address: str) -> ProtocolFeeConfig:
        return self.config


def protocol_fee_config_from_env() -> ProtocolFeeConfig:
    """Build settings from ECLP_* environment variables, defaulting to no fees."""
    return ProtocolFeeConfig(
        protocol_swap_fee_perc=Decimal(os.environ.get("ECLP_PROTOCOL_SWAP_FEE_PERC", "0")),
        gyro_portion=Decimal(os.environ.get("ECLP_PROTOCOL_FEE_GYRO_PORTION", "0")),
        gyro_treasury=os.environ.get("ECLP_GYRO_TREASURY", ZERO_ADDRESS).lower(),
        bal_treasury=os.environ.get("ECLP_BAL_TREASURY", ZERO_ADDRESS).lower(),
    )
