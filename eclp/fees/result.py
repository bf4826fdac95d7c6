"""Protocol fee result types."""

from dataclasses import dataclass

from .config import ZERO_ADDRESS


@dataclass(frozen=True)
class ProtocolFeeShares:
    """Shares owed to the two protocol fee recipients.

    Attributes:
        gyro_shares: Shares minted to the Gyro treasury
        bal_shares: Shares minted to the Balancer treasury
        gyro_treasury: Gyro treasury address
        bal_treasury: Balancer treasury address
    """

    gyro_shares: int = 0
    bal_shares: int = 0
    gyro_treasury: str = ZERO_ADDRESS
    bal_treasury: str = ZERO_ADDRESS

    @property
    def total(self) -> int:
        return self.gyro_shares + self.bal_shares

    @property
    def is_zero(self) -> bool:
        return self.total == 0

    @classmethod
    def none(cls) -> "ProtocolFeeShares":
        """Result for actions that owe no protocol fees."""
        return cls()
