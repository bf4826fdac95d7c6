"""Protocol fees paid in pool shares.

Between two liquidity events the invariant can only grow through swap fees.
The protocol takes a percentage of that growth by minting new shares, sized
so that after the mint the protocol owns exactly its percentage of the growth:

    diff = fee_perc * (current - previous)
    delta_s = diff * supply / (current - diff)

Minting shares leaves the invariant untouched, which is why the pool can
update its last invariant proportionally afterwards.
"""

from decimal import Decimal

import structlog

from eclp.invariant import KnownInvariant, LastInvariant
from eclp.math.fixed_point import Bfp

from .config import ProtocolFeeConfig
from .result import ProtocolFeeShares

logger = structlog.get_logger()


def calc_protocol_fees(
    previous_invariant: int,
    current_invariant: int,
    current_supply: int,
    protocol_swap_fee_perc: Decimal,
    gyro_portion: Decimal,
) -> tuple[int, int]:
    """Split invariant growth into protocol fee shares.

    All steps round down, so the protocol never receives more than its cut.

    Args:
        previous_invariant: Invariant at the last liquidity event
        current_invariant: Invariant before the current action
        current_supply: Share supply before the current action
        protocol_swap_fee_perc: Protocol fee percentage, in [0, 1]
        gyro_portion: Gyro portion of the protocol fees, in [0, 1]

    Returns:
        (gyro_shares, bal_shares)
    """
    if current_invariant <= previous_invariant:
        return 0, 0

    diff = Bfp.from_decimal(protocol_swap_fee_perc).mul_down(
        Bfp(current_invariant - previous_invariant)
    )
    numerator = diff.mul_down(Bfp(current_supply))
    denominator = Bfp(current_invariant - diff.value)
    delta_s = numerator.div_down(denominator)

    gyro_shares = Bfp.from_decimal(gyro_portion).mul_down(delta_s)
    return gyro_shares.value, delta_s.value - gyro_shares.value


class FeeAccountant:
    """Computes the protocol fee shares due before a join or exit."""

    def due_protocol_fees(
        self,
        last_invariant: LastInvariant,
        invariant_before: int,
        supply: int,
        config: ProtocolFeeConfig,
    ) -> ProtocolFeeShares:
        if config.protocol_swap_fee_perc == 0:
            return ProtocolFeeShares.none()

        if not isinstance(last_invariant, KnownInvariant):
            logger.debug("protocol_fees_skipped_unknown_invariant", invariant_before=invariant_before)
            return ProtocolFeeShares.none()

        gyro_shares, bal_shares = calc_protocol_fees(
            last_invariant.value,
            invariant_before,
            supply,
            config.protocol_swap_fee_perc,
            config.gyro_portion,
        )
        logger.debug(
            "protocol_fees_computed",
            last_invariant=last_invariant.value,
            invariant_before=invariant_before,
            supply=supply,
            gyro_shares=gyro_shares,
            bal_shares=bal_shares,
        )
        return ProtocolFeeShares(
            gyro_shares=gyro_shares,
            bal_shares=bal_shares,
            gyro_treasury=config.gyro_treasury,
            bal_treasury=config.bal_treasury,
        )


DEFAULT_FEE_ACCOUNTANT = FeeAccountant()
