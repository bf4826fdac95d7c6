"""Join and exit results returned to the vault."""

from dataclasses import dataclass, field

from eclp.fees.result import ProtocolFeeShares


@dataclass(frozen=True)
class JoinResult:
    """Outcome of a join.

    Attributes:
        bpt_amount_out: Shares minted to the recipient
        amounts_in: Token amounts the vault must collect, native decimals,
            rounded up
        protocol_fees: Fee shares minted to the treasuries before the join
    """

    bpt_amount_out: int
    amounts_in: list[int]
    protocol_fees: ProtocolFeeShares = field(default_factory=ProtocolFeeShares)


@dataclass(frozen=True)
class ExitResult:
    """Outcome of an exit.

    Attributes:
        bpt_amount_in: Shares burned from the sender
        amounts_out: Token amounts the vault must pay out, native decimals,
            rounded down
        protocol_fees: Fee shares minted to the treasuries before the exit
    """

    bpt_amount_in: int
    amounts_out: list[int]
    protocol_fees: ProtocolFeeShares = field(default_factory=ProtocolFeeShares)
