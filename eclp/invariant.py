"""Last-invariant tracking.

The pool remembers the invariant as of its most recent liquidity event so
that invariant growth since then, which can only come from swap fees, can be
charged protocol fees. The remembered value is a tagged union: either Known,
or Unknown after an action that could not compute a trustworthy invariant.
Unknown forces the next action to start from a fresh computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from eclp.safe_int import S


@dataclass(frozen=True)
class KnownInvariant:
    """Invariant as of the last liquidity event, 18 decimals."""

    value: int


@dataclass(frozen=True)
class UnknownInvariant:
    """The last invariant must be recomputed before it is trusted."""


UNKNOWN_INVARIANT = UnknownInvariant()

LastInvariant: TypeAlias = KnownInvariant | UnknownInvariant


def liquidity_invariant_update(
    invariant: int, change_bpt_supply: int, current_bpt_supply: int, is_increase_liq: bool
) -> int:
    """Scale the invariant with the share supply.

    For fee-free proportional joins and exits the invariant moves in step
    with the supply. Joins round the added part down and exits round the
    removed part up, so protocol fees are never over-allocated later.

    Args:
        invariant: Invariant before the action
        change_bpt_supply: Shares minted (join) or burned (exit)
        current_bpt_supply: Share supply before the action
        is_increase_liq: True for joins, False for exits

    Returns:
        Invariant after the action

    Raises:
        DivisionByZero: If current_bpt_supply is zero
        Underflow: If an exit would remove more than the whole invariant
    """
    current = S(invariant)
    if is_increase_liq:
        delta = (current * change_bpt_supply) // current_bpt_supply
        return int(current + delta)
    delta = (current * change_bpt_supply).ceiling_div(current_bpt_supply)
    return int(current - delta)
