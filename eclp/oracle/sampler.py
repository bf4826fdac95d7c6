"""Oracle sampling trigger.

The pool calls the sampler on every balance-affecting action. A sample is
written only when the oracle is enabled and the current block is strictly
later than the block in which balances last changed, so several actions in
one block produce at most one sample.

The sampler never writes anything itself. It returns an OracleUpdate that the
pool commits together with the rest of the action, or drops if the action
fails.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import structlog

from eclp.context import BlockContext
from eclp.math.log_compression import to_low_res_log

from .samples import Sample, SampleBuffer, next_index

logger = structlog.get_logger()

# A sample never accumulates data for longer than this
MAX_SAMPLE_DURATION = 120


@dataclass(frozen=True)
class OracleState:
    """Oracle bookkeeping owned by the pool.

    Attributes:
        enabled: Whether samples are recorded
        index: Ring-buffer index of the latest sample
        sample_creation_timestamp: When the latest sample slot was started
        log_invariant: Cached low-res log of the last invariant
        log_total_supply: Cached low-res log of the share supply
    """

    enabled: bool = False
    index: int = 0
    sample_creation_timestamp: int = 0
    log_invariant: int = 0
    log_total_supply: int = 0


@dataclass(frozen=True)
class OracleUpdate:
    """A pending sample write and the oracle state that goes with it."""

    state: OracleState
    index: int
    sample: Sample


def log_spot_price(price: int) -> int:
    """Low-res log of an 18-decimal spot price."""
    return to_low_res_log(price)


def log_invariant_div_supply(invariant: int, log_supply: int) -> int:
    """Low-res log of invariant per share, given the low-res log of the supply."""
    return to_low_res_log(invariant) - log_supply


def process_price_data(
    buffer: SampleBuffer,
    sample_creation_timestamp: int,
    index: int,
    log_pair_price: int,
    log_invariant_per_share: int,
    prior_log_invariant: int,
    now: int,
) -> tuple[int, Sample]:
    """Fold new instantaneous values into the latest sample.

    The latest sample is advanced to `now`. If it was created at least
    MAX_SAMPLE_DURATION seconds ago, the result goes into the next slot
    instead of overwriting the current one.

    Returns:
        (index to write to, sample to write)
    """
    sample = buffer[index].update(log_pair_price, log_invariant_per_share, prior_log_invariant, now)
    if now - sample_creation_timestamp >= MAX_SAMPLE_DURATION:
        index = next_index(index)
    return index, sample


class OracleSampler:
    """Decides whether an action writes a sample and what it writes."""

    def is_due(self, state: OracleState, block: BlockContext, last_change_block: int) -> bool:
        return state.enabled and block.number > last_change_block

    def prepare_update(
        self,
        state: OracleState,
        buffer: SampleBuffer,
        block: BlockContext,
        last_change_block: int,
        spot_price: int,
        invariant: int,
    ) -> OracleUpdate | None:
        """Compute the sample write for an action, or None if none is due.

        Args:
            state: Current oracle state
            buffer: Sample buffer (read only here)
            block: Current block
            last_change_block: Block in which pool balances last changed
            spot_price: Pre-action spot price, 18 decimals
            invariant: Pre-action point invariant, 18 decimals
        """
        if not self.is_due(state, block, last_change_block):
            return None

        new_index, sample = process_price_data(
            buffer,
            state.sample_creation_timestamp,
            state.index,
            log_spot_price(spot_price),
            log_invariant_div_supply(invariant, state.log_total_supply),
            state.log_invariant,
            block.timestamp,
        )

        new_state = state
        if new_index != state.index:
            new_state = replace(
                state, index=new_index, sample_creation_timestamp=block.timestamp
            )

        logger.debug(
            "oracle_sample_prepared",
            index=new_index,
            new_slot=new_index != state.index,
            timestamp=block.timestamp,
            log_pair_price=sample.log_pair_price,
            log_bpt_price=sample.log_bpt_price,
        )
        return OracleUpdate(state=new_state, index=new_index, sample=sample)

    def cache_logs(self, state: OracleState, invariant: int, total_supply: int) -> OracleState:
        """Refresh the cached logs after a liquidity event.

        Only done while the oracle is enabled. Zero values have no log and
        leave the cache untouched.
        """
        if not state.enabled or invariant <= 0 or total_supply <= 0:
            return state
        return replace(
            state,
            log_invariant=to_low_res_log(invariant),
            log_total_supply=to_low_res_log(total_supply),
        )


DEFAULT_ORACLE_SAMPLER = OracleSampler()
