"""Oracle samples and the ring buffer that stores them.

A sample holds, for each tracked variable, the latest instantaneous value and
its accumulator: the integral of the instantaneous value over time. Time
weighted averages are differences of accumulators divided by elapsed seconds.
All values are low-resolution logs (4 decimals).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BUFFER_SIZE = 1024


class OracleVariable(str, Enum):
    """Variables tracked by the oracle."""

    PAIR_PRICE = "pairPrice"
    BPT_PRICE = "bptPrice"
    INVARIANT = "invariant"


@dataclass(frozen=True)
class Sample:
    """One ring-buffer slot.

    A zero timestamp marks a slot that was never written.
    """

    log_pair_price: int = 0
    acc_log_pair_price: int = 0
    log_bpt_price: int = 0
    acc_log_bpt_price: int = 0
    log_invariant: int = 0
    acc_log_invariant: int = 0
    timestamp: int = 0

    def update(
        self,
        log_pair_price: int,
        log_bpt_price: int,
        log_invariant: int,
        now: int,
    ) -> Sample:
        """Return this sample advanced to `now` with new instantaneous values.

        Accumulators grow by the new value times the elapsed time.
        """
        elapsed = now - self.timestamp
        return Sample(
            log_pair_price=log_pair_price,
            acc_log_pair_price=self.acc_log_pair_price + log_pair_price * elapsed,
            log_bpt_price=log_bpt_price,
            acc_log_bpt_price=self.acc_log_bpt_price + log_bpt_price * elapsed,
            log_invariant=log_invariant,
            acc_log_invariant=self.acc_log_invariant + log_invariant * elapsed,
            timestamp=now,
        )

    def instant(self, variable: OracleVariable) -> int:
        if variable is OracleVariable.PAIR_PRICE:
            return self.log_pair_price
        if variable is OracleVariable.BPT_PRICE:
            return self.log_bpt_price
        return self.log_invariant

    def accumulator(self, variable: OracleVariable) -> int:
        if variable is OracleVariable.PAIR_PRICE:
            return self.acc_log_pair_price
        if variable is OracleVariable.BPT_PRICE:
            return self.acc_log_bpt_price
        return self.acc_log_invariant


def next_index(index: int) -> int:
    return (index + 1) % BUFFER_SIZE


def prev_index(index: int) -> int:
    return (index - 1) % BUFFER_SIZE


class SampleBuffer:
    """Fixed-size circular buffer of samples. Indices wrap around."""

    __slots__ = ("_samples",)

    def __init__(self) -> None:
        self._samples = [Sample()] * BUFFER_SIZE

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index % BUFFER_SIZE]

    def __len__(self) -> int:
        return BUFFER_SIZE

    def write(self, index: int, sample: Sample) -> None:
        self._samples[index % BUFFER_SIZE] = sample
