"""Per-call execution context supplied by the vault."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BlockContext:
    """Block metadata for the action being processed.

    Attributes:
        number: Current block number
        timestamp: Current block timestamp in seconds
    """

    number: int
    timestamp: int
