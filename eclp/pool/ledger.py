"""Share ledger collaborator.

The vault framework owns share bookkeeping. The pool only needs to read
balances and supply, and to mint and burn when it commits an action.
"""

from typing import Protocol, runtime_checkable

import structlog

from eclp.safe_int import S

from .errors import InsufficientShares

logger = structlog.get_logger()


@runtime_checkable
class ShareLedger(Protocol):
    """Protocol for pool share bookkeeping."""

    def total_supply(self) -> int:
        """Total minted shares."""
        ...

    def balance_of(self, address: str) -> int:
        """Shares held by `address`."""
        ...

    def mint(self, address: str, amount: int) -> None:
        """Create `amount` shares for `address`."""
        ...

    def burn(self, address: str, amount: int) -> None:
        """Destroy `amount` shares held by `address`."""
        ...


class InMemoryShareLedger:
    """Dictionary-backed ledger for a single pool."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._total_supply = 0

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(address.lower(), 0)

    def mint(self, address: str, amount: int) -> None:
        key = address.lower()
        balance = (S(self._balances.get(key, 0)) + amount).to_uint256()
        total_supply = (S(self._total_supply) + amount).to_uint256()
        self._balances[key] = balance
        self._total_supply = total_supply
        logger.debug("shares_minted", address=key, amount=amount, total_supply=self._total_supply)

    def burn(self, address: str, amount: int) -> None:
        """Destroy shares.

        Raises:
            InsufficientShares: If `address` holds fewer than `amount` shares
        """
        key = address.lower()
        balance = self._balances.get(key, 0)
        if balance < amount:
            raise InsufficientShares(f"{key} holds {balance} shares, cannot burn {amount}")
        self._balances[key] = balance - amount
        self._total_supply = int(S(self._total_supply) - amount)
        logger.debug("shares_burned", address=key, amount=amount, total_supply=self._total_supply)
