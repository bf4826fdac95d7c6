"""Tests for the in-memory share ledger."""

import pytest

from eclp.pool import InMemoryShareLedger, InsufficientShares, ShareLedger
from eclp.safe_int import UINT256_MAX, Uint256Overflow
from tests.helpers import ALICE, BOB


@pytest.fixture
def ledger() -> InMemoryShareLedger:
    ledger = InMemoryShareLedger()
    ledger.mint(ALICE, 1000)
    return ledger


class TestInMemoryShareLedger:
    def test_satisfies_protocol(self, ledger):
        assert isinstance(ledger, ShareLedger)

    def test_mint_updates_balance_and_supply(self, ledger):
        ledger.mint(BOB, 250)
        assert ledger.balance_of(BOB) == 250
        assert ledger.total_supply() == 1250

    def test_addresses_are_case_insensitive(self, ledger):
        assert ledger.balance_of(ALICE.upper().replace("0X", "0x")) == 1000

    def test_burn(self, ledger):
        ledger.burn(ALICE, 400)
        assert ledger.balance_of(ALICE) == 600
        assert ledger.total_supply() == 600

    def test_burn_more_than_held(self, ledger):
        ledger.mint(BOB, 5000)
        with pytest.raises(InsufficientShares):
            ledger.burn(ALICE, 1001)
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.total_supply() == 6000

    def test_unknown_address_has_no_shares(self, ledger):
        assert ledger.balance_of(BOB) == 0
        with pytest.raises(InsufficientShares):
            ledger.burn(BOB, 1)

    def test_mint_overflow(self, ledger):
        with pytest.raises(Uint256Overflow):
            ledger.mint(BOB, UINT256_MAX)
        assert ledger.total_supply() == 1000

    def test_mint_negative(self, ledger):
        with pytest.raises(Uint256Overflow):
            ledger.mint(BOB, -1)
