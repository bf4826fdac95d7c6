"""Tests for protocol fee accounting."""

from decimal import Decimal

import pytest

from eclp.fees import (
    DEFAULT_PROTOCOL_FEE_CONFIG,
    FeeAccountant,
    ProtocolFeeConfig,
    ProtocolFeeProvider,
    ProtocolFeeShares,
    StaticProtocolFeeProvider,
    calc_protocol_fees,
    protocol_fee_config_from_env,
)
from eclp.invariant import UNKNOWN_INVARIANT, KnownInvariant
from tests.helpers import BAL_TREASURY, GYRO_TREASURY, ONE, POOL


def _config(perc: str, gyro_portion: str = "0.5") -> ProtocolFeeConfig:
    return ProtocolFeeConfig(
        protocol_swap_fee_perc=Decimal(perc),
        gyro_portion=Decimal(gyro_portion),
        gyro_treasury=GYRO_TREASURY,
        bal_treasury=BAL_TREASURY,
    )


class TestCalcProtocolFees:
    def test_half_of_growth(self):
        """Invariant 500 -> 600 with a 50% fee on 1000 shares."""
        gyro, bal = calc_protocol_fees(
            500 * ONE, 600 * ONE, 1000 * ONE, Decimal("0.5"), Decimal("0.5")
        )
        # delta_s = 50 * 1000 / 550
        assert gyro + bal == 90_909_090_909_090_909_090
        assert gyro == 45_454_545_454_545_454_545
        assert bal == 45_454_545_454_545_454_545

    def test_protocol_owns_its_share_of_growth(self):
        """After the mint the protocol owns fee_perc * growth / invariant."""
        supply = 1000 * ONE
        gyro, bal = calc_protocol_fees(500 * ONE, 600 * ONE, supply, Decimal("0.2"), Decimal(0))
        owned = Decimal(gyro + bal) / Decimal(supply + gyro + bal)
        expected = Decimal("0.2") * Decimal(100) / Decimal(600)
        assert abs(owned - expected) < Decimal("1e-15")

    def test_no_growth_no_fees(self):
        assert calc_protocol_fees(600 * ONE, 600 * ONE, ONE, Decimal("0.5"), Decimal(0)) == (0, 0)
        assert calc_protocol_fees(600 * ONE, 500 * ONE, ONE, Decimal("0.5"), Decimal(0)) == (0, 0)

    def test_gyro_portion_split(self):
        gyro, bal = calc_protocol_fees(
            500 * ONE, 600 * ONE, 1000 * ONE, Decimal("0.5"), Decimal(1)
        )
        assert bal == 0
        assert gyro > 0

    def test_fee_monotonicity(self):
        """A larger fee percentage never yields fewer total shares."""
        previous_total = -1
        for tenth in range(11):
            gyro, bal = calc_protocol_fees(
                500 * ONE, 537 * ONE, 1234 * ONE, Decimal(tenth) / 10, Decimal("0.3")
            )
            assert gyro + bal >= previous_total
            previous_total = gyro + bal


class TestFeeAccountant:
    def test_zero_fee_short_circuit(self):
        fees = FeeAccountant().due_protocol_fees(
            KnownInvariant(500 * ONE), 600 * ONE, 1000 * ONE, DEFAULT_PROTOCOL_FEE_CONFIG
        )
        assert fees == ProtocolFeeShares.none()
        assert fees.is_zero

    def test_unknown_last_invariant_owes_nothing(self):
        fees = FeeAccountant().due_protocol_fees(
            UNKNOWN_INVARIANT, 600 * ONE, 1000 * ONE, _config("0.5")
        )
        assert fees.is_zero

    def test_fees_carry_treasuries(self):
        fees = FeeAccountant().due_protocol_fees(
            KnownInvariant(500 * ONE), 600 * ONE, 1000 * ONE, _config("0.5")
        )
        assert fees.gyro_treasury == GYRO_TREASURY
        assert fees.bal_treasury == BAL_TREASURY
        assert fees.total == 90_909_090_909_090_909_090


class TestProtocolFeeConfig:
    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="protocol_swap_fee_perc"):
            ProtocolFeeConfig(protocol_swap_fee_perc=Decimal("1.5"))
        with pytest.raises(ValueError, match="gyro_portion"):
            ProtocolFeeConfig(gyro_portion=Decimal("-0.1"))

    def test_static_provider(self):
        provider = StaticProtocolFeeProvider(_config("0.1"))
        assert isinstance(provider, ProtocolFeeProvider)
        assert provider.get_protocol_fee_config(POOL).protocol_swap_fee_perc == Decimal("0.1")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ECLP_PROTOCOL_SWAP_FEE_PERC", "0.25")
        monkeypatch.setenv("ECLP_PROTOCOL_FEE_GYRO_PORTION", "0.4")
        monkeypatch.setenv("ECLP_GYRO_TREASURY", GYRO_TREASURY.upper().replace("0X", "0x"))
        monkeypatch.delenv("ECLP_BAL_TREASURY", raising=False)
        config = protocol_fee_config_from_env()
        assert config.protocol_swap_fee_perc == Decimal("0.25")
        assert config.gyro_portion == Decimal("0.4")
        assert config.gyro_treasury == GYRO_TREASURY
        assert config.bal_treasury == DEFAULT_PROTOCOL_FEE_CONFIG.bal_treasury

    def test_env_defaults_to_no_fees(self, monkeypatch):
        for name in (
            "ECLP_PROTOCOL_SWAP_FEE_PERC",
            "ECLP_PROTOCOL_FEE_GYRO_PORTION",
            "ECLP_GYRO_TREASURY",
            "ECLP_BAL_TREASURY",
        ):
            monkeypatch.delenv(name, raising=False)
        assert protocol_fee_config_from_env() == DEFAULT_PROTOCOL_FEE_CONFIG
