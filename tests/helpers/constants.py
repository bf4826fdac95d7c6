"""Addresses and curve parameters shared by the tests."""

from decimal import Decimal

from eclp.curve.params import CurveParams

POOL = "0x" + "0e" * 20
TOKEN_A = "0x" + "0a" * 20
TOKEN_B = "0x" + "0b" * 20
OTHER_TOKEN = "0x" + "0c" * 20

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
GYRO_TREASURY = "0x" + "67" * 20
BAL_TREASURY = "0x" + "ba" * 20

ONE = 10**18

# 45 degree rotation, no stretch, prices in [0.5, 2]: a circle arc that is
# symmetric around price 1
SYMMETRIC_PARAMS = CurveParams.from_decimals(
    alpha="0.5",
    beta="2",
    c="0.707106781186547524",
    s="0.707106781186547524",
    lam="1",
)

# Same rotation, stretched by 4
STRETCHED_PARAMS = CurveParams.from_decimals(
    alpha="0.5",
    beta="2",
    c="0.707106781186547524",
    s="0.707106781186547524",
    lam="4",
)

ONE_PERCENT = Decimal("0.01")
