"""Test helpers module for shared test utilities.

- constants: Addresses and curve parameters
- engines: Scripted math engine test double
- factories: Pool and request factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BAL_TREASURY,
    BOB,
    GYRO_TREASURY,
    ONE,
    ONE_PERCENT,
    OTHER_TOKEN,
    POOL,
    STRETCHED_PARAMS,
    SYMMETRIC_PARAMS,
    TOKEN_A,
    TOKEN_B,
)
from tests.helpers.engines import ScriptedMathEngine
from tests.helpers.factories import (
    make_block,
    make_exit_request,
    make_init_request,
    make_join_request,
    make_pool,
    make_swap_request,
)
from tests.helpers.vault import VaultSimulator

__all__ = [
    # Constants
    "POOL",
    "TOKEN_A",
    "TOKEN_B",
    "OTHER_TOKEN",
    "ALICE",
    "BOB",
    "GYRO_TREASURY",
    "BAL_TREASURY",
    "ONE",
    "ONE_PERCENT",
    "SYMMETRIC_PARAMS",
    "STRETCHED_PARAMS",
    # Test doubles
    "ScriptedMathEngine",
    "VaultSimulator",
    # Factories
    "make_pool",
    "make_block",
    "make_init_request",
    "make_join_request",
    "make_exit_request",
    "make_swap_request",
]
