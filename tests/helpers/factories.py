"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool, make_join_request

    pool = make_pool(engine=ScriptedMathEngine(invariant=500))
    request = make_join_request(bpt_amount_out=100)
"""

from decimal import Decimal
from typing import Any

from eclp.context import BlockContext
from eclp.curve.params import CurveParams
from eclp.models.requests import (
    ExitKind,
    ExitRequest,
    ExitUserData,
    JoinKind,
    JoinRequest,
    JoinUserData,
    SwapKind,
    SwapRequest,
)
from eclp.pool import ECLPPool
from tests.helpers.constants import ALICE, POOL, SYMMETRIC_PARAMS, TOKEN_A, TOKEN_B


def make_pool(
    *,
    params: CurveParams = SYMMETRIC_PARAMS,
    swap_fee: Decimal | str = "0",
    scaling_factors: tuple[int, int] = (1, 1),
    **kwargs: Any,
) -> ECLPPool:
    """Create a pool over (TOKEN_A, TOKEN_B) with sensible defaults.

    Extra keyword arguments go to ECLPPool (engine, ledger, controls, ...).
    """
    return ECLPPool(
        address=POOL,
        tokens=(TOKEN_A, TOKEN_B),
        scaling_factors=scaling_factors,
        params=params,
        swap_fee_percentage=Decimal(swap_fee),
        **kwargs,
    )


def make_block(number: int = 100, timestamp: int = 1_700_000_000) -> BlockContext:
    return BlockContext(number=number, timestamp=timestamp)


def make_init_request(
    amounts_in: list[int], recipient: str = ALICE, kind: JoinKind = JoinKind.INIT
) -> JoinRequest:
    return JoinRequest(
        sender=recipient,
        recipient=recipient,
        user_data=JoinUserData(kind=kind, amounts_in=amounts_in),
    )


def make_join_request(
    bpt_amount_out: int,
    recipient: str = ALICE,
    kind: JoinKind = JoinKind.ALL_TOKENS_IN_FOR_EXACT_BPT_OUT,
    last_change_block: int = 0,
) -> JoinRequest:
    return JoinRequest(
        sender=recipient,
        recipient=recipient,
        last_change_block=last_change_block,
        user_data=JoinUserData(kind=kind, bpt_amount_out=bpt_amount_out),
    )


def make_exit_request(
    bpt_amount_in: int,
    sender: str = ALICE,
    kind: ExitKind = ExitKind.EXACT_BPT_IN_FOR_TOKENS_OUT,
    last_change_block: int = 0,
) -> ExitRequest:
    return ExitRequest(
        sender=sender,
        recipient=sender,
        last_change_block=last_change_block,
        user_data=ExitUserData(kind=kind, bpt_amount_in=bpt_amount_in),
    )


def make_swap_request(
    amount: int,
    kind: SwapKind = SwapKind.GIVEN_IN,
    token_in: str = TOKEN_A,
    token_out: str = TOKEN_B,
    last_change_block: int = 0,
) -> SwapRequest:
    return SwapRequest(
        kind=kind,
        token_in=token_in,
        token_out=token_out,
        amount=amount,
        last_change_block=last_change_block,
    )
