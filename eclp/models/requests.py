"""Pydantic models for the requests the vault routes to the pool.

Join and exit requests carry a kind tag in their user data. The models accept
every kind the vault framework knows about; the pool decides which ones it
supports and rejects the rest.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from eclp.models.types import Address, Uint256


class SwapKind(str, Enum):
    """Which side of the swap is fixed."""

    GIVEN_IN = "givenIn"
    GIVEN_OUT = "givenOut"


class JoinKind(str, Enum):
    """Join variants of the vault framework."""

    INIT = "init"
    EXACT_TOKENS_IN_FOR_BPT_OUT = "exactTokensInForBptOut"
    TOKEN_IN_FOR_EXACT_BPT_OUT = "tokenInForExactBptOut"
    ALL_TOKENS_IN_FOR_EXACT_BPT_OUT = "allTokensInForExactBptOut"


class ExitKind(str, Enum):
    """Exit variants of the vault framework."""

    EXACT_BPT_IN_FOR_ONE_TOKEN_OUT = "exactBptInForOneTokenOut"
    EXACT_BPT_IN_FOR_TOKENS_OUT = "exactBptInForTokensOut"
    BPT_IN_FOR_EXACT_TOKENS_OUT = "bptInForExactTokensOut"


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SwapRequest(_RequestModel):
    """A swap routed to the pool.

    `amount` is the fixed side in the token's native decimals: the amount in
    for GIVEN_IN, the amount out for GIVEN_OUT.
    """

    kind: SwapKind
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount: Uint256
    last_change_block: int = Field(default=0, ge=0, alias="lastChangeBlock")


class JoinUserData(_RequestModel):
    """Kind-specific join payload."""

    kind: JoinKind
    amounts_in: list[Uint256] = Field(default_factory=list, alias="amountsIn")
    bpt_amount_out: Uint256 | None = Field(default=None, alias="bptAmountOut")


class ExitUserData(_RequestModel):
    """Kind-specific exit payload.

    Only the proportional exit is supported, so only its share amount is
    modeled; fields of the other kinds are ignored when parsing.
    """

    kind: ExitKind
    bpt_amount_in: Uint256 | None = Field(default=None, alias="bptAmountIn")


class JoinRequest(_RequestModel):
    """A join routed to the pool. Shares are minted to `recipient`."""

    sender: Address
    recipient: Address
    last_change_block: int = Field(default=0, ge=0, alias="lastChangeBlock")
    user_data: JoinUserData = Field(alias="userData")


class ExitRequest(_RequestModel):
    """An exit routed to the pool. Shares are burned from `sender`."""

    sender: Address
    recipient: Address
    last_change_block: int = Field(default=0, ge=0, alias="lastChangeBlock")
    user_data: ExitUserData = Field(alias="userData")
