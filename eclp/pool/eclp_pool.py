"""E-CLP pool: the swap, join and exit state machine.

The pool never moves tokens. The vault passes in current balances and block
metadata, and the pool answers with amounts rounded in its own favor. The
only state the pool writes is its last invariant, its oracle bookkeeping and
(through the share ledger) minted and burned shares.

Every action computes everything first and commits in one final step, so an
exception anywhere leaves no visible change. Actions on one pool are
serialized by a lock.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from decimal import Decimal

import structlog

from eclp.context import BlockContext
from eclp.curve.eclp_math import InvariantBracket
from eclp.curve.engine import DEFAULT_MATH_ENGINE, MathEngine
from eclp.curve.params import CurveParams, DerivedParams, derive_params
from eclp.fees.accountant import DEFAULT_FEE_ACCOUNTANT, FeeAccountant
from eclp.fees.config import ProtocolFeeProvider, StaticProtocolFeeProvider
from eclp.fees.result import ProtocolFeeShares
from eclp.invariant import (
    UNKNOWN_INVARIANT,
    KnownInvariant,
    LastInvariant,
    liquidity_invariant_update,
)
from eclp.math.fixed_point import Bfp
from eclp.models.requests import (
    ExitKind,
    ExitRequest,
    JoinKind,
    JoinRequest,
    SwapKind,
    SwapRequest,
)
from eclp.models.types import normalize_address
from eclp.oracle import queries
from eclp.oracle.queries import OracleAccumulatorQuery, OracleAverageQuery
from eclp.oracle.sampler import DEFAULT_ORACLE_SAMPLER, OracleSampler, OracleState, OracleUpdate
from eclp.oracle.samples import OracleVariable, SampleBuffer
from eclp.safe_int import S

from .errors import (
    CapExceeded,
    InsufficientShares,
    InvalidTokenPair,
    LengthMismatch,
    PoolPaused,
    UnsupportedExitKind,
    UnsupportedJoinKind,
)
from .ledger import InMemoryShareLedger, ShareLedger
from .results import ExitResult, JoinResult
from .scaling import (
    add_swap_fee_amount,
    check_scaling_factor,
    check_swap_fee,
    downscale_amounts_down,
    downscale_amounts_up,
    scale_down_down,
    scale_down_up,
    scale_up,
    subtract_swap_fee_amount,
    upscale_amounts,
)
from .state import PoolControls, PoolState

logger = structlog.get_logger()

NUM_TOKENS = 2


class ECLPPool:
    """Two-token pool priced by an elliptic concentrated liquidity curve.

    Args:
        address: Pool address, also the key for protocol fee lookups
        tokens: The two token addresses, in pool order
        scaling_factors: Per-token factors lifting native amounts to 18 decimals
        params: Curve parameters, validated once here
        swap_fee_percentage: Swap fee in [0, 1)
        derived: Precomputed derived parameters; computed from params if omitted
        engine: Numeric engine for invariants, swaps and prices
        ledger: Share bookkeeping; a fresh in-memory ledger if omitted
        controls: Pause flag and cap settings, read on every action
        fee_provider: Source of protocol fee settings, read on every action
        fee_accountant: Protocol fee computation
        oracle_sampler: Oracle sampling trigger
        oracle_enabled: Whether to record oracle samples from the start

    Raises:
        LengthMismatch: Unless exactly two tokens and two scaling factors are given
        InvalidParams: If the curve parameters are unusable
        InvalidDerivedParams: If the derived parameters are unusable
        InvalidFeeError: If the swap fee is outside [0, 1)
    """

    def __init__(
        self,
        address: str,
        tokens: Sequence[str],
        scaling_factors: Sequence[int],
        params: CurveParams,
        swap_fee_percentage: Decimal,
        *,
        derived: DerivedParams | None = None,
        engine: MathEngine = DEFAULT_MATH_ENGINE,
        ledger: ShareLedger | None = None,
        controls: PoolControls | None = None,
        fee_provider: ProtocolFeeProvider | None = None,
        fee_accountant: FeeAccountant = DEFAULT_FEE_ACCOUNTANT,
        oracle_sampler: OracleSampler = DEFAULT_ORACLE_SAMPLER,
        oracle_enabled: bool = False,
    ) -> None:
        if len(tokens) != NUM_TOKENS or len(scaling_factors) != NUM_TOKENS:
            raise LengthMismatch(
                f"E-CLP pools take {NUM_TOKENS} tokens, got {len(tokens)} tokens "
                f"and {len(scaling_factors)} scaling factors"
            )
        check_swap_fee(swap_fee_percentage)
        for factor in scaling_factors:
            check_scaling_factor(factor)

        engine.validate_params(params)
        if derived is None:
            derived = derive_params(params)
        engine.validate_derived_params_limits(params, derived)

        self.address = normalize_address(address)
        self.tokens = tuple(normalize_address(t) for t in tokens)
        self.scaling_factors = tuple(scaling_factors)
        self.params = params
        self.derived = derived
        self.swap_fee_percentage = swap_fee_percentage

        self.engine = engine
        self.ledger = ledger if ledger is not None else InMemoryShareLedger()
        self.controls = controls if controls is not None else PoolControls()
        self.fee_provider = (
            fee_provider if fee_provider is not None else StaticProtocolFeeProvider()
        )
        self.fee_accountant = fee_accountant
        self.oracle_sampler = oracle_sampler

        self._state = PoolState(oracle=OracleState(enabled=oracle_enabled))
        self._samples = SampleBuffer()
        self._lock = threading.RLock()

        logger.info(
            "eclp_pool_created",
            pool=self.address,
            tokens=self.tokens,
            swap_fee=str(swap_fee_percentage),
            oracle_enabled=oracle_enabled,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def last_invariant(self) -> LastInvariant:
        return self._state.last_invariant

    @property
    def oracle_state(self) -> OracleState:
        return self._state.oracle

    @property
    def samples(self) -> SampleBuffer:
        return self._samples

    def get_invariant(self, balances: Sequence[int]) -> int:
        """Point estimate of the invariant for native-decimal balances."""
        scaled = self._upscale(balances)
        return self.engine.calculate_invariant(scaled, self.params, self.derived)

    def get_price(self, balances: Sequence[int]) -> int:
        """Spot price of token 0 in units of token 1, 18 decimals."""
        scaled = self._upscale(balances)
        invariant = self.engine.calculate_invariant(scaled, self.params, self.derived)
        return self.engine.calculate_price(scaled, self.params, self.derived, invariant)

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def on_swap(
        self,
        request: SwapRequest,
        balance_token_in: int,
        balance_token_out: int,
        block: BlockContext,
    ) -> int:
        """Compute the other side of a swap.

        Args:
            request: Swap kind, token pair and the fixed amount
            balance_token_in: Pool balance of the input token, native decimals
            balance_token_out: Pool balance of the output token, native decimals
            block: Current block

        Returns:
            Amount out (GIVEN_IN, rounded down) or amount in including the
            swap fee (GIVEN_OUT, rounded up), native decimals

        Raises:
            PoolPaused: If the pool is paused
            InvalidTokenPair: If the tokens are not the pool's two tokens
            CurveDomainViolation: If the swap leaves the curve
        """
        with self._lock:
            self._ensure_not_paused("swap")

            token_in_is_first = self._resolve_token_pair(request.token_in, request.token_out)
            ix_in, ix_out = (0, 1) if token_in_is_first else (1, 0)

            native = [0, 0]
            native[ix_in] = balance_token_in
            native[ix_out] = balance_token_out
            balances = self._upscale(native)

            invariant, err = self.engine.calculate_invariant_with_error(
                balances, self.params, self.derived
            )
            bracket = InvariantBracket.from_estimate(invariant, err)

            oracle_update = self._prepare_oracle_update(
                balances, invariant, block, request.last_change_block
            )

            factor_in = self.scaling_factors[ix_in]
            factor_out = self.scaling_factors[ix_out]
            if request.kind is SwapKind.GIVEN_IN:
                amount_in = subtract_swap_fee_amount(request.amount, self.swap_fee_percentage)
                scaled_in = scale_up(amount_in, factor_in).value
                scaled_out = self.engine.calc_out_given_in(
                    balances, scaled_in, token_in_is_first, self.params, self.derived, bracket
                )
                amount = scale_down_down(Bfp.from_wei(scaled_out), factor_out)
            else:
                scaled_out = scale_up(request.amount, factor_out).value
                scaled_in = self.engine.calc_in_given_out(
                    balances, scaled_out, token_in_is_first, self.params, self.derived, bracket
                )
                amount_in = scale_down_up(Bfp.from_wei(scaled_in), factor_in)
                amount = add_swap_fee_amount(amount_in, self.swap_fee_percentage)

            logger.debug(
                "eclp_swap",
                pool=self.address,
                kind=request.kind.value,
                token_in_is_first=token_in_is_first,
                invariant_upper=bracket.upper,
                invariant_lower=bracket.lower,
                amount_given=request.amount,
                amount_calculated=amount,
            )

            state = self._next_state(self._state.last_invariant, oracle_update)
            self._commit(state, oracle_update)
            return amount

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def on_join_pool(
        self, request: JoinRequest, balances: Sequence[int], block: BlockContext
    ) -> JoinResult:
        """Process a join.

        The first join of an empty pool initializes it. Later joins only
        support ALL_TOKENS_IN_FOR_EXACT_BPT_OUT.

        Args:
            request: Join request carrying the kind tag in its user data
            balances: Current pool balances, native decimals
            block: Current block

        Raises:
            PoolPaused: If the pool is paused
            UnsupportedJoinKind: If the kind is not supported
            CapExceeded: If the liquidity cap would be exceeded
            Uint256Overflow: If a share balance or the supply would leave uint256
        """
        with self._lock:
            self._ensure_not_paused("join")
            if self.ledger.total_supply() == 0:
                return self.on_initialize_pool(request, block)

            scaled = self._upscale(balances)
            invariant_before = self._invariant_before_action(scaled)
            oracle_update = self._prepare_oracle_update(
                scaled, invariant_before, block, request.last_change_block
            )
            supply = self.ledger.total_supply()
            protocol_fees = self._due_protocol_fees(invariant_before, supply)
            supply += protocol_fees.total

            user_data = request.user_data
            if user_data.kind is not JoinKind.ALL_TOKENS_IN_FOR_EXACT_BPT_OUT:
                logger.warning(
                    "eclp_join_kind_unsupported", pool=self.address, kind=user_data.kind.value
                )
                raise UnsupportedJoinKind(f"Join kind {user_data.kind.value} is not supported")
            if user_data.bpt_amount_out is None:
                raise UnsupportedJoinKind("Proportional join requires bptAmountOut")

            bpt_amount_out = user_data.bpt_amount_out
            self._check_join_shares(request.recipient, bpt_amount_out, supply, protocol_fees)

            bpt_ratio = Bfp(bpt_amount_out).div_up(Bfp(supply))
            scaled_in = [Bfp(b).mul_up(bpt_ratio).value for b in scaled]
            amounts_in = downscale_amounts_up(scaled_in, self.scaling_factors)

            new_invariant = liquidity_invariant_update(
                invariant_before, bpt_amount_out, supply, is_increase_liq=True
            )

            state = self._next_state(
                KnownInvariant(new_invariant), oracle_update, supply + bpt_amount_out
            )
            self._write_shares(protocol_fees, mint=(request.recipient, bpt_amount_out))
            self._commit(state, oracle_update)

            logger.info(
                "eclp_join",
                pool=self.address,
                recipient=request.recipient,
                bpt_amount_out=bpt_amount_out,
                amounts_in=amounts_in,
                invariant_before=invariant_before,
                invariant_after=new_invariant,
                protocol_fee_shares=protocol_fees.total,
            )
            return JoinResult(
                bpt_amount_out=bpt_amount_out,
                amounts_in=amounts_in,
                protocol_fees=protocol_fees,
            )

    def on_initialize_pool(self, request: JoinRequest, block: BlockContext) -> JoinResult:
        """First join: mint twice the invariant of the supplied amounts.

        The vault guarantees this is only reached while the share supply is
        zero. No protocol fees apply since there is no earlier invariant.

        Raises:
            UnsupportedJoinKind: If the kind is not INIT
            LengthMismatch: Unless exactly two amounts are supplied
        """
        with self._lock:
            self._ensure_not_paused("join")
            user_data = request.user_data
            if user_data.kind is not JoinKind.INIT:
                logger.warning(
                    "eclp_init_kind_unsupported", pool=self.address, kind=user_data.kind.value
                )
                raise UnsupportedJoinKind(
                    f"Pool is uninitialized, join kind {user_data.kind.value} is not supported"
                )

            amounts_in = list(user_data.amounts_in)
            if len(amounts_in) != NUM_TOKENS:
                raise LengthMismatch(f"Expected {NUM_TOKENS} amounts, got {len(amounts_in)}")

            scaled = upscale_amounts(amounts_in, self.scaling_factors)
            invariant = self.engine.calculate_invariant(scaled, self.params, self.derived)
            bpt_amount_out = invariant * 2

            state = self._next_state(KnownInvariant(invariant), None, bpt_amount_out)
            self.ledger.mint(request.recipient, bpt_amount_out)
            self._commit(state, None)

            logger.info(
                "eclp_initialized",
                pool=self.address,
                recipient=request.recipient,
                amounts_in=amounts_in,
                invariant=invariant,
                bpt_amount_out=bpt_amount_out,
                block=block.number,
            )
            return JoinResult(bpt_amount_out=bpt_amount_out, amounts_in=amounts_in)

    # ------------------------------------------------------------------
    # Exits
    # ------------------------------------------------------------------

    def on_exit_pool(
        self, request: ExitRequest, balances: Sequence[int], block: BlockContext
    ) -> ExitResult:
        """Process an exit.

        Only EXACT_BPT_IN_FOR_TOKENS_OUT is supported. It stays available
        while the pool is paused as an emergency withdrawal; a paused exit
        skips invariant, oracle and fee work and leaves the last invariant
        Unknown.

        Args:
            request: Exit request carrying the kind tag in its user data
            balances: Current pool balances, native decimals
            block: Current block

        Raises:
            UnsupportedExitKind: If the kind is not supported
            InsufficientShares: If the sender holds fewer shares than bpt_amount_in
        """
        with self._lock:
            paused = self.controls.paused
            scaled = self._upscale(balances)
            supply = self.ledger.total_supply()

            invariant_before: int | None = None
            oracle_update: OracleUpdate | None = None
            protocol_fees = ProtocolFeeShares.none()
            if not paused:
                invariant_before = self._invariant_before_action(scaled)
                oracle_update = self._prepare_oracle_update(
                    scaled, invariant_before, block, request.last_change_block
                )
                protocol_fees = self._due_protocol_fees(invariant_before, supply)
                supply += protocol_fees.total

            user_data = request.user_data
            if user_data.kind is not ExitKind.EXACT_BPT_IN_FOR_TOKENS_OUT:
                logger.warning(
                    "eclp_exit_kind_unsupported", pool=self.address, kind=user_data.kind.value
                )
                raise UnsupportedExitKind(f"Exit kind {user_data.kind.value} is not supported")
            if user_data.bpt_amount_in is None:
                raise UnsupportedExitKind("Proportional exit requires bptAmountIn")

            bpt_amount_in = user_data.bpt_amount_in
            held = self._balance_after_fees(request.sender, protocol_fees)
            if held < bpt_amount_in:
                raise InsufficientShares(
                    f"{request.sender} holds {held} shares, exit needs {bpt_amount_in}"
                )

            bpt_ratio = Bfp(bpt_amount_in).div_down(Bfp(supply))
            scaled_out = [Bfp(b).mul_down(bpt_ratio).value for b in scaled]
            amounts_out = downscale_amounts_down(scaled_out, self.scaling_factors)

            new_last_invariant: LastInvariant
            if invariant_before is None:
                new_last_invariant = UNKNOWN_INVARIANT
            else:
                new_last_invariant = KnownInvariant(
                    liquidity_invariant_update(
                        invariant_before, bpt_amount_in, supply, is_increase_liq=False
                    )
                )

            state = self._next_state(new_last_invariant, oracle_update, supply - bpt_amount_in)
            self._write_shares(protocol_fees, burn=(request.sender, bpt_amount_in))
            self._commit(state, oracle_update)

            if paused:
                logger.info(
                    "eclp_last_invariant_invalidated",
                    pool=self.address,
                    reason="paused_exit",
                )
            logger.info(
                "eclp_exit",
                pool=self.address,
                sender=request.sender,
                paused=paused,
                bpt_amount_in=bpt_amount_in,
                amounts_out=amounts_out,
                invariant_before=invariant_before,
                protocol_fee_shares=protocol_fees.total,
            )
            return ExitResult(
                bpt_amount_in=bpt_amount_in,
                amounts_out=amounts_out,
                protocol_fees=protocol_fees,
            )

    # ------------------------------------------------------------------
    # Oracle
    # ------------------------------------------------------------------

    def enable_oracle(self) -> None:
        """Start recording oracle samples, seeding the cached logs."""
        with self._lock:
            oracle = OracleState(
                enabled=True,
                index=self._state.oracle.index,
                sample_creation_timestamp=self._state.oracle.sample_creation_timestamp,
            )
            last_invariant = self._state.last_invariant
            if isinstance(last_invariant, KnownInvariant):
                oracle = self.oracle_sampler.cache_logs(
                    oracle, last_invariant.value, self.ledger.total_supply()
                )
            self._state = PoolState(last_invariant=last_invariant, oracle=oracle)
            logger.info("eclp_oracle_enabled", pool=self.address)

    def get_latest(self, variable: OracleVariable) -> int:
        return queries.get_latest(self._samples, self._state.oracle.index, variable)

    def get_time_weighted_average(
        self, average_queries: Sequence[OracleAverageQuery], now: int
    ) -> list[int]:
        return queries.get_time_weighted_average(
            self._samples, self._state.oracle.index, average_queries, now
        )

    def get_past_accumulators(
        self, accumulator_queries: Sequence[OracleAccumulatorQuery], now: int
    ) -> list[int]:
        return queries.get_past_accumulators(
            self._samples, self._state.oracle.index, accumulator_queries, now
        )

    def get_largest_safe_query_window(self) -> int:
        return queries.get_largest_safe_query_window()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_not_paused(self, action: str) -> None:
        if self.controls.paused:
            logger.warning("eclp_action_rejected_paused", pool=self.address, action=action)
            raise PoolPaused(f"Pool is paused, {action} is disabled")

    def _upscale(self, balances: Sequence[int]) -> list[int]:
        return upscale_amounts(balances, self.scaling_factors)

    def _resolve_token_pair(self, token_in: str, token_out: str) -> bool:
        """Return True if token_in is the pool's first token.

        Raises:
            InvalidTokenPair: Unless (token_in, token_out) is one of the two
                orderings of the pool's tokens
        """
        pair = (normalize_address(token_in), normalize_address(token_out))
        if pair == self.tokens:
            return True
        if pair == (self.tokens[1], self.tokens[0]):
            return False
        logger.warning(
            "eclp_swap_invalid_token_pair",
            pool=self.address,
            token_in=pair[0],
            token_out=pair[1],
        )
        raise InvalidTokenPair(f"Tokens {pair[0]} -> {pair[1]} are not this pool's pair")

    def _invariant_before_action(self, scaled_balances: Sequence[int]) -> int:
        # Point estimate: the lower side of the bracket
        invariant, _ = self.engine.calculate_invariant_with_error(
            scaled_balances, self.params, self.derived
        )
        return invariant

    def _prepare_oracle_update(
        self,
        scaled_balances: Sequence[int],
        invariant: int,
        block: BlockContext,
        last_change_block: int,
    ) -> OracleUpdate | None:
        oracle = self._state.oracle
        if not self.oracle_sampler.is_due(oracle, block, last_change_block):
            return None
        spot_price = self.engine.calculate_price(
            scaled_balances, self.params, self.derived, invariant
        )
        return self.oracle_sampler.prepare_update(
            oracle, self._samples, block, last_change_block, spot_price, invariant
        )

    def _due_protocol_fees(self, invariant_before: int, supply: int) -> ProtocolFeeShares:
        config = self.fee_provider.get_protocol_fee_config(self.address)
        return self.fee_accountant.due_protocol_fees(
            self._state.last_invariant, invariant_before, supply, config
        )

    def _balance_after_fees(self, address: str, fees: ProtocolFeeShares) -> int:
        """Share balance of `address` once this action's fee shares are minted."""
        key = normalize_address(address)
        balance = self.ledger.balance_of(address)
        if fees.gyro_shares > 0 and normalize_address(fees.gyro_treasury) == key:
            balance += fees.gyro_shares
        if fees.bal_shares > 0 and normalize_address(fees.bal_treasury) == key:
            balance += fees.bal_shares
        return balance

    def _check_join_shares(
        self, recipient: str, bpt_amount_out: int, supply: int, fees: ProtocolFeeShares
    ) -> None:
        """Validate the share mint of a join before any ledger write.

        `supply` already includes the fee shares.

        Raises:
            Uint256Overflow: If the recipient balance or the supply leaves uint256
            CapExceeded: If an enabled cap would be exceeded
        """
        balance_after = (S(self._balance_after_fees(recipient, fees)) + bpt_amount_out).to_uint256()
        supply_after = (S(supply) + bpt_amount_out).to_uint256()

        cap = self.controls.cap
        if not cap.cap_enabled:
            return
        if balance_after > cap.per_address_cap:
            logger.warning(
                "eclp_join_cap_exceeded",
                pool=self.address,
                recipient=recipient,
                balance_after=balance_after,
                per_address_cap=cap.per_address_cap,
            )
            raise CapExceeded(
                f"Recipient balance {balance_after} would exceed cap {cap.per_address_cap}"
            )
        if supply_after > cap.global_cap:
            logger.warning(
                "eclp_join_cap_exceeded",
                pool=self.address,
                supply_after=supply_after,
                global_cap=cap.global_cap,
            )
            raise CapExceeded(f"Total supply {supply_after} would exceed cap {cap.global_cap}")

    def _write_shares(
        self,
        fees: ProtocolFeeShares,
        *,
        mint: tuple[str, int] | None = None,
        burn: tuple[str, int] | None = None,
    ) -> None:
        """Mint fee shares, then mint or burn the user's shares, as one step.

        If a ledger write fails, the writes already made are reverted before
        the error propagates.
        """
        ledger = self.ledger
        writes: list[tuple[Callable[[str, int], None], Callable[[str, int], None], str, int]] = []
        if fees.gyro_shares > 0:
            writes.append((ledger.mint, ledger.burn, fees.gyro_treasury, fees.gyro_shares))
        if fees.bal_shares > 0:
            writes.append((ledger.mint, ledger.burn, fees.bal_treasury, fees.bal_shares))
        if mint is not None:
            writes.append((ledger.mint, ledger.burn, *mint))
        if burn is not None:
            writes.append((ledger.burn, ledger.mint, *burn))

        done: list[tuple[Callable[[str, int], None], str, int]] = []
        try:
            for apply, undo, address, amount in writes:
                apply(address, amount)
                done.append((undo, address, amount))
        except Exception:
            for undo, address, amount in reversed(done):
                undo(address, amount)
            logger.error("eclp_share_writes_reverted", pool=self.address, reverted=len(done))
            raise

    def _next_state(
        self,
        last_invariant: LastInvariant,
        oracle_update: OracleUpdate | None,
        supply_after: int | None = None,
    ) -> PoolState:
        """Pool state after the action, computed before anything is written."""
        oracle = self._state.oracle if oracle_update is None else oracle_update.state
        if supply_after is not None and isinstance(last_invariant, KnownInvariant):
            oracle = self.oracle_sampler.cache_logs(oracle, last_invariant.value, supply_after)
        return PoolState(last_invariant=last_invariant, oracle=oracle)

    def _commit(self, state: PoolState, oracle_update: OracleUpdate | None) -> None:
        """Replace the pool state with the action's results."""
        if oracle_update is not None:
            self._samples.write(oracle_update.index, oracle_update.sample)
        self._state = state
