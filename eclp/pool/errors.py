"""Pool error classes.

Every error aborts the whole action. Nothing the pool tracks is mutated
before it is raised.
"""


class PoolError(Exception):
    """Base error for pool actions."""

    pass


class InvalidTokenPair(PoolError):
    """Swap tokens are not the pool's two tokens in either order."""

    pass


class LengthMismatch(PoolError):
    """Amount list length does not match the number of pool tokens."""

    pass


class UnsupportedJoinKind(PoolError):
    """Join kind is not supported by this pool."""

    pass


class UnsupportedExitKind(PoolError):
    """Exit kind is not supported by this pool."""

    pass


class CapExceeded(PoolError):
    """Join would push the recipient or the pool above the liquidity cap."""

    pass


class PoolPaused(PoolError):
    """Action is disabled while the pool is paused."""

    pass


class InvalidFeeError(PoolError):
    """Swap fee must be in range [0, 1)."""

    pass


class InvalidScalingFactorError(PoolError):
    """Scaling factor must be positive."""

    pass


class InsufficientShares(PoolError):
    """Sender does not hold enough shares for the exit."""

    pass
