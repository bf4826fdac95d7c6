"""Low-resolution logarithms for oracle storage.

Oracle samples store natural logs with 4 decimals instead of 18, which keeps
accumulators small while giving about 0.05% resolution on the underlying
value. Mirrors Balancer's LogCompression library.
"""

from eclp.math.fixed_point import div_trunc, exp, ln

# 18 - 4 decimals
LOG_COMPRESSION_FACTOR = 10**14
HALF_LOG_COMPRESSION_FACTOR = LOG_COMPRESSION_FACTOR // 2


def to_low_res_log(value: int) -> int:
    """Natural log of an 18-decimal value with 4 decimals of precision.

    Rounds half away from zero.

    Raises:
        OutOfBounds: If value is not positive
    """
    log = ln(value)
    if log > 0:
        log += HALF_LOG_COMPRESSION_FACTOR
    else:
        log -= HALF_LOG_COMPRESSION_FACTOR
    return div_trunc(log, LOG_COMPRESSION_FACTOR)


def from_low_res_log(value: int) -> int:
    """Inverse of to_low_res_log, returning an 18-decimal value."""
    return exp(value * LOG_COMPRESSION_FACTOR)
