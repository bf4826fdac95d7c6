"""Fixed-point primitives for the pool.

- Bfp: unsigned 18-decimal arithmetic with explicit rounding
- signed_fixed_point: signed 18/38-decimal helpers for the curve math
- log_compression: 4-decimal logs used by the price oracle
"""

from eclp.math.fixed_point import Bfp

__all__ = ["Bfp"]
